import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import models to ensure they're registered with SQLAlchemy Base
from . import models  # noqa: F401
from .cache import register_cache_invalidation
from .config import FRONTEND_URL, LOG_LEVEL
from .database import Base, SessionLocal, engine
from .domain.business_functions.router import router as business_functions_router
from .domain.jobs.impact import register_impact_recalculation
from .domain.jobs.router import router as jobs_router
from .domain.mappings.router import pi_job_router, pi_qbo_router, qbo_job_router
from .domain.pis.router import router as pis_router
from .domain.progress.router import router as progress_router
from .domain.qbos.router import router as qbos_router
from .events import event_bus

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def register_subscribers(session_factory=SessionLocal):
    """Wire derived-data updates to the event bus; returns a function that unwires them"""
    handles = [
        register_cache_invalidation(event_bus),
        register_impact_recalculation(event_bus, session_factory),
    ]

    def unregister():
        for handle in handles:
            handle()

    return unregister


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        if "already exists" in str(e):
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    unregister = register_subscribers()
    yield
    unregister()
    logger.info("Application shutting down...")


app = FastAPI(title="Ecofire API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error in the {success, error} envelope"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Validation failed",
            "details": jsonable_errors(exc),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Error in {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal Server Error"})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry the raised ValueError itself, which is not JSON serializable
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# /qbos/progress is registered before /qbos/{qbo_id}
app.include_router(progress_router)
app.include_router(qbos_router)
app.include_router(pis_router)
app.include_router(jobs_router)
app.include_router(pi_qbo_router)
app.include_router(pi_job_router)
app.include_router(qbo_job_router)
app.include_router(business_functions_router)


@app.get("/health")
async def health():
    return {"success": True, "status": "ok"}
