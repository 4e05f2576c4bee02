import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ecofire.db")

# Security - tokens are HS256 JWTs signed with SECRET_KEY
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Frontend base URL (CORS origin)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

# Redis cache for dashboard progress data (optional - cache fails open)
REDIS_URL = os.getenv("REDIS_URL")
PROGRESS_CACHE_TTL = int(os.getenv("PROGRESS_CACHE_TTL", "300"))

# Progress data client: base URL of the REST API the collections are read from
PROGRESS_API_BASE_URL = os.getenv("PROGRESS_API_BASE_URL", "http://localhost:8000")
PROGRESS_FETCH_TIMEOUT = float(os.getenv("PROGRESS_FETCH_TIMEOUT", "10"))
