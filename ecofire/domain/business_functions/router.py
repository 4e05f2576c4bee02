"""Business function router - FastAPI endpoints for business functions"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...models import BusinessFunction
from .schemas import BusinessFunctionCreate, BusinessFunctionResponse, BusinessFunctionUpdate
from .service import BusinessFunctionService

router = APIRouter(prefix="/business-functions", tags=["Business Functions"])


def get_business_function_service(db: Session = Depends(get_db)) -> BusinessFunctionService:
    """Dependency injection for BusinessFunctionService"""
    return BusinessFunctionService(db)


def to_response(function: BusinessFunction, job_count: int = 0) -> dict:
    return BusinessFunctionResponse(
        id=function.id,
        name=function.name,
        isDefault=function.is_default,
        jobCount=job_count,
    ).model_dump()


@router.get("")
async def get_business_functions(
    current_user: CurrentUser = Depends(get_current_user),
    service: BusinessFunctionService = Depends(get_business_function_service),
):
    """Get all business functions with their job counts, creating the defaults on first use"""
    functions = service.get_business_functions(current_user.view_id)
    return {
        "success": True,
        "count": len(functions),
        "data": [to_response(function, job_count) for function, job_count in functions],
    }


@router.post("", status_code=201)
async def create_business_function(
    data: BusinessFunctionCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: BusinessFunctionService = Depends(get_business_function_service),
):
    function = service.create_business_function(data, current_user.view_id)
    return {"success": True, "data": to_response(function)}


@router.patch("/{function_id}")
@router.put("/{function_id}")
async def update_business_function(
    function_id: str,
    data: BusinessFunctionUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: BusinessFunctionService = Depends(get_business_function_service),
):
    """Rename a business function"""
    function = service.update_business_function(function_id, data, current_user.view_id)
    job_count = service.count_jobs(function.id, current_user.view_id)
    return {"success": True, "data": to_response(function, job_count)}


@router.delete("/{function_id}")
async def delete_business_function(
    function_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BusinessFunctionService = Depends(get_business_function_service),
):
    result = service.delete_business_function(function_id, current_user.view_id)
    return {"success": True, **result}
