"""PI router - FastAPI endpoints for output operations"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...models import PI
from .schemas import PICreate, PIResponse, PIUpdate
from .service import PIService

router = APIRouter(prefix="/pis", tags=["PIs"])


def get_pi_service(db: Session = Depends(get_db)) -> PIService:
    """Dependency injection for PIService"""
    return PIService(db)


def to_response(pi: PI) -> dict:
    return PIResponse(
        id=pi.id,
        name=pi.name,
        unit=pi.unit,
        beginningValue=pi.beginning_value,
        targetValue=pi.target_value,
        notes=pi.notes,
    ).model_dump()


@router.get("")
async def get_pis(
    current_user: CurrentUser = Depends(get_current_user),
    service: PIService = Depends(get_pi_service),
):
    """Get all outputs"""
    pis = service.get_pis(current_user.view_id)
    return {"success": True, "count": len(pis), "data": [to_response(p) for p in pis]}


@router.post("", status_code=201)
async def create_pi(
    data: PICreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: PIService = Depends(get_pi_service),
):
    pi = service.create_pi(data, current_user.view_id)
    return {"success": True, "data": to_response(pi)}


@router.get("/{pi_id}")
async def get_pi(
    pi_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PIService = Depends(get_pi_service),
):
    pi = service.get_pi(pi_id, current_user.view_id)
    return {"success": True, "data": to_response(pi)}


@router.put("/{pi_id}")
async def update_pi(
    pi_id: str,
    data: PIUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: PIService = Depends(get_pi_service),
):
    pi = service.update_pi(pi_id, data, current_user.view_id)
    return {"success": True, "data": to_response(pi)}


@router.delete("/{pi_id}")
async def delete_pi(
    pi_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PIService = Depends(get_pi_service),
):
    result = service.delete_pi(pi_id, current_user.view_id)
    return {"success": True, **result}
