"""QBO router - FastAPI endpoints for outcome operations"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...models import QBO
from .schemas import QBOCreate, QBOResponse, QBOUpdate
from .service import QBOService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/qbos", tags=["QBOs"])


def get_qbo_service(db: Session = Depends(get_db)) -> QBOService:
    """Dependency injection for QBOService"""
    return QBOService(db)


def to_response(qbo: QBO) -> dict:
    return QBOResponse(
        id=qbo.id,
        name=qbo.name,
        unit=qbo.unit,
        beginningValue=qbo.beginning_value,
        currentValue=qbo.current_value,
        targetValue=qbo.target_value,
        deadline=qbo.deadline,
        points=qbo.points,
        notes=qbo.notes,
    ).model_dump(mode="json")


@router.get("")
async def get_qbos(
    current_user: CurrentUser = Depends(get_current_user),
    service: QBOService = Depends(get_qbo_service),
):
    """Get all outcomes"""
    qbos = service.get_qbos(current_user.view_id)
    return {"success": True, "count": len(qbos), "data": [to_response(q) for q in qbos]}


@router.post("", status_code=201)
async def create_qbo(
    data: QBOCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: QBOService = Depends(get_qbo_service),
):
    """Create a new outcome"""
    qbo = service.create_qbo(data, current_user.view_id)
    return {"success": True, "data": to_response(qbo)}


@router.get("/{qbo_id}")
async def get_qbo(
    qbo_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: QBOService = Depends(get_qbo_service),
):
    qbo = service.get_qbo(qbo_id, current_user.view_id)
    return {"success": True, "data": to_response(qbo)}


@router.put("/{qbo_id}")
async def update_qbo(
    qbo_id: str,
    data: QBOUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: QBOService = Depends(get_qbo_service),
):
    qbo = service.update_qbo(qbo_id, data, current_user.view_id)
    return {"success": True, "data": to_response(qbo)}


@router.delete("/{qbo_id}")
async def delete_qbo(
    qbo_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: QBOService = Depends(get_qbo_service),
):
    result = service.delete_qbo(qbo_id, current_user.view_id)
    return {"success": True, **result}
