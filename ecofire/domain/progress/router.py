"""Progress router - outcome progress chart data"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ..qbos.schemas import QBOProgressRow
from .service import ProgressService

router = APIRouter(prefix="/qbos", tags=["QBOs"])


def get_progress_service(db: Session = Depends(get_db)) -> ProgressService:
    return ProgressService(db)


@router.get("/progress")
async def get_qbo_progress(
    refresh: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
):
    """Achieved vs expected progress for every outcome, in outcome order"""
    rows = service.get_chart_data(current_user.view_id, use_cache=not refresh)
    return {
        "success": True,
        "count": len(rows),
        "data": [QBOProgressRow(**row).model_dump() for row in rows],
    }
