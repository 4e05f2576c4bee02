"""Mapping routers - FastAPI endpoints for PI-QBO and PI-Job mappings, and the jobs reaching a QBO"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...models import PIJobMapping, PIQBOMapping
from ..jobs.router import to_response as job_to_response
from .schemas import (
    PIJobMappingCreate,
    PIJobMappingResponse,
    PIJobMappingUpdate,
    PIQBOMappingCreate,
    PIQBOMappingResponse,
    PIQBOMappingUpdate,
)
from .service import MappingService, QBOJob

pi_qbo_router = APIRouter(prefix="/pi-qbo-mappings", tags=["PI-QBO Mappings"])
pi_job_router = APIRouter(prefix="/pi-job-mappings", tags=["PI-Job Mappings"])
qbo_job_router = APIRouter(prefix="/qbo-job-mappings", tags=["QBO-Job Mappings"])


def get_mapping_service(db: Session = Depends(get_db)) -> MappingService:
    """Dependency injection for MappingService"""
    return MappingService(db)


def pi_qbo_to_response(mapping: PIQBOMapping) -> dict:
    # Targets come from the referenced records; stored snapshots only cover dangling rows
    pi, qbo = mapping.pi, mapping.qbo
    return PIQBOMappingResponse(
        id=mapping.id,
        piId=mapping.pi_id,
        qboId=mapping.qbo_id,
        piName=pi.name if pi else None,
        qboName=qbo.name if qbo else None,
        piTarget=pi.target_value if pi else mapping.pi_target,
        qboTarget=qbo.target_value if qbo else mapping.qbo_target,
        qboImpact=mapping.qbo_impact,
        notes=mapping.notes,
    ).model_dump()


def pi_job_to_response(mapping: PIJobMapping) -> dict:
    pi, job = mapping.pi, mapping.job
    return PIJobMappingResponse(
        id=mapping.id,
        jobId=mapping.job_id,
        piId=mapping.pi_id,
        jobName=job.title if job else None,
        piName=pi.name if pi else None,
        piImpactValue=mapping.pi_impact_value,
        piTarget=pi.target_value if pi else mapping.pi_target,
        notes=mapping.notes,
    ).model_dump()


def qbo_job_to_response(qbo_job: QBOJob, include_details: bool) -> dict:
    response = job_to_response(qbo_job.job)
    if include_details:
        response["impactPaths"] = qbo_job.impact_paths
        response["totalQBOContribution"] = qbo_job.total_contribution
    return response


# ============================================================================
# PI -> QBO
# ============================================================================


@pi_qbo_router.get("")
async def get_pi_qbo_mappings(
    pi_id: Optional[str] = Query(None, alias="piId"),
    qbo_id: Optional[str] = Query(None, alias="qboId"),
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    """Get all PI-QBO mappings, or those of one PI or one QBO"""
    mappings = service.get_pi_qbo_mappings(current_user.view_id, pi_id=pi_id, qbo_id=qbo_id)
    return {
        "success": True,
        "count": len(mappings),
        "data": [pi_qbo_to_response(m) for m in mappings],
    }


@pi_qbo_router.post("", status_code=201)
async def create_pi_qbo_mapping(
    data: PIQBOMappingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.create_pi_qbo_mapping(data, current_user.view_id)
    return {"success": True, "data": pi_qbo_to_response(mapping)}


@pi_qbo_router.get("/{mapping_id}")
async def get_pi_qbo_mapping(
    mapping_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.get_pi_qbo_mapping(mapping_id, current_user.view_id)
    return {"success": True, "data": pi_qbo_to_response(mapping)}


@pi_qbo_router.put("/{mapping_id}")
async def update_pi_qbo_mapping(
    mapping_id: str,
    data: PIQBOMappingUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.update_pi_qbo_mapping(mapping_id, data, current_user.view_id)
    return {"success": True, "data": pi_qbo_to_response(mapping)}


@pi_qbo_router.delete("/{mapping_id}")
async def delete_pi_qbo_mapping(
    mapping_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    result = service.delete_pi_qbo_mapping(mapping_id, current_user.view_id)
    return {"success": True, **result}


# ============================================================================
# Job -> PI
# ============================================================================


@pi_job_router.get("")
async def get_pi_job_mappings(
    job_id: Optional[str] = Query(None, alias="jobId"),
    pi_id: Optional[str] = Query(None, alias="piId"),
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    """Get all PI-Job mappings, or those of one job or one PI"""
    mappings = service.get_pi_job_mappings(current_user.view_id, job_id=job_id, pi_id=pi_id)
    return {
        "success": True,
        "count": len(mappings),
        "data": [pi_job_to_response(m) for m in mappings],
    }


@pi_job_router.post("", status_code=201)
async def create_pi_job_mapping(
    data: PIJobMappingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.create_pi_job_mapping(data, current_user.view_id)
    return {"success": True, "data": pi_job_to_response(mapping)}


@pi_job_router.get("/{mapping_id}")
async def get_pi_job_mapping(
    mapping_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.get_pi_job_mapping(mapping_id, current_user.view_id)
    return {"success": True, "data": pi_job_to_response(mapping)}


@pi_job_router.put("/{mapping_id}")
async def update_pi_job_mapping(
    mapping_id: str,
    data: PIJobMappingUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    mapping = service.update_pi_job_mapping(mapping_id, data, current_user.view_id)
    return {"success": True, "data": pi_job_to_response(mapping)}


@pi_job_router.delete("/{mapping_id}")
async def delete_pi_job_mapping(
    mapping_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    result = service.delete_pi_job_mapping(mapping_id, current_user.view_id)
    return {"success": True, **result}


# ============================================================================
# QBO -> jobs
# ============================================================================


@qbo_job_router.get("")
async def get_qbo_jobs(
    qbo_id: Optional[str] = Query(None, alias="qboId"),
    include_details: bool = Query(False, alias="includeDetails"),
    current_user: CurrentUser = Depends(get_current_user),
    service: MappingService = Depends(get_mapping_service),
):
    """Open jobs that move a QBO forward through any of its PIs"""
    qbo_jobs = service.get_qbo_jobs(qbo_id, current_user.view_id)
    return {
        "success": True,
        "count": len(qbo_jobs),
        "data": [qbo_job_to_response(q, include_details) for q in qbo_jobs],
    }
