"""Job router - FastAPI endpoints for jobs, tasks, impact and task progress"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...errors import ValidationError
from ...models import Job, Task
from .impact import recalculate_job_impacts
from .schemas import (
    JobCreate,
    JobDuplicate,
    JobResponse,
    JobUpdate,
    TaskCountsRequest,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from .service import JobService
from .task_progress import TaskProgressService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


def get_task_progress_service(db: Session = Depends(get_db)) -> TaskProgressService:
    return TaskProgressService(db)


def to_response(job: Job) -> dict:
    return JobResponse(
        id=job.id,
        title=job.title,
        notes=job.notes,
        businessFunctionId=job.business_function_id,
        dueDate=job.due_date,
        createdDate=job.created_date,
        isDone=job.is_done,
        impact=job.impact,
        nextTaskId=job.next_task_id,
        tasks=[task.id for task in job.tasks],
        isDeleted=job.is_deleted,
    ).model_dump(mode="json")


def task_to_response(task: Task) -> dict:
    return TaskResponse(
        id=task.id,
        jobId=task.job_id,
        title=task.title,
        owner=task.owner,
        date=task.date,
        requiredHours=task.required_hours,
        focusLevel=task.focus_level,
        joyLevel=task.joy_level,
        notes=task.notes,
        completed=task.completed,
    ).model_dump(mode="json")


# ============================================================================
# DERIVED DATA
# ============================================================================


@router.post("/calculate-impact")
async def calculate_impact(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Recompute every job's impact from its output mappings"""
    result = recalculate_job_impacts(db, current_user.view_id)
    return {"success": True, **result}


@router.get("/progress")
async def get_jobs_progress(
    ids: list[str] = Query(default=[]),
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskProgressService = Depends(get_task_progress_service),
):
    """Task completion percentage for each requested job"""
    if not ids:
        raise ValidationError("At least one job ID is required")
    return {
        "success": True,
        "data": service.calculate_multiple_jobs_progress(ids, current_user.view_id),
    }


@router.post("/progress")
async def get_task_counts(
    body: TaskCountsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskProgressService = Depends(get_task_progress_service),
):
    """Total and completed task counts for one job"""
    if not body.jobId:
        raise ValidationError("Job ID is required")
    return {"success": True, "data": service.get_task_counts(body.jobId, current_user.view_id)}


@router.post("/duplicate", status_code=201)
async def duplicate_job(
    data: JobDuplicate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Copy a job with its tasks and output mappings"""
    job = service.duplicate_job(data, current_user.view_id)
    return {"success": True, "data": to_response(job)}


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("")
async def get_jobs(
    is_done: Optional[bool] = Query(None, alias="isDone"),
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Get all jobs, optionally only done or only open ones"""
    jobs = service.get_jobs(current_user.view_id, is_done=is_done)
    return {"success": True, "count": len(jobs), "data": [to_response(j) for j in jobs]}


@router.post("", status_code=201)
async def create_job(
    data: JobCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    job = service.create_job(data, current_user.view_id)
    return {"success": True, "data": to_response(job)}


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    job = service.get_job(job_id, current_user.view_id)
    return {"success": True, "data": to_response(job)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    data: JobUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    job = service.update_job(job_id, data, current_user.view_id)
    return {"success": True, "data": to_response(job)}


@router.post("/{job_id}/toggle")
async def toggle_job(
    job_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Mark a job done, or reopen it"""
    job = service.toggle_job(job_id, current_user.view_id)
    return {"success": True, "data": to_response(job)}


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    hard: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    result = service.delete_job(job_id, current_user.view_id, hard=hard)
    return {"success": True, **result}


# ============================================================================
# TASKS
# ============================================================================


@router.get("/{job_id}/tasks")
async def get_tasks(
    job_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    tasks = service.get_tasks(job_id, current_user.view_id)
    return {"success": True, "count": len(tasks), "data": [task_to_response(t) for t in tasks]}


@router.post("/{job_id}/tasks", status_code=201)
async def create_task(
    job_id: str,
    data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    task = service.create_task(job_id, data, current_user.view_id)
    return {"success": True, "data": task_to_response(task)}


@router.put("/{job_id}/tasks/{task_id}")
async def update_task(
    job_id: str,
    task_id: str,
    data: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    task = service.update_task(job_id, task_id, data, current_user.view_id)
    return {"success": True, "data": task_to_response(task)}


@router.delete("/{job_id}/tasks/{task_id}")
async def delete_task(
    job_id: str,
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    result = service.delete_task(job_id, task_id, current_user.view_id)
    return {"success": True, **result}
