"""Job service - Business logic for jobs and their tasks"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ... import events
from ...errors import NotFoundError, ValidationError
from ...models import Job, Task
from ...shared.updates import changed_fields
from ..business_functions.repository import BusinessFunctionRepository
from .repository import JobRepository, TaskRepository
from .schemas import JobCreate, JobDuplicate, JobUpdate, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

JOB_UPDATE_COLUMNS = {
    "title": "title",
    "notes": "notes",
    "businessFunctionId": "business_function_id",
    "dueDate": "due_date",
    "isDone": "is_done",
    "nextTaskId": "next_task_id",
}
JOB_NULLABLE_FIELDS = ("notes", "businessFunctionId", "dueDate", "nextTaskId")

TASK_UPDATE_COLUMNS = {
    "title": "title",
    "owner": "owner",
    "date": "date",
    "requiredHours": "required_hours",
    "focusLevel": "focus_level",
    "joyLevel": "joy_level",
    "notes": "notes",
    "completed": "completed",
}
TASK_NULLABLE_FIELDS = ("owner", "date", "requiredHours", "focusLevel", "joyLevel", "notes")


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()
        self.task_repo = TaskRepository()

    def get_jobs(self, user_id: str, is_done: Optional[bool] = None) -> list[Job]:
        return self.repo.get_jobs(self.db, user_id, is_done=is_done)

    def get_job(self, job_id: str, user_id: str) -> Job:
        job = self.repo.get_job_by_id(self.db, job_id, user_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def _require_business_function(self, function_id: Optional[str], user_id: str) -> None:
        if function_id is None:
            return
        if not BusinessFunctionRepository.get_business_function_by_id(self.db, function_id, user_id):
            raise NotFoundError("Business function not found")

    def create_job(self, data: JobCreate, user_id: str) -> Job:
        logger.info(f"Creating job '{data.title}' for user_id: {user_id}")
        self._require_business_function(data.businessFunctionId, user_id)
        job = self.repo.create_job(
            self.db,
            user_id,
            title=data.title,
            notes=data.notes,
            business_function_id=data.businessFunctionId,
            due_date=data.dueDate,
            is_done=data.isDone,
        )
        events.notify(user_id, events.JOBS, "created", job.id)
        return job

    def update_job(self, job_id: str, data: JobUpdate, user_id: str) -> Job:
        job = self.get_job(job_id, user_id)

        updates = changed_fields(data, JOB_UPDATE_COLUMNS, JOB_NULLABLE_FIELDS)
        if updates.get("next_task_id") is not None:
            self._get_task(updates["next_task_id"], job_id, user_id)
        self._require_business_function(updates.get("business_function_id"), user_id)

        job = self.repo.update_job(self.db, job, **updates)
        events.notify(user_id, events.JOBS, "updated", job.id)
        return job

    def duplicate_job(self, data: JobDuplicate, user_id: str) -> Job:
        """
        Create a job from newJobData with copies of the source job's tasks and
        output mappings.

        Copied tasks start incomplete and undated. The copy of the source's next
        task becomes the new job's next task, or the first copied task when the
        source had none.
        """
        if not data.sourceJobId:
            raise ValidationError("Source job ID is required")
        source = self.repo.get_job_by_id(self.db, data.sourceJobId, user_id)
        if not source:
            raise NotFoundError("Source job not found")

        job = self.create_job(data.newJobData, user_id)

        source_tasks = self.task_repo.get_tasks_by_job(self.db, source.id, user_id)
        copies = self.task_repo.copy_tasks(self.db, source_tasks, job.id)
        if copies:
            copy_of = {original.id: copy for original, copy in zip(source_tasks, copies)}
            next_task = copy_of.get(source.next_task_id, copies[0])
            self.repo.update_job(self.db, job, next_task_id=next_task.id)
            events.notify(user_id, events.TASKS, "created", *(t.id for t in copies))

        mappings = self.repo.copy_pi_mappings(
            self.db, source, job.id, notes=f"Duplicated from job: {source.title}"
        )
        if mappings:
            # Impact recalculation runs on this event
            events.notify(user_id, events.PI_JOB_MAPPINGS, "created", *(m.id for m in mappings))
            self.db.refresh(job)

        logger.info(
            f"Duplicated job {source.id} into {job.id} with {len(copies)} tasks "
            f"and {len(mappings)} output mappings"
        )
        return job

    def toggle_job(self, job_id: str, user_id: str) -> Job:
        """Flip a job between done and not done"""
        job = self.get_job(job_id, user_id)
        job.is_done = not job.is_done
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"Job {job_id} marked {'done' if job.is_done else 'not done'}")
        events.notify(user_id, events.JOBS, "toggled", job.id)
        return job

    def delete_job(self, job_id: str, user_id: str, hard: bool = False) -> dict:
        """Soft delete by default; hard delete also removes tasks and output mappings"""
        job = self.get_job(job_id, user_id)
        if hard:
            self.repo.delete_job(self.db, job)
        else:
            self.repo.soft_delete_job(self.db, job)
        logger.info(f"Deleted job {job_id} for user_id: {user_id} (hard={hard})")
        events.notify(user_id, events.JOBS, "deleted", job_id)
        if hard:
            # The job's output mappings went with it
            events.notify(user_id, events.PI_JOB_MAPPINGS, "deleted")
        return {"message": "Job deleted successfully"}

    # Tasks

    def _get_task(self, task_id: str, job_id: str, user_id: str) -> Task:
        task = self.task_repo.get_task_by_id(self.db, task_id, job_id, user_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def get_tasks(self, job_id: str, user_id: str) -> list[Task]:
        self.get_job(job_id, user_id)
        return self.task_repo.get_tasks_by_job(self.db, job_id, user_id)

    def create_task(self, job_id: str, data: TaskCreate, user_id: str) -> Task:
        job = self.get_job(job_id, user_id)
        task = self.task_repo.create_task(
            self.db,
            user_id,
            job_id,
            title=data.title,
            owner=data.owner,
            date=data.date,
            required_hours=data.requiredHours,
            focus_level=data.focusLevel,
            joy_level=data.joyLevel,
            notes=data.notes,
            completed=data.completed,
        )
        # First task of a job becomes its next task
        if job.next_task_id is None:
            self.repo.update_job(self.db, job, next_task_id=task.id)
        events.notify(user_id, events.TASKS, "created", task.id)
        return task

    def update_task(self, job_id: str, task_id: str, data: TaskUpdate, user_id: str) -> Task:
        self.get_job(job_id, user_id)
        task = self._get_task(task_id, job_id, user_id)
        task = self.task_repo.update_task(
            self.db, task, **changed_fields(data, TASK_UPDATE_COLUMNS, TASK_NULLABLE_FIELDS)
        )
        events.notify(user_id, events.TASKS, "updated", task.id)
        return task

    def delete_task(self, job_id: str, task_id: str, user_id: str) -> dict:
        job = self.get_job(job_id, user_id)
        task = self._get_task(task_id, job_id, user_id)
        self.task_repo.delete_task(self.db, task)
        if job.next_task_id == task_id:
            job.next_task_id = None
            self.db.commit()
        events.notify(user_id, events.TASKS, "deleted", task_id)
        return {"message": "Task deleted successfully"}
