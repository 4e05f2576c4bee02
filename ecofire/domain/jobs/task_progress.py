"""Job completion measured by its tasks"""

import math

from sqlalchemy.orm import Session

from .repository import TaskRepository


class TaskProgressService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TaskRepository()

    def calculate_job_progress(self, job_id: str, user_id: str) -> int:
        """Percentage of the job's tasks that are completed, 0 when it has none"""
        tasks = self.repo.get_tasks_by_job(self.db, job_id, user_id)
        if not tasks:
            return 0
        completed = sum(1 for task in tasks if task.completed)
        # Half-up rounding: 1 of 8 tasks done reads as 13%
        return math.floor(completed / len(tasks) * 100 + 0.5)

    def calculate_multiple_jobs_progress(self, job_ids: list[str], user_id: str) -> dict[str, int]:
        return {job_id: self.calculate_job_progress(job_id, user_id) for job_id in job_ids}

    def get_task_counts(self, job_id: str, user_id: str) -> dict[str, int]:
        tasks = self.repo.get_tasks_by_job(self.db, job_id, user_id)
        return {
            "total": len(tasks),
            "completed": sum(1 for task in tasks if task.completed),
        }
