"""Job repository - Database operations for jobs and their tasks"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Job, PIJobMapping, Task


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_jobs(
        db: Session,
        user_id: str,
        is_done: Optional[bool] = None,
        include_deleted: bool = False,
    ) -> list[Job]:
        """Get jobs for a user, oldest first"""
        query = db.query(Job).filter(Job.user_id == user_id)

        if not include_deleted:
            query = query.filter(Job.is_deleted.is_(False))
        if is_done is not None:
            query = query.filter(Job.is_done.is_(is_done))

        return query.order_by(Job.created_date.asc(), Job.id.asc()).all()

    @staticmethod
    def get_job_by_id(db: Session, job_id: str, user_id: str) -> Optional[Job]:
        return (
            db.query(Job)
            .filter(Job.id == job_id, Job.user_id == user_id, Job.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def create_job(db: Session, user_id: str, **job_data) -> Job:
        job = Job(user_id=user_id, **job_data)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def update_job(db: Session, job: Job, **updates) -> Job:
        for key, value in updates.items():
            if hasattr(job, key):
                setattr(job, key, value)

        db.commit()
        db.refresh(job)
        return job

    @staticmethod
    def soft_delete_job(db: Session, job: Job) -> None:
        job.is_deleted = True
        db.commit()

    @staticmethod
    def delete_job(db: Session, job: Job) -> None:
        """Hard delete a job with its tasks and output mappings"""
        db.delete(job)
        db.commit()

    @staticmethod
    def set_impacts(db: Session, user_id: str, impacts: dict[str, float]) -> int:
        """
        Overwrite impact on every job of the user: jobs listed in impacts get
        their value, all others are reset to 0. Returns the number of jobs with
        a mapped impact.
        """
        updated = 0
        for job in db.query(Job).filter(Job.user_id == user_id).all():
            job.impact = impacts.get(job.id, 0)
            if job.id in impacts:
                updated += 1
        db.commit()
        return updated

    @staticmethod
    def get_job_mappings(db: Session, user_id: str) -> list[PIJobMapping]:
        return db.query(PIJobMapping).filter(PIJobMapping.user_id == user_id).all()

    @staticmethod
    def copy_pi_mappings(db: Session, source: Job, job_id: str, notes: str) -> list[PIJobMapping]:
        """Give job_id the same output mappings as source"""
        copies = [
            PIJobMapping(
                user_id=mapping.user_id,
                job_id=job_id,
                pi_id=mapping.pi_id,
                pi_impact_value=mapping.pi_impact_value,
                pi_target=mapping.pi.target_value if mapping.pi else mapping.pi_target,
                notes=notes,
            )
            for mapping in source.pi_mappings
        ]
        db.add_all(copies)
        db.commit()
        return copies


class TaskRepository:
    """Repository for task database operations"""

    @staticmethod
    def get_tasks_by_job(db: Session, job_id: str, user_id: str) -> list[Task]:
        return (
            db.query(Task)
            .filter(Task.job_id == job_id, Task.user_id == user_id)
            .order_by(Task.created_at.asc(), Task.id.asc())
            .all()
        )

    @staticmethod
    def get_task_by_id(db: Session, task_id: str, job_id: str, user_id: str) -> Optional[Task]:
        return (
            db.query(Task)
            .filter(Task.id == task_id, Task.job_id == job_id, Task.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_task(db: Session, user_id: str, job_id: str, **task_data) -> Task:
        task = Task(user_id=user_id, job_id=job_id, **task_data)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def copy_tasks(db: Session, tasks: list[Task], job_id: str) -> list[Task]:
        """Copy tasks under job_id, incomplete and undated, in the same order"""
        copies = [
            Task(
                user_id=task.user_id,
                job_id=job_id,
                title=task.title,
                owner=task.owner,
                required_hours=task.required_hours,
                focus_level=task.focus_level,
                joy_level=task.joy_level,
                notes=task.notes,
                completed=False,
            )
            for task in tasks
        ]
        db.add_all(copies)
        db.commit()
        for task in copies:
            db.refresh(task)
        return copies

    @staticmethod
    def update_task(db: Session, task: Task, **updates) -> Task:
        for key, value in updates.items():
            if hasattr(task, key):
                setattr(task, key, value)

        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete_task(db: Session, task: Task) -> None:
        db.delete(task)
        db.commit()
