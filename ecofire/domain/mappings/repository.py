"""Mapping repository - Database operations for PI-QBO and PI-Job mappings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Job, PI, PIJobMapping, PIQBOMapping, QBO


class MappingRepository:
    """Repository for mapping database operations"""

    # Referenced records

    @staticmethod
    def get_pi(db: Session, pi_id: str, user_id: str) -> Optional[PI]:
        return db.query(PI).filter(PI.id == pi_id, PI.user_id == user_id).first()

    @staticmethod
    def get_qbo(db: Session, qbo_id: str, user_id: str) -> Optional[QBO]:
        return db.query(QBO).filter(QBO.id == qbo_id, QBO.user_id == user_id).first()

    @staticmethod
    def get_job(db: Session, job_id: str, user_id: str) -> Optional[Job]:
        return (
            db.query(Job)
            .filter(Job.id == job_id, Job.user_id == user_id, Job.is_deleted.is_(False))
            .first()
        )

    # PI -> QBO

    @staticmethod
    def get_pi_qbo_mappings(
        db: Session,
        user_id: str,
        pi_id: Optional[str] = None,
        qbo_id: Optional[str] = None,
    ) -> list[PIQBOMapping]:
        query = (
            db.query(PIQBOMapping)
            .options(joinedload(PIQBOMapping.pi), joinedload(PIQBOMapping.qbo))
            .filter(PIQBOMapping.user_id == user_id)
        )
        if pi_id:
            query = query.filter(PIQBOMapping.pi_id == pi_id)
        if qbo_id:
            query = query.filter(PIQBOMapping.qbo_id == qbo_id)
        return query.order_by(PIQBOMapping.id.asc()).all()

    @staticmethod
    def get_pi_qbo_mapping_by_id(db: Session, mapping_id: str, user_id: str) -> Optional[PIQBOMapping]:
        return (
            db.query(PIQBOMapping)
            .filter(PIQBOMapping.id == mapping_id, PIQBOMapping.user_id == user_id)
            .first()
        )

    @staticmethod
    def pi_qbo_mapping_exists(db: Session, user_id: str, pi_id: str, qbo_id: str) -> bool:
        return (
            db.query(PIQBOMapping.id)
            .filter(
                PIQBOMapping.user_id == user_id,
                PIQBOMapping.pi_id == pi_id,
                PIQBOMapping.qbo_id == qbo_id,
            )
            .first()
            is not None
        )

    # PI <- Job

    @staticmethod
    def get_pi_job_mappings(
        db: Session,
        user_id: str,
        job_id: Optional[str] = None,
        pi_id: Optional[str] = None,
    ) -> list[PIJobMapping]:
        query = (
            db.query(PIJobMapping)
            .options(joinedload(PIJobMapping.pi), joinedload(PIJobMapping.job))
            .filter(PIJobMapping.user_id == user_id)
        )
        if job_id:
            query = query.filter(PIJobMapping.job_id == job_id)
        if pi_id:
            query = query.filter(PIJobMapping.pi_id == pi_id)
        return query.order_by(PIJobMapping.id.asc()).all()

    @staticmethod
    def get_pi_job_mappings_for_pis(db: Session, user_id: str, pi_ids: list[str]) -> list[PIJobMapping]:
        if not pi_ids:
            return []
        return (
            db.query(PIJobMapping)
            .options(joinedload(PIJobMapping.pi), joinedload(PIJobMapping.job))
            .filter(PIJobMapping.user_id == user_id, PIJobMapping.pi_id.in_(pi_ids))
            .order_by(PIJobMapping.id.asc())
            .all()
        )

    @staticmethod
    def get_pi_job_mapping_by_id(db: Session, mapping_id: str, user_id: str) -> Optional[PIJobMapping]:
        return (
            db.query(PIJobMapping)
            .filter(PIJobMapping.id == mapping_id, PIJobMapping.user_id == user_id)
            .first()
        )

    # Shared writes

    @staticmethod
    def add(db: Session, mapping):
        db.add(mapping)
        db.commit()
        db.refresh(mapping)
        return mapping

    @staticmethod
    def update(db: Session, mapping, **updates):
        for key, value in updates.items():
            if hasattr(mapping, key):
                setattr(mapping, key, value)

        db.commit()
        db.refresh(mapping)
        return mapping

    @staticmethod
    def delete(db: Session, mapping) -> None:
        db.delete(mapping)
        db.commit()
