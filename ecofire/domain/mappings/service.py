"""Mapping service - Business logic for PI-QBO and PI-Job mappings"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import events
from ...errors import ConflictError, NotFoundError, ValidationError
from ...models import Job, PIJobMapping, PIQBOMapping
from ...shared.updates import changed_fields
from .repository import MappingRepository
from .schemas import (
    PIJobMappingCreate,
    PIJobMappingUpdate,
    PIQBOMappingCreate,
    PIQBOMappingUpdate,
)

logger = logging.getLogger(__name__)

DUPLICATE_PI_QBO_MESSAGE = "A mapping between this PI and QBO already exists"

# Client-supplied piTarget and qboTarget are not writable
PI_QBO_UPDATE_COLUMNS = {"qboImpact": "qbo_impact", "notes": "notes"}
PI_JOB_UPDATE_COLUMNS = {"piImpactValue": "pi_impact_value", "notes": "notes"}


def job_contribution(pi_impact_value: float, pi_target: float, qbo_impact: float) -> float:
    """Share of an outcome a job delivers through one output; a zero target counts as 1"""
    contribution = pi_impact_value / (pi_target or 1) * qbo_impact
    # Overflow reads as no contribution, as in the progress engine
    return contribution if math.isfinite(contribution) else 0.0


@dataclass
class QBOJob:
    """A job that reaches an outcome, with one path per output it goes through"""

    job: Job
    impact_paths: list[dict] = field(default_factory=list)

    @property
    def total_contribution(self) -> float:
        return sum(path["jobContribution"] for path in self.impact_paths)


class MappingService:
    """Service layer for mapping business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MappingRepository()

    def _require_pi(self, pi_id: str, user_id: str):
        pi = self.repo.get_pi(self.db, pi_id, user_id)
        if not pi:
            raise NotFoundError("PI not found")
        return pi

    # ========================================================================
    # PI -> QBO
    # ========================================================================

    def get_pi_qbo_mappings(
        self, user_id: str, pi_id: Optional[str] = None, qbo_id: Optional[str] = None
    ) -> list[PIQBOMapping]:
        return self.repo.get_pi_qbo_mappings(self.db, user_id, pi_id=pi_id, qbo_id=qbo_id)

    def get_pi_qbo_mapping(self, mapping_id: str, user_id: str) -> PIQBOMapping:
        mapping = self.repo.get_pi_qbo_mapping_by_id(self.db, mapping_id, user_id)
        if not mapping:
            raise NotFoundError("Mapping not found")
        return mapping

    def create_pi_qbo_mapping(self, data: PIQBOMappingCreate, user_id: str) -> PIQBOMapping:
        pi = self._require_pi(data.piId, user_id)
        qbo = self.repo.get_qbo(self.db, data.qboId, user_id)
        if not qbo:
            raise NotFoundError("QBO not found")

        if self.repo.pi_qbo_mapping_exists(self.db, user_id, pi.id, qbo.id):
            raise ConflictError(DUPLICATE_PI_QBO_MESSAGE)

        mapping = PIQBOMapping(
            user_id=user_id,
            pi_id=pi.id,
            qbo_id=qbo.id,
            qbo_impact=data.qboImpact,
            pi_target=pi.target_value,
            qbo_target=qbo.target_value,
            notes=data.notes,
        )
        try:
            mapping = self.repo.add(self.db, mapping)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(DUPLICATE_PI_QBO_MESSAGE) from e

        logger.info(f"Mapped PI {pi.id} to QBO {qbo.id} with impact {data.qboImpact}")
        events.notify(user_id, events.PI_QBO_MAPPINGS, "created", mapping.id)
        return mapping

    def update_pi_qbo_mapping(
        self, mapping_id: str, data: PIQBOMappingUpdate, user_id: str
    ) -> PIQBOMapping:
        mapping = self.get_pi_qbo_mapping(mapping_id, user_id)
        updates = changed_fields(data, PI_QBO_UPDATE_COLUMNS, nullable=("notes",))
        # Snapshots always follow the live targets
        updates.update(pi_target=mapping.pi.target_value, qbo_target=mapping.qbo.target_value)
        mapping = self.repo.update(self.db, mapping, **updates)
        events.notify(user_id, events.PI_QBO_MAPPINGS, "updated", mapping.id)
        return mapping

    def delete_pi_qbo_mapping(self, mapping_id: str, user_id: str) -> dict:
        mapping = self.get_pi_qbo_mapping(mapping_id, user_id)
        self.repo.delete(self.db, mapping)
        events.notify(user_id, events.PI_QBO_MAPPINGS, "deleted", mapping_id)
        return {"message": "Mapping deleted successfully"}

    # ========================================================================
    # Job -> PI
    # ========================================================================

    def get_pi_job_mappings(
        self, user_id: str, job_id: Optional[str] = None, pi_id: Optional[str] = None
    ) -> list[PIJobMapping]:
        return self.repo.get_pi_job_mappings(self.db, user_id, job_id=job_id, pi_id=pi_id)

    def get_pi_job_mapping(self, mapping_id: str, user_id: str) -> PIJobMapping:
        mapping = self.repo.get_pi_job_mapping_by_id(self.db, mapping_id, user_id)
        if not mapping:
            raise NotFoundError("Mapping not found")
        return mapping

    def create_pi_job_mapping(self, data: PIJobMappingCreate, user_id: str) -> PIJobMapping:
        pi = self._require_pi(data.piId, user_id)
        job = self.repo.get_job(self.db, data.jobId, user_id)
        if not job:
            raise NotFoundError("Job not found")

        mapping = self.repo.add(
            self.db,
            PIJobMapping(
                user_id=user_id,
                job_id=job.id,
                pi_id=pi.id,
                pi_impact_value=data.piImpactValue,
                pi_target=pi.target_value,
                notes=data.notes,
            ),
        )
        logger.info(f"Mapped job {job.id} to PI {pi.id} with impact {data.piImpactValue}")
        events.notify(user_id, events.PI_JOB_MAPPINGS, "created", mapping.id)
        return mapping

    def update_pi_job_mapping(
        self, mapping_id: str, data: PIJobMappingUpdate, user_id: str
    ) -> PIJobMapping:
        mapping = self.get_pi_job_mapping(mapping_id, user_id)
        updates = changed_fields(data, PI_JOB_UPDATE_COLUMNS, nullable=("notes",))
        updates["pi_target"] = mapping.pi.target_value
        mapping = self.repo.update(self.db, mapping, **updates)
        events.notify(user_id, events.PI_JOB_MAPPINGS, "updated", mapping.id)
        return mapping

    def delete_pi_job_mapping(self, mapping_id: str, user_id: str) -> dict:
        mapping = self.get_pi_job_mapping(mapping_id, user_id)
        self.repo.delete(self.db, mapping)
        events.notify(user_id, events.PI_JOB_MAPPINGS, "deleted", mapping_id)
        return {"message": "Mapping deleted successfully"}

    # ========================================================================
    # QBO -> jobs, through the QBO's PIs
    # ========================================================================

    def get_qbo_jobs(self, qbo_id: Optional[str], user_id: str) -> list[QBOJob]:
        """Open, live jobs mapped to any PI that feeds the QBO, oldest first"""
        if not qbo_id:
            raise ValidationError("QBO ID is required as a query parameter")

        qbo_impacts = {
            m.pi_id: m.qbo_impact
            for m in self.repo.get_pi_qbo_mappings(self.db, user_id, qbo_id=qbo_id)
        }
        job_mappings = self.repo.get_pi_job_mappings_for_pis(self.db, user_id, list(qbo_impacts))

        qbo_jobs: dict[str, QBOJob] = {}
        for mapping in job_mappings:
            job = mapping.job
            if job is None or job.is_deleted or job.is_done:
                continue
            pi_target = mapping.pi.target_value if mapping.pi else mapping.pi_target
            qbo_impact = qbo_impacts[mapping.pi_id]
            qbo_jobs.setdefault(job.id, QBOJob(job)).impact_paths.append(
                {
                    "piId": mapping.pi_id,
                    "piName": mapping.pi.name if mapping.pi else None,
                    "piImpactValue": mapping.pi_impact_value,
                    "piTarget": pi_target,
                    "qboImpact": qbo_impact,
                    "jobContribution": job_contribution(
                        mapping.pi_impact_value, pi_target, qbo_impact
                    ),
                }
            )

        logger.debug(f"QBO {qbo_id} is reached by {len(qbo_jobs)} open jobs")
        return sorted(qbo_jobs.values(), key=lambda q: (q.job.created_date, q.job.id))
