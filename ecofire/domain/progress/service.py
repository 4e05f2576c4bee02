"""Progress service - runs the propagation engine over a user's stored collections"""

import logging

from sqlalchemy.orm import Session

from ...cache import get_progress_cached, get_progress_version, set_progress_cached
from ..jobs.repository import JobRepository
from ..mappings.repository import MappingRepository
from ..pis.repository import PIRepository
from ..qbos.repository import QBORepository
from .engine import transform_for_chart
from .entities import (
    JobOutputLink,
    JobStatus,
    Outcome,
    OutcomeOutputLink,
    Output,
    ProgressSnapshot,
)

logger = logging.getLogger(__name__)


class ProgressService:
    def __init__(self, db: Session):
        self.db = db

    def load_snapshot(self, user_id: str) -> ProgressSnapshot:
        """Read outcomes, outputs, live jobs and both mapping collections for a user"""
        qbos = QBORepository.get_qbos(self.db, user_id)
        pis = PIRepository.get_pis(self.db, user_id)
        jobs = JobRepository.get_jobs(self.db, user_id)
        pi_qbo_mappings = MappingRepository.get_pi_qbo_mappings(self.db, user_id)
        pi_job_mappings = MappingRepository.get_pi_job_mappings(self.db, user_id)

        return ProgressSnapshot(
            outcomes=[
                Outcome(
                    id=q.id,
                    name=q.name,
                    beginning_value=q.beginning_value,
                    current_value=q.current_value,
                    target_value=q.target_value,
                    unit=q.unit,
                    points=q.points,
                )
                for q in qbos
            ],
            outputs=[
                Output(
                    id=p.id,
                    name=p.name,
                    beginning_value=p.beginning_value,
                    target_value=p.target_value,
                    unit=p.unit,
                )
                for p in pis
            ],
            outcome_output_links=[
                OutcomeOutputLink(output_id=m.pi_id, outcome_id=m.qbo_id, qbo_impact=m.qbo_impact)
                for m in pi_qbo_mappings
            ],
            jobs=[
                JobStatus(id=j.id, title=j.title, is_done=j.is_done, impact=j.impact) for j in jobs
            ],
            job_output_links=[
                JobOutputLink(
                    job_id=m.job_id, output_id=m.pi_id, pi_impact_value=m.pi_impact_value
                )
                for m in pi_job_mappings
            ],
        )

    def get_chart_data(self, user_id: str, use_cache: bool = True) -> list[dict]:
        """{name, achievedOutcome, expectedOutcome} per outcome, cached until inputs change"""
        # Read before loading: a write during the computation bumps it past these rows
        version = get_progress_version(user_id)
        if use_cache:
            cached = get_progress_cached(user_id, version)
            if cached is not None:
                return cached

        snapshot = self.load_snapshot(user_id)
        rows = transform_for_chart(
            snapshot.outcomes,
            snapshot.outputs,
            snapshot.outcome_output_links,
            snapshot.jobs,
            snapshot.job_output_links,
        )
        set_progress_cached(user_id, version, rows)
        return rows
