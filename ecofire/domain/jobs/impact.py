"""
Job impact values

A job's impact is the sum of piImpactValue over its job -> output mappings.
It is derived data, recalculated whenever outcomes, outputs or mappings change.
"""

import logging
from collections import defaultdict
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from ... import events
from ...database import SessionLocal
from ...models import PIJobMapping
from .repository import JobRepository

logger = logging.getLogger(__name__)

# Writes to these collections change mapped impact values
IMPACT_TOPICS = (events.QBOS, events.PIS, events.PI_QBO_MAPPINGS, events.PI_JOB_MAPPINGS)


def sum_job_impacts(mappings: Iterable[PIJobMapping]) -> dict[str, float]:
    """Aggregate mapped impact per job id"""
    impacts: dict[str, float] = defaultdict(float)
    for mapping in mappings:
        impacts[mapping.job_id] += mapping.pi_impact_value or 0
    return dict(impacts)


def recalculate_job_impacts(db: Session, user_id: str) -> dict:
    """Reset every job's impact to 0, then store the sum of its mapped impacts"""
    repo = JobRepository()
    impacts = sum_job_impacts(repo.get_job_mappings(db, user_id))
    updated = repo.set_impacts(db, user_id, impacts)
    logger.info(f"Updated impact values for {updated} jobs of user_id: {user_id}")
    events.notify(user_id, events.JOBS, "recalculated")
    return {
        "jobsUpdated": updated,
        "message": f"Updated impact values for {updated} jobs",
    }


def register_impact_recalculation(
    bus: events.EventBus, session_factory: Callable[[], Session] = SessionLocal
):
    """Recalculate a user's job impacts after any write that can change them"""

    def on_data_changed(event: events.DataChanged):
        db = session_factory()
        try:
            recalculate_job_impacts(db, event.user_id)
        finally:
            db.close()

    return bus.subscribe_many(IMPACT_TOPICS, on_data_changed)
