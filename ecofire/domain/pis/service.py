"""PI service - Business logic for output operations"""

import logging

from sqlalchemy.orm import Session

from ... import events
from ...errors import ConflictError, NotFoundError
from ...models import PI
from ...shared.updates import changed_fields
from .repository import PIRepository
from .schemas import PICreate, PIUpdate

logger = logging.getLogger(__name__)

UPDATE_COLUMNS = {
    "name": "name",
    "unit": "unit",
    "beginningValue": "beginning_value",
    "targetValue": "target_value",
    "notes": "notes",
}
NULLABLE_FIELDS = ("unit", "notes")


class PIService:
    """Service layer for output business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PIRepository()

    def get_pis(self, user_id: str) -> list[PI]:
        return self.repo.get_pis(self.db, user_id)

    def get_pi(self, pi_id: str, user_id: str) -> PI:
        pi = self.repo.get_pi_by_id(self.db, pi_id, user_id)
        if not pi:
            raise NotFoundError("PI not found")
        return pi

    def create_pi(self, data: PICreate, user_id: str) -> PI:
        logger.info(f"Creating PI '{data.name}' for user_id: {user_id}")

        if self.repo.name_exists(self.db, data.name, user_id):
            raise ConflictError("A PI with this name already exists")

        pi = self.repo.create_pi(
            self.db,
            user_id,
            name=data.name,
            unit=data.unit,
            beginning_value=data.beginningValue,
            target_value=data.targetValue,
            notes=data.notes,
        )
        events.notify(user_id, events.PIS, "created", pi.id)
        return pi

    def update_pi(self, pi_id: str, data: PIUpdate, user_id: str) -> PI:
        pi = self.get_pi(pi_id, user_id)

        if data.name is not None and data.name != pi.name:
            if self.repo.name_exists(self.db, data.name, user_id):
                raise ConflictError("A PI with this name already exists")

        updates = changed_fields(data, UPDATE_COLUMNS, NULLABLE_FIELDS)
        pi = self.repo.update_pi(self.db, pi, **updates)
        events.notify(user_id, events.PIS, "updated", pi.id)
        return pi

    def delete_pi(self, pi_id: str, user_id: str) -> dict:
        pi = self.get_pi(pi_id, user_id)
        self.repo.delete_pi(self.db, pi)
        logger.info(f"Deleted PI {pi_id} for user_id: {user_id}")
        events.notify(user_id, events.PIS, "deleted", pi_id)
        return {"message": "PI deleted successfully"}
