"""QBO service - Business logic for outcome operations"""

import logging

from sqlalchemy.orm import Session

from ... import events
from ...errors import ConflictError, NotFoundError
from ...models import QBO
from ...shared.updates import changed_fields
from .repository import QBORepository
from .schemas import QBOCreate, QBOUpdate

logger = logging.getLogger(__name__)

UPDATE_COLUMNS = {
    "name": "name",
    "unit": "unit",
    "beginningValue": "beginning_value",
    "currentValue": "current_value",
    "targetValue": "target_value",
    "deadline": "deadline",
    "points": "points",
    "notes": "notes",
}
NULLABLE_FIELDS = ("unit", "deadline", "notes")


class QBOService:
    """Service layer for outcome business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = QBORepository()

    def get_qbos(self, user_id: str) -> list[QBO]:
        return self.repo.get_qbos(self.db, user_id)

    def get_qbo(self, qbo_id: str, user_id: str) -> QBO:
        qbo = self.repo.get_qbo_by_id(self.db, qbo_id, user_id)
        if not qbo:
            raise NotFoundError("QBO not found")
        return qbo

    def create_qbo(self, data: QBOCreate, user_id: str) -> QBO:
        logger.info(f"Creating QBO '{data.name}' for user_id: {user_id}")

        if self.repo.name_exists(self.db, data.name, user_id):
            raise ConflictError("A QBO with this name already exists")

        qbo = self.repo.create_qbo(
            self.db,
            user_id,
            name=data.name,
            unit=data.unit,
            beginning_value=data.beginningValue,
            current_value=data.currentValue,
            target_value=data.targetValue,
            deadline=data.deadline,
            points=data.points,
            notes=data.notes,
        )
        events.notify(user_id, events.QBOS, "created", qbo.id)
        return qbo

    def update_qbo(self, qbo_id: str, data: QBOUpdate, user_id: str) -> QBO:
        qbo = self.get_qbo(qbo_id, user_id)

        if data.name is not None and data.name != qbo.name:
            if self.repo.name_exists(self.db, data.name, user_id):
                raise ConflictError("A QBO with this name already exists")

        updates = changed_fields(data, UPDATE_COLUMNS, NULLABLE_FIELDS)
        qbo = self.repo.update_qbo(self.db, qbo, **updates)
        events.notify(user_id, events.QBOS, "updated", qbo.id)
        return qbo

    def delete_qbo(self, qbo_id: str, user_id: str) -> dict:
        qbo = self.get_qbo(qbo_id, user_id)
        self.repo.delete_qbo(self.db, qbo)
        logger.info(f"Deleted QBO {qbo_id} for user_id: {user_id}")
        events.notify(user_id, events.QBOS, "deleted", qbo_id)
        return {"message": "QBO deleted successfully"}
