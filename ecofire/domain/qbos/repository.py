"""QBO repository - Database operations for outcomes"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import QBO


class QBORepository:
    """Repository for outcome database operations"""

    @staticmethod
    def get_qbos(db: Session, user_id: str) -> list[QBO]:
        """Get all outcomes for a user, oldest first"""
        return (
            db.query(QBO)
            .filter(QBO.user_id == user_id)
            .order_by(QBO.created_at.asc(), QBO.id.asc())
            .all()
        )

    @staticmethod
    def get_qbo_by_id(db: Session, qbo_id: str, user_id: str) -> Optional[QBO]:
        return db.query(QBO).filter(QBO.id == qbo_id, QBO.user_id == user_id).first()

    @staticmethod
    def name_exists(db: Session, name: str, user_id: str) -> bool:
        return (
            db.query(QBO.id).filter(QBO.user_id == user_id, QBO.name == name).first() is not None
        )

    @staticmethod
    def create_qbo(db: Session, user_id: str, **qbo_data) -> QBO:
        qbo = QBO(user_id=user_id, **qbo_data)
        db.add(qbo)
        db.commit()
        db.refresh(qbo)
        return qbo

    @staticmethod
    def update_qbo(db: Session, qbo: QBO, **updates) -> QBO:
        """Update an outcome with provided fields"""
        for key, value in updates.items():
            if hasattr(qbo, key):
                setattr(qbo, key, value)

        db.commit()
        db.refresh(qbo)
        return qbo

    @staticmethod
    def delete_qbo(db: Session, qbo: QBO) -> None:
        """Delete an outcome and its output mappings"""
        db.delete(qbo)
        db.commit()
