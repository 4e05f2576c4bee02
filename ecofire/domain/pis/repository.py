"""PI repository - Database operations for outputs"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import PI


class PIRepository:
    """Repository for output database operations"""

    @staticmethod
    def get_pis(db: Session, user_id: str) -> list[PI]:
        return (
            db.query(PI)
            .filter(PI.user_id == user_id)
            .order_by(PI.created_at.asc(), PI.id.asc())
            .all()
        )

    @staticmethod
    def get_pi_by_id(db: Session, pi_id: str, user_id: str) -> Optional[PI]:
        return db.query(PI).filter(PI.id == pi_id, PI.user_id == user_id).first()

    @staticmethod
    def name_exists(db: Session, name: str, user_id: str) -> bool:
        return db.query(PI.id).filter(PI.user_id == user_id, PI.name == name).first() is not None

    @staticmethod
    def create_pi(db: Session, user_id: str, **pi_data) -> PI:
        pi = PI(user_id=user_id, **pi_data)
        db.add(pi)
        db.commit()
        db.refresh(pi)
        return pi

    @staticmethod
    def update_pi(db: Session, pi: PI, **updates) -> PI:
        for key, value in updates.items():
            if hasattr(pi, key):
                setattr(pi, key, value)

        db.commit()
        db.refresh(pi)
        return pi

    @staticmethod
    def delete_pi(db: Session, pi: PI) -> None:
        """Delete an output together with every mapping that references it"""
        db.delete(pi)
        db.commit()
