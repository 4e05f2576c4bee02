"""Business function repository - Database operations for business functions"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import BusinessFunction, Job


class BusinessFunctionRepository:
    """Repository for business function database operations"""

    @staticmethod
    def get_business_functions(db: Session, user_id: str) -> list[BusinessFunction]:
        return (
            db.query(BusinessFunction)
            .filter(BusinessFunction.user_id == user_id)
            .order_by(BusinessFunction.created_at.asc(), BusinessFunction.name.asc())
            .all()
        )

    @staticmethod
    def get_business_function_by_id(
        db: Session, function_id: str, user_id: str
    ) -> Optional[BusinessFunction]:
        return (
            db.query(BusinessFunction)
            .filter(BusinessFunction.id == function_id, BusinessFunction.user_id == user_id)
            .first()
        )

    @staticmethod
    def name_exists(db: Session, name: str, user_id: str) -> bool:
        return (
            db.query(BusinessFunction.id)
            .filter(BusinessFunction.user_id == user_id, BusinessFunction.name == name)
            .first()
            is not None
        )

    @staticmethod
    def create_business_functions(db: Session, user_id: str, names, is_default: bool = False):
        functions = [BusinessFunction(user_id=user_id, name=name, is_default=is_default) for name in names]
        db.add_all(functions)
        db.commit()
        for function in functions:
            db.refresh(function)
        return functions

    @staticmethod
    def update_business_function(db: Session, function: BusinessFunction, **updates) -> BusinessFunction:
        for key, value in updates.items():
            if hasattr(function, key):
                setattr(function, key, value)

        db.commit()
        db.refresh(function)
        return function

    @staticmethod
    def delete_business_function(db: Session, function: BusinessFunction) -> int:
        """Delete a business function and detach its jobs; returns how many jobs were detached"""
        detached = (
            db.query(Job)
            .filter(Job.user_id == function.user_id, Job.business_function_id == function.id)
            .update({Job.business_function_id: None}, synchronize_session=False)
        )
        db.delete(function)
        db.commit()
        return detached

    @staticmethod
    def count_jobs(db: Session, user_id: str) -> dict[str, int]:
        """Live jobs per business function id"""
        rows = (
            db.query(Job.business_function_id, func.count(Job.id))
            .filter(
                Job.user_id == user_id,
                Job.is_deleted.is_(False),
                Job.business_function_id.isnot(None),
            )
            .group_by(Job.business_function_id)
            .all()
        )
        return {function_id: count for function_id, count in rows}
