"""Business function service - Business logic for business functions"""

import logging

from sqlalchemy.orm import Session

from ... import events
from ...errors import ConflictError, NotFoundError, ValidationError
from ...models import BusinessFunction
from .repository import BusinessFunctionRepository
from .schemas import BusinessFunctionCreate, BusinessFunctionUpdate

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_FUNCTIONS = ("Marketing", "Design", "Engineering", "Finance", "Sales")


class BusinessFunctionService:
    """Service layer for business function business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BusinessFunctionRepository()

    def get_business_functions(self, user_id: str) -> list[tuple[BusinessFunction, int]]:
        """
        Every business function of the user with its live job count.

        A user without any business function gets the defaults created first.
        """
        functions = self.repo.get_business_functions(self.db, user_id)
        if not functions:
            logger.info(f"Creating default business functions for user_id: {user_id}")
            functions = self.repo.create_business_functions(
                self.db, user_id, DEFAULT_BUSINESS_FUNCTIONS, is_default=True
            )
            events.notify(user_id, events.BUSINESS_FUNCTIONS, "created", *(f.id for f in functions))

        job_counts = self.repo.count_jobs(self.db, user_id)
        return [(function, job_counts.get(function.id, 0)) for function in functions]

    def count_jobs(self, function_id: str, user_id: str) -> int:
        return self.repo.count_jobs(self.db, user_id).get(function_id, 0)

    def get_business_function(self, function_id: str, user_id: str) -> BusinessFunction:
        function = self.repo.get_business_function_by_id(self.db, function_id, user_id)
        if not function:
            raise NotFoundError("Business function not found")
        return function

    def create_business_function(self, data: BusinessFunctionCreate, user_id: str) -> BusinessFunction:
        if self.repo.name_exists(self.db, data.name, user_id):
            raise ConflictError("A business function with this name already exists")

        [function] = self.repo.create_business_functions(self.db, user_id, [data.name])
        logger.info(f"Created business function '{data.name}' for user_id: {user_id}")
        events.notify(user_id, events.BUSINESS_FUNCTIONS, "created", function.id)
        return function

    def update_business_function(
        self, function_id: str, data: BusinessFunctionUpdate, user_id: str
    ) -> BusinessFunction:
        if not data.name:
            raise ValidationError("Name is required")

        function = self.get_business_function(function_id, user_id)
        if data.name != function.name and self.repo.name_exists(self.db, data.name, user_id):
            raise ConflictError("A business function with this name already exists")

        function = self.repo.update_business_function(self.db, function, name=data.name)
        events.notify(user_id, events.BUSINESS_FUNCTIONS, "updated", function.id)
        return function

    def delete_business_function(self, function_id: str, user_id: str) -> dict:
        function = self.get_business_function(function_id, user_id)
        detached = self.repo.delete_business_function(self.db, function)
        logger.info(
            f"Deleted business function {function_id} for user_id: {user_id}, detached {detached} jobs"
        )
        events.notify(user_id, events.BUSINESS_FUNCTIONS, "deleted", function_id)
        if detached:
            events.notify(user_id, events.JOBS, "updated")
        return {"message": "Business function deleted successfully"}
