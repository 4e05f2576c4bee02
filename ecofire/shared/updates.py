"""Partial update helpers shared by the PUT endpoints"""

from typing import Iterable

from pydantic import BaseModel

from ..errors import ValidationError


def changed_fields(data: BaseModel, columns: dict[str, str], nullable: Iterable[str] = ()) -> dict:
    """
    Translate the fields a client actually sent into column updates.

    Fields missing from the request body are left alone. An explicit null
    clears a nullable column and is rejected with a 400 for any other one.
    """
    updates = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        if field not in columns:
            continue
        if value is None and field not in nullable:
            raise ValidationError(f"{field} cannot be null")
        updates[columns[field]] = value
    return updates
