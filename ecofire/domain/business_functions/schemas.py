"""Business function schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_name


class BusinessFunctionCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_name(v)


class BusinessFunctionUpdate(BaseModel):
    # Optional so a missing name reaches the service and gets its 400
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v:
            return validate_name(v)
        return v


class BusinessFunctionResponse(BaseModel):
    id: str
    name: str
    isDefault: bool
    jobCount: int = 0

    class Config:
        from_attributes = True
