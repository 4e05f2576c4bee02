"""PI domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_name


class PICreate(BaseModel):
    """Schema for creating a new output"""

    name: str
    unit: Optional[str] = None
    beginningValue: float = 0
    targetValue: float
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_name(v)

    class Config:
        allow_inf_nan = False


class PIUpdate(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    beginningValue: Optional[float] = None
    targetValue: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None:
            return validate_name(v)
        return v

    class Config:
        allow_inf_nan = False


class PIResponse(BaseModel):
    id: str
    name: str
    unit: Optional[str] = None
    beginningValue: float
    targetValue: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True
