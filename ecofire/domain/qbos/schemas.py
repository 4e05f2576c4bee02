"""QBO domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_name


class QBOCreate(BaseModel):
    """Schema for creating a new outcome"""

    name: str
    unit: Optional[str] = None
    beginningValue: float = 0
    currentValue: float = 0
    targetValue: float
    deadline: Optional[datetime] = None
    points: float = 0
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_name(v)

    class Config:
        allow_inf_nan = False


class QBOUpdate(BaseModel):
    """Schema for updating an existing outcome"""

    name: Optional[str] = None
    unit: Optional[str] = None
    beginningValue: Optional[float] = None
    currentValue: Optional[float] = None
    targetValue: Optional[float] = None
    deadline: Optional[datetime] = None
    points: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None:
            return validate_name(v)
        return v

    class Config:
        allow_inf_nan = False


class QBOResponse(BaseModel):
    """Schema for outcome response"""

    id: str
    name: str
    unit: Optional[str] = None
    beginningValue: float
    currentValue: float
    targetValue: float
    deadline: Optional[datetime] = None
    points: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class QBOProgressRow(BaseModel):
    """One bar of the outcome progress chart"""

    name: str
    achievedOutcome: float
    expectedOutcome: float
