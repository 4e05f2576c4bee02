"""Job domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_level, validate_name


class JobCreate(BaseModel):
    """Schema for creating a new job"""

    title: str
    notes: Optional[str] = None
    businessFunctionId: Optional[str] = None
    dueDate: Optional[datetime] = None
    isDone: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_name(v)


class JobUpdate(BaseModel):
    """Schema for updating an existing job"""

    title: Optional[str] = None
    notes: Optional[str] = None
    businessFunctionId: Optional[str] = None
    dueDate: Optional[datetime] = None
    isDone: Optional[bool] = None
    nextTaskId: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None:
            return validate_name(v)
        return v


class JobDuplicate(BaseModel):
    """Schema for copying a job with its tasks and output mappings"""

    sourceJobId: Optional[str] = None
    newJobData: JobCreate


class JobResponse(BaseModel):
    id: str
    title: str
    notes: Optional[str] = None
    businessFunctionId: Optional[str] = None
    dueDate: Optional[datetime] = None
    createdDate: Optional[datetime] = None
    isDone: bool
    impact: float
    nextTaskId: Optional[str] = None
    tasks: list[str] = []
    isDeleted: bool = False

    class Config:
        from_attributes = True


class TaskCreate(BaseModel):
    """Schema for creating a task under a job"""

    title: str
    owner: Optional[str] = None
    date: Optional[datetime] = None
    requiredHours: Optional[float] = None
    focusLevel: Optional[str] = None
    joyLevel: Optional[str] = None
    notes: Optional[str] = None
    completed: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_name(v)

    @field_validator("focusLevel", "joyLevel")
    @classmethod
    def validate_levels(cls, v):
        return validate_level(v)

    class Config:
        allow_inf_nan = False


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    owner: Optional[str] = None
    date: Optional[datetime] = None
    requiredHours: Optional[float] = None
    focusLevel: Optional[str] = None
    joyLevel: Optional[str] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None:
            return validate_name(v)
        return v

    @field_validator("focusLevel", "joyLevel")
    @classmethod
    def validate_levels(cls, v):
        return validate_level(v)

    class Config:
        allow_inf_nan = False


class TaskResponse(BaseModel):
    id: str
    jobId: str
    title: str
    owner: Optional[str] = None
    date: Optional[datetime] = None
    requiredHours: Optional[float] = None
    focusLevel: Optional[str] = None
    joyLevel: Optional[str] = None
    notes: Optional[str] = None
    completed: bool

    class Config:
        from_attributes = True


class TaskCountsRequest(BaseModel):
    jobId: str
