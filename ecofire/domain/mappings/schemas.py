"""Mapping domain schemas - weighted links between jobs, outputs and outcomes"""

from typing import Optional

from pydantic import BaseModel


class PIQBOMappingCreate(BaseModel):
    """Schema for linking an output (PI) to an outcome (QBO)"""

    piId: str
    qboId: str
    qboImpact: float
    # Accepted for compatibility with older clients; targets are read from the PI and QBO
    piTarget: Optional[float] = None
    qboTarget: Optional[float] = None
    notes: Optional[str] = None

    class Config:
        allow_inf_nan = False


class PIQBOMappingUpdate(BaseModel):
    qboImpact: Optional[float] = None
    piTarget: Optional[float] = None
    qboTarget: Optional[float] = None
    notes: Optional[str] = None

    class Config:
        allow_inf_nan = False


class PIQBOMappingResponse(BaseModel):
    id: str
    piId: str
    qboId: str
    piName: Optional[str] = None
    qboName: Optional[str] = None
    piTarget: float
    qboTarget: float
    qboImpact: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PIJobMappingCreate(BaseModel):
    """Schema for linking a job to an output (PI)"""

    jobId: str
    piId: str
    piImpactValue: float = 0
    piTarget: Optional[float] = None
    notes: Optional[str] = None

    class Config:
        allow_inf_nan = False


class PIJobMappingUpdate(BaseModel):
    piImpactValue: Optional[float] = None
    piTarget: Optional[float] = None
    notes: Optional[str] = None

    class Config:
        allow_inf_nan = False


class PIJobMappingResponse(BaseModel):
    id: str
    jobId: str
    piId: str
    jobName: Optional[str] = None
    piName: Optional[str] = None
    piImpactValue: float
    piTarget: float
    notes: Optional[str] = None

    class Config:
        from_attributes = True
