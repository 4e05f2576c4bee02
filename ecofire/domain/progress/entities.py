"""Plain records the progress engine works on, independent of storage and wire format"""

from dataclasses import dataclass
from typing import Any, Optional


def _number(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _record_id(data: dict) -> str:
    return str(data.get("_id") or data.get("id"))


@dataclass(frozen=True)
class Outcome:
    id: str
    name: str
    beginning_value: float
    current_value: float
    target_value: float
    unit: Optional[str] = None
    points: float = 0.0

    @classmethod
    def from_wire(cls, data: dict) -> "Outcome":
        return cls(
            id=_record_id(data),
            name=data.get("name", ""),
            beginning_value=_number(data.get("beginningValue")),
            current_value=_number(data.get("currentValue")),
            target_value=_number(data.get("targetValue")),
            unit=data.get("unit"),
            points=_number(data.get("points")),
        )


@dataclass(frozen=True)
class Output:
    id: str
    name: str
    beginning_value: float
    target_value: float
    unit: Optional[str] = None

    @classmethod
    def from_wire(cls, data: dict) -> "Output":
        return cls(
            id=_record_id(data),
            name=data.get("name", ""),
            beginning_value=_number(data.get("beginningValue")),
            target_value=_number(data.get("targetValue")),
            unit=data.get("unit"),
        )


@dataclass(frozen=True)
class JobStatus:
    id: str
    title: str
    is_done: bool
    impact: float = 0.0

    @classmethod
    def from_wire(cls, data: dict) -> "JobStatus":
        return cls(
            id=_record_id(data),
            title=data.get("title", ""),
            is_done=bool(data.get("isDone", False)),
            impact=_number(data.get("impact")),
        )


@dataclass(frozen=True)
class OutcomeOutputLink:
    """Output -> outcome mapping; qbo_impact is the contribution weight"""

    output_id: str
    outcome_id: str
    qbo_impact: float

    @classmethod
    def from_wire(cls, data: dict) -> "OutcomeOutputLink":
        return cls(
            output_id=str(data.get("piId")),
            outcome_id=str(data.get("qboId")),
            qbo_impact=_number(data.get("qboImpact")),
        )


@dataclass(frozen=True)
class JobOutputLink:
    """Job -> output mapping; pi_impact_value is the contribution weight"""

    job_id: str
    output_id: str
    pi_impact_value: float

    @classmethod
    def from_wire(cls, data: dict) -> "JobOutputLink":
        return cls(
            job_id=str(data.get("jobId")),
            output_id=str(data.get("piId")),
            pi_impact_value=_number(data.get("piImpactValue")),
        )


@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything the engine needs, fully materialized"""

    outcomes: list[Outcome]
    outputs: list[Output]
    outcome_output_links: list[OutcomeOutputLink]
    jobs: list[JobStatus]
    job_output_links: list[JobOutputLink]
