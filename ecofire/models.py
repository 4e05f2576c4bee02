import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate an opaque string identifier"""
    return str(uuid.uuid4())


class QBO(Base):
    """Outcome: a top-level business result being tracked"""

    __tablename__ = "qbos"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=True)
    beginning_value = Column(Float, default=0, nullable=False)
    current_value = Column(Float, default=0, nullable=False)
    target_value = Column(Float, nullable=False)
    deadline = Column(DateTime, nullable=True)
    points = Column(Float, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    pi_mappings = relationship(
        "PIQBOMapping", back_populates="qbo", cascade="all, delete-orphan"
    )


class PI(Base):
    """Output: an intermediate measurable deliverable feeding outcomes"""

    __tablename__ = "pis"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=True)
    beginning_value = Column(Float, default=0, nullable=False)
    target_value = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    qbo_mappings = relationship(
        "PIQBOMapping", back_populates="pi", cascade="all, delete-orphan"
    )
    job_mappings = relationship(
        "PIJobMapping", back_populates="pi", cascade="all, delete-orphan"
    )


class BusinessFunction(Base):
    """Area of the business a job belongs to (Marketing, Sales, ...)"""

    __tablename__ = "business_functions"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    business_function_id = Column(String(36), index=True, nullable=True)
    due_date = Column(DateTime, nullable=True)
    created_date = Column(DateTime, default=datetime.utcnow)
    is_done = Column(Boolean, default=False, nullable=False)
    impact = Column(Float, default=0, nullable=False)
    next_task_id = Column(String(36), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)  # Soft delete flag

    tasks = relationship(
        "Task", back_populates="job", cascade="all, delete-orphan"
    )
    pi_mappings = relationship(
        "PIJobMapping", back_populates="job", cascade="all, delete-orphan"
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    owner = Column(String(255), nullable=True)
    date = Column(DateTime, nullable=True)
    required_hours = Column(Float, nullable=True)
    focus_level = Column(String(10), nullable=True)  # High, Medium, Low
    joy_level = Column(String(10), nullable=True)  # High, Medium, Low
    notes = Column(Text, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    job = relationship("Job", back_populates="tasks")


class PIQBOMapping(Base):
    """Weighted link from an output (PI) to an outcome (QBO)"""

    __tablename__ = "pi_qbo_mappings"
    __table_args__ = (UniqueConstraint("user_id", "pi_id", "qbo_id", name="uq_pi_qbo_mapping"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    pi_id = Column(String(36), ForeignKey("pis.id", ondelete="CASCADE"), index=True, nullable=False)
    qbo_id = Column(String(36), ForeignKey("qbos.id", ondelete="CASCADE"), index=True, nullable=False)
    qbo_impact = Column(Float, nullable=False)
    # Snapshots of the targets at write time; PI/QBO target_value is authoritative
    pi_target = Column(Float, default=0, nullable=False)
    qbo_target = Column(Float, default=0, nullable=False)
    notes = Column(Text, nullable=True)

    pi = relationship("PI", back_populates="qbo_mappings")
    qbo = relationship("QBO", back_populates="pi_mappings")


class PIJobMapping(Base):
    """Weighted link from a job to an output (PI)"""

    __tablename__ = "pi_job_mappings"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(255), index=True, nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), index=True, nullable=False)
    pi_id = Column(String(36), ForeignKey("pis.id", ondelete="CASCADE"), index=True, nullable=False)
    pi_impact_value = Column(Float, default=0, nullable=False)
    pi_target = Column(Float, default=0, nullable=False)  # Snapshot, see PIQBOMapping
    notes = Column(Text, nullable=True)

    job = relationship("Job", back_populates="pi_mappings")
    pi = relationship("PI", back_populates="job_mappings")
