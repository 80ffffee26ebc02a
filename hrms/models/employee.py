"""
Employee & punch-record models.

A punch record is one row per employee per calendar day; the day's status
is derived at report time, never stored.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Index, Integer,
                        String, UniqueConstraint)
from sqlalchemy.orm import relationship

from hrms.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_code: str = Column(String(32), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    full_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    designation: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    project_name: str | None = Column(String(100), nullable=True, index=True)  # type: ignore[assignment]
    email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, default=True, server_default="true")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    punches = relationship(
        "PunchRecord",
        back_populates="employee",
        cascade="all, delete-orphan",
    )
    leaves = relationship(
        "LeaveRequest",
        back_populates="employee",
        cascade="all, delete-orphan",
    )


class PunchRecord(Base):
    __tablename__ = "punch_records"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_punch_emp_date"),
        Index("ix_punch_employee_date", "employee_id", "date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    status: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]  # usually "Present"
    punch_in_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    punch_out_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    project_name: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    remarks: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]

    employee = relationship("Employee", back_populates="punches")
