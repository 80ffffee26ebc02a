"""
Leave request model.

``start_date`` / ``end_date`` are inclusive ISO dates. Only rows whose
status is ``Approved`` take part in attendance classification.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from hrms.db.base import Base


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (Index("ix_leave_employee_range", "employee_id", "start_date", "end_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    leave_type: str = Column(String(30), nullable=False)  # type: ignore[assignment]  # EL | SL | CL | CompOff | ...
    start_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    end_date: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    number_of_days: float = Column(Float, nullable=False, default=1.0)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default="Pending")  # type: ignore[assignment]
    # Pending | Approved | Rejected
    reason: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    decided_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    applied_on: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", back_populates="leaves")
