"""
Government holiday calendar: hand-maintained list of dated holidays.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, String

from hrms.db.base import Base


class Holiday(Base):
    __tablename__ = "holidays"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    date: str = Column(String(10), unique=True, nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    description: str = Column(String(200), nullable=False)  # type: ignore[assignment]
