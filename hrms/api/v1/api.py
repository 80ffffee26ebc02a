"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from hrms.api.v1.endpoints import (attendance, auth, employees, holidays,
                                   leaves, reports)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(employees.router)
api_router.include_router(attendance.router)
api_router.include_router(leaves.router)
api_router.include_router(holidays.router)

# Reports, health, status
api_router.include_router(reports.router)
