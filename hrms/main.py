"""
HRMS attendance service: application entry point.

This is the only module that assembles the app. Attendance rules live in
``services/``, persistence in ``models/`` and ``db/``, HTTP in ``api/``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from hrms.api.v1.api import api_router
from hrms.api.v1.endpoints.auth import limiter
from hrms.api.v1.endpoints.holidays import seed_default_holidays
from hrms.core.config import settings
from hrms.core.exceptions import register_exception_handlers
from hrms.core.security import get_password_hash
from hrms.db.base import Base
from hrms.db.session import async_session_factory, engine

# Import every model so metadata.create_all sees the tables
from hrms.models.employee import Employee, PunchRecord  # noqa: F401
from hrms.models.holiday import Holiday  # noqa: F401
from hrms.models.leave import LeaveRequest  # noqa: F401
from hrms.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            session.add(
                User(
                    email=settings.FIRST_ADMIN_EMAIL,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    full_name="System Administrator",
                    role="admin",
                )
            )
            await session.commit()
            logger.info("Default admin created: %s", settings.FIRST_ADMIN_EMAIL)

        if settings.SEED_DEFAULT_HOLIDAYS:
            added = await seed_default_holidays(session)
            if added:
                logger.info("Seeded %d government holidays", added)

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Attendance, leave and payable-day reporting",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.limiter = limiter
    register_exception_handlers(application)
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return application


app = create_app()
