import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.database import Base, build_engine, build_session_factory

# Import all models so Base.metadata knows about them
import app.auth.models  # noqa: F401
import app.finance.models  # noqa: F401
import app.payments.models  # noqa: F401
import app.tenders.models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = application.state.settings

    if settings.is_sqlite:
        db_path = settings.database_url.split("///")[-1]
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = build_engine(settings.database_url)

    # Auto-create tables for SQLite in development
    if settings.is_sqlite:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    application.state.engine = engine
    application.state.session_factory = build_session_factory(engine)

    from app.core.scheduler import setup_scheduler, shutdown_scheduler

    if settings.scheduler_enabled:
        setup_scheduler(application.state.session_factory)

    logger.info("%s API started", settings.business_name)
    yield

    shutdown_scheduler()
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    fastapi_app = FastAPI(
        title=settings.business_name,
        description="Tender department and company finance reporting",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.settings = settings

    # CORS
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    from app.auth.router import router as auth_router
    from app.finance.router import router as finance_router
    from app.payments.router import router as payments_router
    from app.reports.router import router as reports_router
    from app.tenders.router import router as tenders_router

    fastapi_app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    fastapi_app.include_router(tenders_router, prefix="/api/tenders", tags=["tenders"])
    fastapi_app.include_router(finance_router, prefix="/api/finance", tags=["finance"])
    fastapi_app.include_router(payments_router, prefix="/api/payments", tags=["payments"])
    fastapi_app.include_router(reports_router, prefix="/api/reports", tags=["reports"])

    # System endpoints
    @fastapi_app.get("/api/system/health")
    async def health():
        return {"data": {"status": "healthy"}}

    # Register exception handlers
    register_exception_handlers(fastapi_app)

    return fastapi_app


app = create_app()
