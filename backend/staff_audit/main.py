"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from staff_audit.config import settings
from staff_audit.database import engine
from staff_audit.logging_config import setup_logging
from staff_audit.migrations_utils import check_migration_status, initialize_database
from staff_audit.routes import auth as auth_module
from staff_audit.routes import staff_action_logs as staff_action_logs_module

setup_logging()
logger = logging.getLogger("staff_audit.main")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    logger.info("Starting staff-audit application")
    logger.info("Environment: %s", settings.environment)

    if settings.auto_create_schema:
        await initialize_database(engine)

    current_rev, head_rev = await check_migration_status(engine)
    logger.info("Database migration status: %s (head: %s)", current_rev, head_rev)
    if current_rev != head_rev and settings.is_production:
        logger.warning(
            "Database migrations are not up to date. "
            "Run 'alembic upgrade head' before starting in production."
        )

    yield

    await engine.dispose()
    logger.info("Shutting down staff-audit application")


app = FastAPI(
    title="staff-audit",
    description="Audit trail of staff and moderation actions taken against user accounts",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_module.router)
app.include_router(staff_action_logs_module.router)


@app.get("/health")
async def health_check():
    """Health check endpoint with database status."""
    db_status = "unknown"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": VERSION,
        "environment": settings.environment,
        "database": db_status,
    }


def run() -> None:
    """Serve the API with the configured host and port."""
    uvicorn.run(
        "staff_audit.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
