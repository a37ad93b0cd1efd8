"""Database migration utilities for application startup."""

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger("staff_audit.migrations")

ALEMBIC_INI_PATH = Path(__file__).resolve().parents[1] / "alembic.ini"


def get_alembic_config() -> Config:
    """Return the Alembic config for backend/alembic.ini."""
    if not ALEMBIC_INI_PATH.exists():
        raise FileNotFoundError(f"alembic.ini not found at {ALEMBIC_INI_PATH}.")

    config = Config(str(ALEMBIC_INI_PATH))
    config.set_main_option("script_location", str(ALEMBIC_INI_PATH.parent / "alembic"))
    return config


async def check_migration_status(engine: AsyncEngine) -> tuple[str, str]:
    """Return (current_revision, head_revision); ("unknown", "unknown") if it cannot be read."""
    try:
        config = get_alembic_config()

        async with engine.begin() as conn:
            result = await conn.execute(text("SELECT version_num FROM alembic_version"))
            current = result.scalar_one_or_none()

        head = ScriptDirectory.from_config(config).get_current_head()
        return (current or "none", head or "none")

    except Exception as e:
        logger.warning("Could not check migration status: %s", e)
        return ("unknown", "unknown")


async def initialize_database(engine: AsyncEngine) -> None:
    """Create any missing tables from the ORM metadata."""
    from staff_audit.database import Base
    import staff_audit.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema initialized")
    except Exception as e:
        logger.error("Database initialization failed: %s", e)
        raise
