import logging

import uvicorn

from sportrent.core.config import settings

logger = logging.getLogger("sportrent.run")


def run_migrations() -> bool:
    """Run Alembic migrations."""
    try:
        from alembic.config import Config
        from alembic import command

        alembic_cfg = Config("alembic.ini")
        logger.info("[STARTUP] Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("[STARTUP] Migrations complete!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Migration failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    # Tables are otherwise created by the app's startup hook
    if settings.RUN_MIGRATIONS and not run_migrations():
        logger.warning("[WARN] Falling back to direct table creation on startup...")

    uvicorn.run(
        "sportrent.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
