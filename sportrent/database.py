from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
import logging

from sportrent.core.config import settings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise ValueError("[ERROR] DATABASE_URL not found!")


def build_engine(url: str, **kwargs):
    """Create an engine with the connection options each backend needs."""
    if url.lower().startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,  # FastAPI threadpool
            "timeout": 30,  # wait on the write lock instead of failing
        }
    else:
        connect_args = {
            "connect_timeout": 10,
            "options": "-c statement_timeout=30000"  # 30s query timeout
        }
    connect_args.update(kwargs.pop("connect_args", {}))
    return create_engine(
        url,
        connect_args=connect_args,
        echo=False,
        pool_pre_ping=True,
        **kwargs,
    )


engine = build_engine(DATABASE_URL)

# Create SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine
)


def test_connection() -> bool:
    """Test database connection - NON-BLOCKING."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            logger.info(f"[OK] Database connected: {engine.url.render_as_string(hide_password=True)}")
            return True
    except Exception as e:
        logger.warning(f"[WARN] Database connection failed (continuing): {e}")
        return False


def init_db(bind=None) -> bool:
    """Create tables for every registered model - NON-BLOCKING."""
    try:
        # Import all models so they're registered with Base
        from sportrent.db.base import Base
        from sportrent.models import Equipment, Rental  # noqa: F401

        Base.metadata.create_all(bind=bind or engine)
        logger.info("[OK] Database tables initialized!")
        return True
    except Exception as e:
        logger.warning(f"[WARN] Database init warning: {e}")
        return False


def close_db_connection() -> None:
    """Close database connections."""
    try:
        engine.dispose()
        logger.info("[OK] Database connections closed")
    except Exception as e:
        logger.warning(f"[WARN] Error closing DB: {e}")
