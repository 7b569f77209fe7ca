"""
Database init - Exports for services
"""

from .base import Base, TimestampMixin
from sportrent.database import engine, SessionLocal

__all__ = ["Base", "TimestampMixin", "engine", "SessionLocal"]
