"""Database connection and session management."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from servicepay.services.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create engine (SQLite uses StaticPool for simplicity in dev/test)."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(database_url, pool_pre_ping=True, echo=echo)


# No DATABASE_URL means accounts live only in the session directory
engine: Engine | None = (
    build_engine(settings.database_url, settings.database_echo) if settings.database_url else None
)

SessionLocal = (
    sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine is not None else None
)


def get_db() -> Generator[Session | None, None, None]:
    """Get database session, or None when no store is configured."""
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "engine",
    "SessionLocal",
    "build_engine",
    "get_db",
]
