from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from hwms.core.config import get_settings

settings = get_settings()

# Main SQLAlchemy engine (all hospitals share one schema; isolation is by hospital_id)
engine = create_engine(
    str(settings.database_url),
    future=True,
    pool_pre_ping=True,
)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a DB session.

    Tenant filtering is never done here: every query goes through the
    record store with a predicate computed by the authorization service.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
