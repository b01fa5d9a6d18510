from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from typing import Iterator
import logging

from .core.config import settings
from .db import models  # noqa: F401  (registers tables on SQLModel.metadata)

logger = logging.getLogger(__name__)


def build_engine(db_url: str, echo: bool = False):
    """Create an engine with options suited to the database scheme."""
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # SQLite specific connect args
        engine_kwargs.update({
            "connect_args": {"check_same_thread": False}
        })
        if ":memory:" in db_url or db_url in ("sqlite://", "sqlite:///"):
            # Share the single in-memory database across sessions
            engine_kwargs["poolclass"] = StaticPool
    else:
        # Better resiliency for managed Postgres
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
        })

    return create_engine(db_url, echo=echo, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def create_db_and_tables(bind=None) -> None:
    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ensured")


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
