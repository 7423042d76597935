from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool, StaticPool

from src.core.configs import settings


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            options["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **options)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        poolclass=QueuePool,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        echo=False,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    # Import models so they register on Base.metadata
    from src.models import schema  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
