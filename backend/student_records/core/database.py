from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from student_records.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # Bounded pool: borrow per query, stale idle members are replaced.
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": 0,
        "pool_timeout": settings.db_pool_timeout_seconds,
        "pool_recycle": settings.db_pool_recycle_seconds,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    # Imported for its side effect of registering tables on Base.metadata.
    from student_records.models import entities  # noqa: F401

    Base.metadata.create_all(bind=engine)
