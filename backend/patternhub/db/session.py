from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from patternhub.config import DATABASE_URL
from patternhub.db.models import Base


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # FastAPI serves sync routes from a thread pool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    """FastAPI dependency yielding one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    Base.metadata.create_all(bind=bind or engine)
