from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from promptpilot.base import Base
from promptpilot.config import settings
from promptpilot.prompts.models import PromptRecord
from promptpilot.users.models import User


def build_engine(url: str):
    """Engine for the configured database; SQLite sessions are shared across the threadpool."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

# Models to register with Base.metadata for create_all()
MODELS = [User, PromptRecord]


def get_db() -> Generator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables. Safe to call multiple times."""
    Base.metadata.create_all(bind=engine)
