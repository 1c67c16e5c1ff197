from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from pet_nutrition.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine for the pet records database."""
    connect_args = {}
    # SQLite connections are shared across FastAPI's worker threads
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create all pet, log and plan tables if they do not exist yet."""
    # Registers the mapped classes on Base.metadata
    from pet_nutrition.models import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
