"""Generate database session"""

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from studytree.core.config import Settings
from studytree.db.schema import Base


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured database. Ensures all tables are created."""
    settings = settings or Settings.from_env()
    connect_args = (
        {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    )
    engine = create_engine(
        settings.database_url, echo=settings.sql_echo, connect_args=connect_args
    )
    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(settings: Optional[Settings] = None) -> sessionmaker[Session]:
    return sessionmaker(bind=build_engine(settings))


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
