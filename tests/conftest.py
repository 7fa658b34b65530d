"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from studytree.db.schema import Base
from studytree.tree.models import Move

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

MoveFactory = Callable[..., Move]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_move() -> MoveFactory:
    """
    Build a Move without a rules engine.
    NOTE: FENs are placeholders. The tree never looks at them, only the rules engine does.
    """

    def _make_move(
        from_square: str,
        to_square: str,
        san: Optional[str] = None,
        promotion: Optional[str] = None,
        color: str = "w",
    ) -> Move:
        return Move(
            from_square=from_square,
            to_square=to_square,
            san=san or f"{from_square}{to_square}",
            lan=f"{from_square}{to_square}{promotion or ''}",
            before="mock before",
            after="mock after",
            flags="n",
            piece="p",
            color=color,
            promotion=promotion,
        )

    return _make_move
