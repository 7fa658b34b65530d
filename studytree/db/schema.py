"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBStudy(Base):
    __tablename__ = "studies"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    study_name: Mapped[str]
    position: Mapped[str]
    starting_position: Mapped[str]
    # the nested move tree is stored as-is, in its wire shape
    move_tree: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    root_branches: Mapped[list[list[dict[str, Any]]]] = mapped_column(JSON, default=list)
    current_path: Mapped[list[int]] = mapped_column(JSON, default=list)
    is_flipped: Mapped[bool] = mapped_column(default=False)
    comments: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
