"""SQLModel tables and the store that owns the chore tracker's state."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Iterator, Optional

from sqlalchemy import Column, DateTime
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine

from .config import DATABASE_URL

# ---------------------------------------------------------------------------
# Database models
# ---------------------------------------------------------------------------


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    role: str  # parent|child
    balance: float = 0.0


class Chore(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    timing: str  # daily|adhoc|weekly
    price: float
    emoji: str
    required: bool = False


class Completion(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    child_name: str = Field(index=True)
    chore_id: int = Field(foreign_key="chore.id")
    # Naive local time from the tracker clock.
    timestamp: datetime = Field(sa_column=Column(DateTime(timezone=False), index=True, nullable=False))


def _is_memory_url(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"} or "mode=memory" in url


class ChoreStore:
    """Own the engine holding users, chores and completions.

    Every unit of work runs through :meth:`session`, which holds one coarse
    re-entrant lock for its whole duration so the three tables and the chore
    id sequence change together.
    """

    def __init__(self, url: str = DATABASE_URL, *, echo: bool = False) -> None:
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        if _is_memory_url(url):
            self.engine = create_engine(
                url,
                echo=echo,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        self.url = url
        self._lock = RLock()
        SQLModel.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session under the store lock, committing on success."""

        with self._lock:
            with Session(self.engine, expire_on_commit=False) as session:
                yield session
                session.commit()

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Chore", "ChoreStore", "Completion", "User"]
