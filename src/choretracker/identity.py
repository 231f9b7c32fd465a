"""Name based identity resolution for household members."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from sqlmodel import Session, select

from .exceptions import NotFoundError
from .models import Role
from .persistence import User


def resolve_role(name: str, parent_names: Iterable[str]) -> Role:
    """Return :attr:`Role.PARENT` when ``name`` is on the allow-list.

    Matching ignores case; every other name is a child.
    """

    lowered = name.lower()
    if any(lowered == parent.lower() for parent in parent_names):
        return Role.PARENT
    return Role.CHILD


def find_user(session: Session, name: str) -> Optional[User]:
    return session.exec(select(User).where(User.name == name)).first()


def get_user(session: Session, name: str) -> User:
    user = find_user(session, name)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_child(session: Session, name: str) -> User:
    """Return the child called ``name`` or raise :class:`NotFoundError`."""

    user = find_user(session, name)
    if user is None or user.role != Role.CHILD:
        raise NotFoundError("Child not found")
    return user


def ensure_user(session: Session, name: str, parent_names: Iterable[str]) -> Tuple[User, bool]:
    """Look up ``name`` exactly as given, creating the user on first sight.

    Storage is case sensitive even though role inference is not, so ``"Sam"``
    and ``"sam"`` are two different children. Returns the user and whether it
    was just created.
    """

    user = find_user(session, name)
    if user is not None:
        return user, False
    user = User(name=name, role=resolve_role(name, parent_names).value, balance=0.0)
    session.add(user)
    session.flush()
    session.refresh(user)
    return user, True


__all__ = ["ensure_user", "find_user", "get_child", "get_user", "resolve_role"]
