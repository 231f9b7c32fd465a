"""Chore catalog and completion log for the chore tracker."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlmodel import Session, select

from .config import DEFAULT_EMOJI
from .exceptions import NotFoundError, ValidationError
from .identity import get_child
from .models import Timing
from .money import AmountLike, require_positive, to_amount
from .persistence import Chore, Completion


# SQLite INTEGER range.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _parse_timing(value: Any) -> Timing:
    try:
        return Timing(value)
    except ValueError as exc:
        raise ValidationError("Invalid timing value") from exc


def _parse_chore_id(value: Any) -> Optional[int]:
    """Return ``value`` as a storable chore id, or ``None`` when it cannot be one."""

    parsed: Optional[int] = None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if value.is_integer() else None
    elif isinstance(value, str):
        if "_" in value:
            return None
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
    if parsed is None or not _MIN_ID <= parsed <= _MAX_ID:
        return None
    return parsed


def create_chore(
    session: Session,
    name: Optional[str],
    timing: Any,
    price: Optional[AmountLike],
    emoji: Optional[str] = None,
    required: Any = False,
) -> Chore:
    """Validate and append a chore to the catalog.

    Ids are assigned by the table's integer primary key, starting at 1 and
    increasing with every insert since chores are never deleted.
    """

    if not name or not name.strip() or timing is None or price is None:
        raise ValidationError("name, timing and price are required")
    parsed_timing = _parse_timing(timing)
    amount = require_positive(to_amount(price, field="price"), allow_zero=True, field="price")
    chore = Chore(
        name=name,
        timing=parsed_timing.value,
        price=amount,
        emoji=emoji if emoji and emoji.strip() else DEFAULT_EMOJI,
        required=bool(required),
    )
    session.add(chore)
    session.flush()
    session.refresh(chore)
    return chore


def list_chores(session: Session) -> Sequence[Chore]:
    return tuple(session.exec(select(Chore).order_by(Chore.id)).all())


def get_chore(session: Session, chore_id: Any) -> Chore:
    parsed = _parse_chore_id(chore_id)
    chore = session.get(Chore, parsed) if parsed is not None else None
    if chore is None:
        raise NotFoundError("Chore not found")
    return chore


def record_completion(session: Session, child_name: str, chore_id: Any, now: datetime) -> Completion:
    """Append a completion of ``chore_id`` by ``child_name`` at ``now``.

    Repeats are not collapsed: every call is logged and counted.
    """

    child = get_child(session, child_name)
    chore = get_chore(session, chore_id)
    completion = Completion(child_name=child.name, chore_id=chore.id, timestamp=now)
    session.add(completion)
    session.flush()
    session.refresh(completion)
    return completion


__all__ = ["create_chore", "get_chore", "list_chores", "record_completion"]
