"""Trailing-window aggregation of chore completions and reconciliation.

Both front-ends read reports through this module. Values are ``count * price``
products summed without intermediate rounding; callers format them once at
the presentation boundary.

Reconciliation deliberately keeps no link between a payment and the
completions that motivated it: completions are never marked paid, so paying
a child twice for the same window credits them twice.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlmodel import Session, select

from .config import REPORT_WINDOW
from .exceptions import ValidationError
from .identity import get_child
from .models import ChildReport, ReconcileLine, ReportItem, Role, Transfer
from .money import AmountLike, require_positive, to_amount
from .persistence import Chore, Completion, User


def window_cutoff(now: datetime) -> datetime:
    """Return the inclusive lower bound of the report window ending at ``now``."""

    return now - REPORT_WINDOW


def _tally(session: Session, cutoff: datetime, child_name: Optional[str] = None) -> Counter:
    query = select(Completion.child_name, Completion.chore_id).where(Completion.timestamp >= cutoff)
    if child_name is not None:
        query = query.where(Completion.child_name == child_name)
    return Counter((name, chore_id) for name, chore_id in session.exec(query).all())


def _build_report(child_name: str, chores: Sequence[Chore], tally: Counter) -> ChildReport:
    items: List[ReportItem] = []
    total = 0.0
    for chore in chores:
        count = tally.get((child_name, chore.id), 0)
        if count > 0:
            value = count * chore.price
            total += value
            items.append(ReportItem(chore=chore, count=count, value=value))
    return ChildReport(child_name=child_name, items=tuple(items), total=total)


def _catalog(session: Session) -> Tuple[Chore, ...]:
    return tuple(session.exec(select(Chore).order_by(Chore.id)).all())


def _children(session: Session) -> Tuple[User, ...]:
    return tuple(session.exec(select(User).where(User.role == Role.CHILD.value).order_by(User.id)).all())


def aggregate_for_child(session: Session, child_name: str, cutoff: datetime) -> ChildReport:
    """Count and value ``child_name``'s completions at or after ``cutoff``."""

    tally = _tally(session, cutoff, child_name)
    return _build_report(child_name, _catalog(session), tally)


def aggregate_all_children(session: Session, cutoff: datetime) -> Tuple[ChildReport, ...]:
    """Aggregate every child in the order they were first seen."""

    chores = _catalog(session)
    tally = _tally(session, cutoff)
    return tuple(_build_report(child.name, chores, tally) for child in _children(session))


def reconcile_summary(session: Session, cutoff: datetime) -> Tuple[ReconcileLine, ...]:
    chores = _catalog(session)
    tally = _tally(session, cutoff)
    return tuple(
        ReconcileLine(
            child_name=child.name,
            earned=_build_report(child.name, chores, tally).total,
            current_balance=child.balance,
        )
        for child in _children(session)
    )


def reconcile(session: Session, child_name: str, amount: AmountLike) -> Transfer:
    """Credit ``amount`` to ``child_name``'s balance."""

    if not child_name:
        raise ValidationError("childName is required")
    child = get_child(session, child_name)
    value = require_positive(to_amount(amount))
    child.balance += value
    session.add(child)
    session.flush()
    return Transfer(child_name=child.name, amount=value, new_balance=child.balance)


__all__ = [
    "aggregate_all_children",
    "aggregate_for_child",
    "reconcile",
    "reconcile_summary",
    "window_cutoff",
]
