"""Domain enums and report value objects used by the chore tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .persistence import Chore


class Role(str, Enum):
    """Roles a household member can have."""

    PARENT = "parent"
    CHILD = "child"


class Timing(str, Enum):
    """Cadence a chore is expected to be done at."""

    DAILY = "daily"
    ADHOC = "adhoc"
    WEEKLY = "weekly"


@dataclass(slots=True)
class ReportItem:
    """Completions of one chore by one child inside the report window."""

    chore: "Chore"
    count: int
    value: float


@dataclass(slots=True)
class ChildReport:
    """Per-child aggregate over the report window.

    ``items`` follow catalog order and never contain zero-count entries.
    ``total`` is the unrounded running sum of the item values.
    """

    child_name: str
    items: Tuple[ReportItem, ...] = field(default_factory=tuple)
    total: float = 0.0


@dataclass(slots=True)
class ChildStatement:
    """A child's window report alongside their balance."""

    report: ChildReport
    balance: float


@dataclass(slots=True)
class ReconcileLine:
    """What a child earned in the window next to their current balance."""

    child_name: str
    earned: float
    current_balance: float


@dataclass(slots=True)
class Transfer:
    """Outcome of a reconciliation payment."""

    child_name: str
    amount: float
    new_balance: float


__all__ = ["ChildReport", "ChildStatement", "ReconcileLine", "ReportItem", "Role", "Timing", "Transfer"]
