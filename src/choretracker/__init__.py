"""Chore tracker package: household chores, completions and allowance reconciliation."""

from .exceptions import ChoreTrackerError, NotFoundError, ValidationError
from .models import ChildReport, ChildStatement, ReconcileLine, ReportItem, Role, Timing, Transfer
from .money import format_currency
from .ops import StructuredLogger
from .persistence import Chore, ChoreStore, Completion, User
from .service import ChoreTracker

__all__ = [
    "ChildReport",
    "ChildStatement",
    "Chore",
    "ChoreStore",
    "ChoreTracker",
    "ChoreTrackerError",
    "Completion",
    "NotFoundError",
    "ReconcileLine",
    "ReportItem",
    "Role",
    "StructuredLogger",
    "Timing",
    "Transfer",
    "User",
    "ValidationError",
    "format_currency",
]
