"""High level service coordinating users, chores and reconciliation."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from . import chores as _chores
from . import identity as _identity
from . import reporting as _reporting
from .config import EVENT_LOG_PATH, PARENT_NAMES
from .exceptions import ValidationError
from .models import ChildReport, ChildStatement, ReconcileLine, Role, Transfer
from .money import AmountLike
from .ops import StructuredLogger
from .persistence import Chore, ChoreStore, Completion, User


class ChoreTracker:
    """Own the household's state and expose every chore tracker operation.

    One instance is shared by the interactive session and the HTTP API. All
    state lives in the injected :class:`ChoreStore`; each public method is a
    single store transaction.
    """

    __slots__ = (
        "_store",
        "_parent_names",
        "_logger",
        "_clock",
    )

    def __init__(
        self,
        *,
        store: Optional[ChoreStore] = None,
        parent_names: Iterable[str] = PARENT_NAMES,
        logger: Optional[StructuredLogger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store or ChoreStore()
        self._parent_names: Tuple[str, ...] = tuple(parent_names)
        self._logger = logger or StructuredLogger(path=EVENT_LOG_PATH)
        self._clock = clock

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def resolve_role(self, name: str) -> Role:
        return _identity.resolve_role(name, self._parent_names)

    def login(self, name: Optional[str]) -> User:
        """Return the user called ``name``, creating it on first login.

        Surrounding whitespace is dropped before the exact-match lookup.
        """

        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        with self._store.session() as session:
            user, created = _identity.ensure_user(session, name, self._parent_names)
        if created:
            self._logger.log("user_created", name=user.name, role=user.role)
        return user

    def get_user(self, name: str) -> User:
        with self._store.session() as session:
            return _identity.get_user(session, name)

    # ------------------------------------------------------------------
    # Chore catalog and completion log
    # ------------------------------------------------------------------
    def create_chore(
        self,
        name: Optional[str],
        timing: Any,
        price: Optional[AmountLike],
        emoji: Optional[str] = None,
        required: Any = False,
    ) -> Chore:
        with self._store.session() as session:
            chore = _chores.create_chore(session, name, timing, price, emoji, required)
        self._logger.log(
            "chore_created",
            chore_id=chore.id,
            name=chore.name,
            timing=chore.timing,
            price=chore.price,
        )
        return chore

    def list_chores(self) -> Sequence[Chore]:
        with self._store.session() as session:
            return _chores.list_chores(session)

    def record_completion(
        self,
        child_name: str,
        chore_id: Any,
        *,
        at: Optional[datetime] = None,
    ) -> Tuple[Completion, Chore]:
        moment = at or self.now()
        with self._store.session() as session:
            completion = _chores.record_completion(session, child_name, chore_id, moment)
            chore = _chores.get_chore(session, completion.chore_id)
        self._logger.log(
            "completion_recorded",
            child=completion.child_name,
            chore_id=completion.chore_id,
            timestamp=completion.timestamp.isoformat(),
        )
        return completion, chore

    # ------------------------------------------------------------------
    # Reporting and reconciliation
    # ------------------------------------------------------------------
    def window_cutoff(self, now: Optional[datetime] = None) -> datetime:
        return _reporting.window_cutoff(now or self.now())

    def child_report(self, child_name: str, *, cutoff: Optional[datetime] = None) -> ChildStatement:
        """Return ``child_name``'s window aggregate and balance."""

        since = cutoff or self.window_cutoff()
        with self._store.session() as session:
            user = _identity.get_user(session, child_name)
            report = _reporting.aggregate_for_child(session, user.name, since)
            return ChildStatement(report=report, balance=user.balance)

    def report(self, *, cutoff: Optional[datetime] = None) -> Tuple[ChildReport, ...]:
        since = cutoff or self.window_cutoff()
        with self._store.session() as session:
            return _reporting.aggregate_all_children(session, since)

    def reconcile_summary(self, *, cutoff: Optional[datetime] = None) -> Tuple[ReconcileLine, ...]:
        since = cutoff or self.window_cutoff()
        with self._store.session() as session:
            return _reporting.reconcile_summary(session, since)

    def reconcile(self, child_name: str, amount: AmountLike) -> Transfer:
        """Credit ``amount`` to a child; completions stay unpaid and countable."""

        with self._store.session() as session:
            transfer = _reporting.reconcile(session, child_name, amount)
        self._logger.log(
            "reconciled",
            child=transfer.child_name,
            amount=transfer.amount,
            balance=transfer.new_balance,
        )
        return transfer


__all__ = ["ChoreTracker"]
