"""Request bodies and JSON serialisers for the chore tracker HTTP API."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from ..models import ChildReport, ChildStatement, ReconcileLine, ReportItem, Transfer
from ..persistence import Chore, User


class LoginRequest(BaseModel):
    name: Optional[str] = None


class ChoreCreateRequest(BaseModel):
    name: Optional[str] = None
    timing: Optional[str] = None
    price: Any = None  # number or numeric string
    emoji: Optional[str] = None
    required: Any = False


class ReconcileRequest(BaseModel):
    childName: Optional[str] = None
    amount: Any = None


class CompleteRequest(BaseModel):
    choreId: Any = None


def user_payload(user: User) -> Dict[str, Any]:
    return {"name": user.name, "role": user.role, "balance": user.balance}


def chore_payload(chore: Chore) -> Dict[str, Any]:
    return {
        "id": chore.id,
        "name": chore.name,
        "timing": chore.timing,
        "price": chore.price,
        "emoji": chore.emoji,
        "required": chore.required,
    }


def item_payload(item: ReportItem) -> Dict[str, Any]:
    return {
        "choreId": item.chore.id,
        "name": item.chore.name,
        "timing": item.chore.timing,
        "emoji": item.chore.emoji,
        "required": item.chore.required,
        "count": item.count,
        "value": item.value,
    }


def report_payload(report: ChildReport) -> Dict[str, Any]:
    return {
        "childName": report.child_name,
        "total": report.total,
        "items": [item_payload(item) for item in report.items],
    }


def statement_payload(statement: ChildStatement) -> Dict[str, Any]:
    return {
        "childName": statement.report.child_name,
        "items": [item_payload(item) for item in statement.report.items],
        "total": statement.report.total,
        "balance": statement.balance,
    }


def summary_payload(line: ReconcileLine) -> Dict[str, Any]:
    return {
        "childName": line.child_name,
        "earned": line.earned,
        "currentBalance": line.current_balance,
    }


def transfer_payload(transfer: Transfer) -> Dict[str, Any]:
    return {
        "childName": transfer.child_name,
        "amount": transfer.amount,
        "newBalance": transfer.new_balance,
    }


__all__ = [
    "ChoreCreateRequest",
    "CompleteRequest",
    "LoginRequest",
    "ReconcileRequest",
    "chore_payload",
    "item_payload",
    "report_payload",
    "statement_payload",
    "summary_payload",
    "transfer_payload",
    "user_payload",
]
