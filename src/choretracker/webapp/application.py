"""FastAPI application exposing the chore tracker over HTTP.

Serve it with ``uvicorn choretracker.webapp:app`` or ``choretracker serve``.
Every route is a thin adapter over :class:`~choretracker.service.ChoreTracker`;
lookup and validation failures become 404/400 JSON errors and anything else
is logged and answered with a 500 without stopping the server.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ..config import STATIC_DIR
from ..exceptions import NotFoundError, ValidationError
from ..service import ChoreTracker
from .schemas import (
    ChoreCreateRequest,
    CompleteRequest,
    LoginRequest,
    ReconcileRequest,
    chore_payload,
    report_payload,
    statement_payload,
    summary_payload,
    transfer_payload,
    user_payload,
)

router = APIRouter(prefix="/api")


def get_tracker(request: Request) -> ChoreTracker:
    return request.app.state.tracker


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/login")
def login(payload: LoginRequest, tracker: ChoreTracker = Depends(get_tracker)) -> Dict[str, Any]:
    return user_payload(tracker.login(payload.name))


@router.get("/chores")
def list_chores(tracker: ChoreTracker = Depends(get_tracker)) -> List[Dict[str, Any]]:
    return [chore_payload(chore) for chore in tracker.list_chores()]


@router.post("/chores", status_code=status.HTTP_201_CREATED)
def create_chore(payload: ChoreCreateRequest, tracker: ChoreTracker = Depends(get_tracker)) -> Dict[str, Any]:
    chore = tracker.create_chore(
        payload.name,
        payload.timing,
        payload.price,
        emoji=payload.emoji,
        required=payload.required,
    )
    return chore_payload(chore)


@router.get("/report")
def report(tracker: ChoreTracker = Depends(get_tracker)) -> List[Dict[str, Any]]:
    return [report_payload(entry) for entry in tracker.report()]


@router.get("/reconcile-summary")
def reconcile_summary(tracker: ChoreTracker = Depends(get_tracker)) -> List[Dict[str, Any]]:
    return [summary_payload(line) for line in tracker.reconcile_summary()]


@router.post("/reconcile")
def reconcile(payload: ReconcileRequest, tracker: ChoreTracker = Depends(get_tracker)) -> Dict[str, Any]:
    return transfer_payload(tracker.reconcile(payload.childName, payload.amount))


@router.get("/child/{name}/completions")
def child_completions(name: str, tracker: ChoreTracker = Depends(get_tracker)) -> Dict[str, Any]:
    return statement_payload(tracker.child_report(name))


@router.post("/child/{name}/complete", status_code=status.HTTP_201_CREATED)
def complete_chore(
    name: str,
    payload: CompleteRequest,
    tracker: ChoreTracker = Depends(get_tracker),
) -> Dict[str, Any]:
    _, chore = tracker.record_completion(name, payload.choreId)
    return {"message": "Chore completion recorded", "chore": chore_payload(chore)}


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def _bad_request_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    request.app.state.tracker.logger.log(
        "unexpected_error",
        method=request.method,
        path=request.url.path,
        error=repr(exc),
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app(tracker: Optional[ChoreTracker] = None, *, static_dir: Optional[str] = STATIC_DIR) -> FastAPI:
    """Build the API around ``tracker`` (a fresh in-memory one by default)."""

    app = FastAPI(title="Chore Tracker")
    app.state.tracker = tracker or ChoreTracker()
    app.include_router(router)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(RequestValidationError, _bad_request_body)
    app.add_exception_handler(Exception, _unexpected_error)
    if static_dir and Path(static_dir).is_dir():
        # Mounted last so /api routes win.
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    return app


__all__ = ["create_app", "get_tracker", "router"]
