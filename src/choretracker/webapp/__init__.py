"""Chore tracker HTTP API package with optional web dependencies.

``app`` is built on first access so importing the package (or running
``choretracker serve``) never constructs a second tracker.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

_OPTIONAL_MODULES = {"fastapi", "starlette", "pydantic"}

try:
    from .application import create_app, get_tracker, router
except ModuleNotFoundError as exc:  # pragma: no cover - missing web extra
    if exc.name in _OPTIONAL_MODULES:
        raise RuntimeError(
            "choretracker.webapp requires the optional FastAPI dependencies. "
            "Install them via `pip install choretracker[web]`."
        ) from exc
    raise

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI

_APP: Optional["FastAPI"] = None


def get_app() -> "FastAPI":
    """Return the shared default application, creating it once."""

    global _APP
    if _APP is None:
        _APP = create_app()
    return _APP


def __getattr__(name: str) -> Any:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__: List[str] = ["app", "create_app", "get_app", "get_tracker", "router"]
