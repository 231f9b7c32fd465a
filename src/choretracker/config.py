"""Configuration constants for the chore tracker."""
from __future__ import annotations

import os
from datetime import timedelta
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def _split_names(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


PARENT_NAMES: Tuple[str, ...] = _split_names(os.environ.get("CHORES_PARENT_NAMES", "aaron,janet"))
DATABASE_URL = os.environ.get("CHORES_DATABASE_URL", "sqlite://")
HOST = os.environ.get("CHORES_HOST", "127.0.0.1")
PORT = int(os.environ.get("CHORES_PORT", "3000"))
EVENT_LOG_PATH = os.environ.get("CHORES_EVENT_LOG") or None
STATIC_DIR = os.environ.get("CHORES_STATIC_DIR") or None

CHORE_TIMINGS: Tuple[str, ...] = ("daily", "adhoc", "weekly")
DEFAULT_EMOJI = "⭐"
REPORT_WINDOW = timedelta(days=7)

__all__ = [
    "PARENT_NAMES",
    "DATABASE_URL",
    "HOST",
    "PORT",
    "EVENT_LOG_PATH",
    "STATIC_DIR",
    "CHORE_TIMINGS",
    "DEFAULT_EMOJI",
    "REPORT_WINDOW",
]
