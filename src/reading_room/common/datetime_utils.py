from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from ..core.constants import MONTH_NAMES

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD into date; a trailing time part is ignored."""
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can pass a fixed clock instead.
    """
    return datetime.now()


def month_key(moment: date) -> str:
    """Canonical history key, e.g. "November 2025"."""
    return f"{MONTH_NAMES[moment.month - 1]} {moment.year:04d}"
