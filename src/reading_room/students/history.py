"""Month-keyed history rules for a student record.

All functions are pure: they return a new ``StudentRecord`` and never touch the
store. Entries are matched by exact string equality on ``month``; callers pass
keys produced by ``common.datetime_utils.month_key`` (or an equal string).
A function that has nothing to change returns the very same record object.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence, TypeVar

from ..core.exceptions import ValidationError
from .model import FeeEntry, Number, PaymentEntry, StudentRecord

_E = TypeVar("_E", PaymentEntry, FeeEntry)


def _find(entries: Sequence[_E], month: str) -> Optional[int]:
    for idx, entry in enumerate(entries):
        if entry.month == month:
            return idx
    return None


def _replace_at(entries: Sequence[_E], idx: int, entry: _E) -> tuple:
    return tuple(entries[:idx]) + (entry,) + tuple(entries[idx + 1 :])


def ensure_month_entry(record: StudentRecord, month_key: str, *, now: datetime, paid: bool = False) -> StudentRecord:
    """Make sure ``payment_history`` has an entry for ``month_key``.

    Existing entries are left alone; a missing month is appended last with the
    given ``paid`` seed (unpaid by default).
    """

    if _find(record.payment_history, month_key) is not None:
        return record

    entry = PaymentEntry(month=month_key, paid=bool(paid), date=now)
    return replace(record, payment_history=record.payment_history + (entry,))


def toggle_month(record: StudentRecord, month_key: str, *, now: datetime) -> StudentRecord:
    """Flip ``paid`` for a month; a month with no entry yet becomes paid."""

    idx = _find(record.payment_history, month_key)
    if idx is None:
        entry = PaymentEntry(month=month_key, paid=True, date=now)
        return replace(record, payment_history=record.payment_history + (entry,))

    current = record.payment_history[idx]
    flipped = replace(current, paid=not current.paid, date=now)
    return replace(record, payment_history=_replace_at(record.payment_history, idx, flipped))


def record_payment(
    record: StudentRecord,
    month_key: str,
    amount: Optional[Number],
    *,
    now: datetime,
) -> StudentRecord:
    """Mark a month paid with ``amount``; amount and date_paid are last-write-wins."""

    idx = _find(record.payment_history, month_key)
    if idx is None:
        entry = PaymentEntry(month=month_key, paid=True, amount=amount, date=now, date_paid=now)
        return replace(record, payment_history=record.payment_history + (entry,))

    paid = replace(record.payment_history[idx], paid=True, amount=amount, date_paid=now)
    return replace(record, payment_history=_replace_at(record.payment_history, idx, paid))


def set_fee_history_month(record: StudentRecord, month_key: str, paid: bool) -> StudentRecord:
    if not month_key:
        raise ValidationError("Month is required")

    idx = _find(record.fee_history, month_key)
    if idx is None:
        return replace(record, fee_history=record.fee_history + (FeeEntry(month=month_key, paid=bool(paid)),))

    updated = replace(record.fee_history[idx], paid=bool(paid))
    return replace(record, fee_history=_replace_at(record.fee_history, idx, updated))


def toggle_attendance(record: StudentRecord) -> StudentRecord:
    return replace(record, attendance=not record.attendance)
