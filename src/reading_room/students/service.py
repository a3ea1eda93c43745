from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from ..common.datetime_utils import Clock, month_key, now_local, parse_iso_date
from ..common.validators import coerce_bool, coerce_number, require_non_empty, require_positive
from ..core.constants import DEFAULT_FEE, DEFAULT_SHIFT, REMINDER_TEMPLATE
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.service import NotificationResult, Notifier
from . import history
from .model import Number, PaymentEntry, StudentRecord
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use cases over student records: listing, upserts, toggles, payments, alerts.

    Every mutation is load, apply, save. There is no version check, so two
    writers on the same seat race and the last save wins.
    """

    def __init__(
        self,
        students: StudentRepository,
        notifier: Notifier,
        *,
        clock: Clock = now_local,
        default_fee: Number = DEFAULT_FEE,
    ):
        self._students = students
        self._notifier = notifier
        self._clock = clock
        self._default_fee = default_fee

    def current_month(self) -> str:
        return month_key(self._clock())

    def _update(self, record: StudentRecord) -> StudentRecord:
        # Update-only: a seat deleted since it was loaded is not written back.
        if not self._students.update(record):
            raise NotFoundError("Student not found")
        return record

    def _require(self, seat: str) -> StudentRecord:
        record = self._students.get_by_seat(seat)
        if not record:
            raise NotFoundError("Student not found")
        return record

    def list_all(self) -> List[StudentRecord]:
        now = self._clock()
        current = month_key(now)

        out: List[StudentRecord] = []
        for record in self._students.list_all():
            updated = history.ensure_month_entry(record, current, now=now)
            if updated is not record:
                if not self._students.update(updated):
                    logger.info("Seat %s deleted while listing, skipped", record.seat)
                    continue
                logger.info("Opened %s for seat %s", current, record.seat)
            out.append(updated)
        return out

    def get_history(self, seat: str) -> Sequence[PaymentEntry]:
        return self._require(seat).payment_history

    def upsert(
        self,
        *,
        seat: str,
        name: Optional[str] = None,
        mobile: Optional[str] = None,
        join_date: Any = None,
        fee: Any = None,
        attendance: Any = None,
        fee_paid: Any = None,
        shift: Optional[str] = None,
    ) -> StudentRecord:
        seat = require_non_empty(seat, "Seat")
        fields = dict(
            name=None if name is None else str(name),
            mobile=None if mobile is None else str(mobile),
            join_date=self._parse_join_date(join_date),
            fee=self._default_fee if fee is None else require_positive(fee, "Fee"),
            attendance=coerce_bool(attendance) if attendance is not None else False,
            fee_paid=coerce_bool(fee_paid) if fee_paid is not None else False,
            shift=DEFAULT_SHIFT if shift is None else str(shift),
        )

        now = self._clock()
        existing = self._students.get_by_seat(seat)
        if existing:
            record = StudentRecord(
                seat=seat,
                payment_history=existing.payment_history,
                fee_history=existing.fee_history,
                **fields,
            )
        else:
            record = StudentRecord(seat=seat, **fields)

        record = history.ensure_month_entry(record, month_key(now), now=now, paid=record.fee_paid)
        self._students.save(record)
        return record

    @staticmethod
    def _parse_join_date(value: Any) -> Optional[date]:
        if value is None or value == "":
            return None
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError("Join date must be YYYY-MM-DD")

    def delete(self, seat: str) -> None:
        if not self._students.delete_by_seat(seat):
            logger.debug("Delete for unknown seat %s ignored", seat)

    def toggle_attendance(self, seat: str) -> StudentRecord:
        record = history.toggle_attendance(self._require(seat))
        return self._update(record)

    def toggle_payment(self, seat: str, month: str) -> StudentRecord:
        record = history.toggle_month(self._require(seat), month, now=self._clock())
        return self._update(record)

    def set_fee_history(self, seat: str, month: Optional[str], paid: Any) -> StudentRecord:
        if not month:
            raise ValidationError("Month is required")

        record = history.set_fee_history_month(self._require(seat), month, coerce_bool(paid))
        return self._update(record)

    def record_payment(self, seat: str, month: Optional[str], amount: Any = None) -> StudentRecord:
        if not month:
            raise ValidationError("Month is required")
        if amount is not None:
            amount = coerce_number(amount, "Amount")

        record = history.record_payment(self._require(seat), month, amount, now=self._clock())
        return self._update(record)

    def send_alert(self, seat: str, custom_message: Optional[str] = None) -> NotificationResult:
        record = self._require(seat)
        body = custom_message or REMINDER_TEMPLATE.format(name=record.name, fee=record.fee)

        result = self._notifier.send(record.mobile or "", body)
        if result.success:
            logger.info("Alert sent to %s (seat %s)", record.name, seat)
        else:
            logger.warning("Alert for seat %s failed: %s", seat, result.error)
        return result
