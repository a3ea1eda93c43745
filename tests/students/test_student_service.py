from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from reading_room.core.exceptions import NotFoundError, ValidationError
from reading_room.notifications.service import NotificationResult
from reading_room.students.model import FeeEntry, PaymentEntry, StudentRecord
from reading_room.students.service import StudentService

NOW = datetime(2025, 11, 15, 10, 0, 0)


class InMemoryStudents:
    def __init__(self, *records: StudentRecord):
        self._by_seat: dict[str, StudentRecord] = {r.seat: r for r in records}
        self.saved: list[StudentRecord] = []
        self.updated: list[StudentRecord] = []

    def get_by_seat(self, seat: str) -> Optional[StudentRecord]:
        return self._by_seat.get(seat)

    def list_all(self):
        return list(self._by_seat.values())

    def save(self, record: StudentRecord) -> None:
        self.saved.append(record)
        self._by_seat[record.seat] = record

    def update(self, record: StudentRecord) -> bool:
        if record.seat not in self._by_seat:
            return False
        self.updated.append(record)
        self._by_seat[record.seat] = record
        return True

    def delete_by_seat(self, seat: str) -> bool:
        return self._by_seat.pop(seat, None) is not None


class FakeNotifier:
    def __init__(self, result: NotificationResult = NotificationResult(success=True, message="ok")):
        self._result = result
        self.sent: list[tuple[str, str]] = []

    def send(self, to: str, body: str) -> NotificationResult:
        self.sent.append((to, body))
        return self._result


def _service(repo: InMemoryStudents, notifier: FakeNotifier | None = None) -> StudentService:
    return StudentService(repo, notifier or FakeNotifier(), clock=lambda: NOW)


def test_list_all_opens_current_month_and_saves_once():
    repo = InMemoryStudents(
        StudentRecord(seat="S1", payment_history=(PaymentEntry(month="October 2025", paid=True),)),
        StudentRecord(seat="S2", payment_history=(PaymentEntry(month="November 2025", paid=True),)),
    )
    svc = _service(repo)

    students = svc.list_all()

    assert [s.seat for s in students] == ["S1", "S2"]
    assert [e.month for e in students[0].payment_history] == ["October 2025", "November 2025"]
    assert students[0].payment_history[-1].paid is False
    assert [r.seat for r in repo.updated] == ["S1"]
    assert repo.saved == []

    svc.list_all()
    assert len(repo.updated) == 1


def test_get_history_returns_entries():
    entries = (PaymentEntry(month="October 2025", paid=True),)
    svc = _service(InMemoryStudents(StudentRecord(seat="S1", payment_history=entries)))

    assert svc.get_history("S1") == entries


def test_get_history_unknown_seat_raises_not_found():
    svc = _service(InMemoryStudents())

    with pytest.raises(NotFoundError):
        svc.get_history("S2")


def test_upsert_creates_record_with_defaults_and_current_month():
    repo = InMemoryStudents()
    svc = _service(repo)

    record = svc.upsert(seat="S1", name="Asha", mobile="9876543210", join_date="2025-11-01")

    assert record.fee == 500
    assert record.shift == ""
    assert record.attendance is False
    assert record.fee_paid is False
    assert record.join_date == date(2025, 11, 1)
    assert [(e.month, e.paid) for e in record.payment_history] == [("November 2025", False)]
    assert repo.get_by_seat("S1") == record


def test_upsert_new_record_seeds_month_from_fee_paid():
    svc = _service(InMemoryStudents())

    record = svc.upsert(seat="S1", name="Asha", fee=700, fee_paid=True)

    assert record.fee == 700
    assert record.payment_history[0].paid is True


def test_upsert_existing_overwrites_fields_but_keeps_histories():
    existing = StudentRecord(
        seat="S1",
        name="Old",
        fee=800,
        shift="Morning",
        attendance=True,
        payment_history=(PaymentEntry(month="November 2025", paid=False),),
        fee_history=(FeeEntry(month="October 2025", paid=True),),
    )
    repo = InMemoryStudents(existing)
    svc = _service(repo)

    record = svc.upsert(seat="S1", name="New", mobile="123", fee_paid=True)

    assert record.name == "New"
    assert record.fee == 500
    assert record.shift == ""
    assert record.attendance is False
    assert record.fee_paid is True
    assert record.payment_history == existing.payment_history
    assert record.fee_history == existing.fee_history


def test_upsert_existing_without_current_month_appends_seeded_entry():
    existing = StudentRecord(seat="S1", payment_history=(PaymentEntry(month="October 2025", paid=True),))
    svc = _service(InMemoryStudents(existing))

    record = svc.upsert(seat="S1", name="Asha", fee_paid=True)

    assert [(e.month, e.paid) for e in record.payment_history] == [("October 2025", True), ("November 2025", True)]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"seat": ""},
        {"seat": "S1", "fee": 0},
        {"seat": "S1", "fee": "abc"},
        {"seat": "S1", "fee": "nan"},
        {"seat": "S1", "fee": "inf"},
        {"seat": "S1", "fee": float("inf")},
        {"seat": "S1", "join_date": "01/11/2025"},
    ],
)
def test_upsert_rejects_invalid_input(kwargs):
    repo = InMemoryStudents()

    with pytest.raises(ValidationError):
        _service(repo).upsert(**kwargs)

    assert repo.saved == []


def test_delete_is_idempotent():
    repo = InMemoryStudents(StudentRecord(seat="S1"))
    svc = _service(repo)

    svc.delete("S1")
    svc.delete("S1")

    assert repo.get_by_seat("S1") is None


def test_toggle_payment_flips_and_persists():
    repo = InMemoryStudents(StudentRecord(seat="S1", payment_history=(PaymentEntry(month="November 2025"),)))
    svc = _service(repo)

    assert svc.toggle_payment("S1", "November 2025").payment_history[0].paid is True
    assert svc.toggle_payment("S1", "November 2025").payment_history[0].paid is False
    assert len(repo.updated) == 2


def test_toggle_attendance_unknown_seat_raises_not_found():
    with pytest.raises(NotFoundError):
        _service(InMemoryStudents()).toggle_attendance("S9")


def test_set_fee_history_checks_month_before_lookup():
    svc = _service(InMemoryStudents())

    with pytest.raises(ValidationError):
        svc.set_fee_history("S9", "", True)

    with pytest.raises(NotFoundError):
        svc.set_fee_history("S9", "November 2025", True)


def test_record_payment_persists_amount():
    repo = InMemoryStudents(StudentRecord(seat="S1"))
    svc = _service(repo)

    record = svc.record_payment("S1", "December 2025", "750")

    entry = record.payment_history[0]
    assert (entry.month, entry.paid, entry.amount, entry.date_paid) == ("December 2025", True, 750, NOW)
    assert repo.get_by_seat("S1") == record


def test_record_payment_requires_month_and_numeric_amount():
    svc = _service(InMemoryStudents(StudentRecord(seat="S1")))

    with pytest.raises(ValidationError):
        svc.record_payment("S1", None, 500)
    with pytest.raises(ValidationError):
        svc.record_payment("S1", "December 2025", "lots")


def test_send_alert_generates_reminder():
    notifier = FakeNotifier()
    svc = _service(InMemoryStudents(StudentRecord(seat="S1", name="Asha", mobile="9876543210", fee=600)), notifier)

    result = svc.send_alert("S1")

    assert result.success is True
    to, body = notifier.sent[0]
    assert to == "9876543210"
    assert "Asha" in body
    assert "₹600" in body


def test_send_alert_prefers_custom_message():
    notifier = FakeNotifier()
    svc = _service(InMemoryStudents(StudentRecord(seat="S1", name="Asha", mobile="1")), notifier)

    svc.send_alert("S1", "Library closed tomorrow")

    assert notifier.sent == [("1", "Library closed tomorrow")]


def test_send_alert_returns_failure_verbatim():
    failure = NotificationResult(success=False, error="boom")
    svc = _service(InMemoryStudents(StudentRecord(seat="S1", mobile="1")), FakeNotifier(failure))

    assert svc.send_alert("S1") == failure


def test_send_alert_unknown_seat_raises_not_found():
    notifier = FakeNotifier()

    with pytest.raises(NotFoundError):
        _service(InMemoryStudents(), notifier).send_alert("S9")

    assert notifier.sent == []


@pytest.mark.parametrize("amount", ["inf", "Infinity", "nan", float("nan"), float("-inf")])
def test_record_payment_rejects_non_finite_amount(amount):
    repo = InMemoryStudents(StudentRecord(seat="S1"))

    with pytest.raises(ValidationError):
        _service(repo).record_payment("S1", "November 2025", amount)

    assert repo.get_by_seat("S1").payment_history == ()


def test_upsert_stores_name_and_mobile_as_text():
    notifier = FakeNotifier()
    svc = _service(InMemoryStudents(), notifier)

    record = svc.upsert(seat="S1", name=42, mobile=9876543210)

    assert record.name == "42"
    assert record.mobile == "9876543210"
    assert record.to_dict()["mobile"] == "9876543210"

    svc.send_alert("S1")
    assert notifier.sent[0][0] == "9876543210"


class DeletedAfterLoadStudents(InMemoryStudents):
    """Hands out records, then loses them as if another request deleted the seat."""

    def get_by_seat(self, seat: str) -> Optional[StudentRecord]:
        record = super().get_by_seat(seat)
        self.delete_by_seat(seat)
        return record

    def list_all(self):
        records = super().list_all()
        for record in records:
            self.delete_by_seat(record.seat)
        return records


def test_toggle_after_concurrent_delete_does_not_recreate_seat():
    repo = DeletedAfterLoadStudents(StudentRecord(seat="S1", payment_history=(PaymentEntry(month="November 2025"),)))
    svc = _service(repo)

    with pytest.raises(NotFoundError):
        svc.toggle_payment("S1", "November 2025")

    assert InMemoryStudents.get_by_seat(repo, "S1") is None
    assert repo.saved == []


def test_list_all_skips_seats_deleted_while_reconciling():
    repo = DeletedAfterLoadStudents(StudentRecord(seat="S1"))

    assert _service(repo).list_all() == []
    assert InMemoryStudents.get_by_seat(repo, "S1") is None
    assert repo.saved == []
