from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Tuple, Union

from ..core.constants import DEFAULT_FEE, DEFAULT_SHIFT

Number = Union[int, float]


def _iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class PaymentEntry:
    """One month of a seat-holder's payment history."""

    month: str
    paid: bool = False
    amount: Optional[Number] = None
    date: Optional[datetime] = None
    date_paid: Optional[datetime] = None

    def to_dict(self) -> dict:
        data: dict = {"month": self.month, "paid": self.paid, "date": _iso(self.date)}
        if self.amount is not None:
            data["amount"] = self.amount
        if self.date_paid is not None:
            data["datePaid"] = _iso(self.date_paid)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentEntry":
        return cls(
            month=str(data["month"]),
            paid=bool(data.get("paid", False)),
            amount=data.get("amount"),
            date=_parse_timestamp(data.get("date")),
            date_paid=_parse_timestamp(data.get("datePaid")),
        )


@dataclass(frozen=True)
class FeeEntry:
    month: str
    paid: bool = False

    def to_dict(self) -> dict:
        return {"month": self.month, "paid": self.paid}

    @classmethod
    def from_dict(cls, data: dict) -> "FeeEntry":
        return cls(month=str(data["month"]), paid=bool(data.get("paid", False)))


@dataclass(frozen=True)
class StudentRecord:
    """Domain entity: one tracked seat and its histories."""

    seat: str
    name: Optional[str] = None
    mobile: Optional[str] = None
    join_date: Optional[date] = None
    fee: Number = DEFAULT_FEE
    shift: str = DEFAULT_SHIFT
    attendance: bool = False
    fee_paid: bool = False
    payment_history: Tuple[PaymentEntry, ...] = ()
    fee_history: Tuple[FeeEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "seat": self.seat,
            "name": self.name,
            "mobile": self.mobile,
            "joinDate": _iso(self.join_date),
            "fee": self.fee,
            "shift": self.shift,
            "attendance": self.attendance,
            "feePaid": self.fee_paid,
            "paymentHistory": [e.to_dict() for e in self.payment_history],
            "feeHistory": [e.to_dict() for e in self.fee_history],
        }
