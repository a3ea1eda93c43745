from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json_list
from .model import FeeEntry, PaymentEntry, StudentRecord
from .repository import StudentRepository

_COLUMNS = "seat, name, mobile, join_date, fee, shift, attendance, fee_paid, payment_history, fee_history"


def _to_number(value):
    value = float(value)
    return int(value) if value.is_integer() else value


def _row_to_record(r: dict) -> StudentRecord:
    return StudentRecord(
        seat=r["seat"],
        name=r.get("name"),
        mobile=r.get("mobile"),
        join_date=r.get("join_date"),
        fee=_to_number(r["fee"]),
        shift=r.get("shift") or "",
        attendance=bool(r.get("attendance")),
        fee_paid=bool(r.get("fee_paid")),
        payment_history=tuple(PaymentEntry.from_dict(e) for e in load_json_list(r.get("payment_history"))),
        fee_history=tuple(FeeEntry.from_dict(e) for e in load_json_list(r.get("fee_history"))),
    )


def _params(record: StudentRecord) -> tuple:
    # Same order as _COLUMNS.
    return (
        record.seat,
        record.name,
        record.mobile,
        record.join_date,
        record.fee,
        record.shift,
        int(record.attendance),
        int(record.fee_paid),
        dump_json([e.to_dict() for e in record.payment_history]),
        dump_json([e.to_dict() for e in record.fee_history]),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_seat(self, seat: str) -> Optional[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE seat=%s", (seat,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_all(self) -> Sequence[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY created_at ASC, seat ASC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def save(self, record: StudentRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO students({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    mobile=VALUES(mobile),
                    join_date=VALUES(join_date),
                    fee=VALUES(fee),
                    shift=VALUES(shift),
                    attendance=VALUES(attendance),
                    fee_paid=VALUES(fee_paid),
                    payment_history=VALUES(payment_history),
                    fee_history=VALUES(fee_history)
                """,
                _params(record),
            )

    def update(self, record: StudentRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, mobile=%s, join_date=%s, fee=%s, shift=%s,
                    attendance=%s, fee_paid=%s, payment_history=%s, fee_history=%s
                WHERE seat=%s
                """,
                _params(record)[1:] + (record.seat,),
            )
            return cur.rowcount > 0

    def delete_by_seat(self, seat: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE seat=%s", (seat,))
            return cur.rowcount > 0
