from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StudentRecord


class StudentRepository(Protocol):
    def get_by_seat(self, seat: str) -> Optional[StudentRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[StudentRecord]:
        raise NotImplementedError

    def save(self, record: StudentRecord) -> None:
        """Insert or overwrite the record stored under ``record.seat``.

        Last write wins; there is no version check.
        Used by create-or-update, so it also recreates a seat deleted
        concurrently.
        """

        raise NotImplementedError

    def update(self, record: StudentRecord) -> bool:
        """Overwrite an existing record; returns False when the seat is gone.

        Never inserts, so a record loaded before a concurrent delete stays deleted.
        """

        raise NotImplementedError

    def delete_by_seat(self, seat: str) -> bool:
        """Returns False when nothing was stored for ``seat``."""

        raise NotImplementedError
