from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .database.connection import DBConfig, DatabaseConnection
from .notifications.service import Notifier, build_notifier
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    notifier: Notifier

    student_service: StudentService

    def close(self) -> None:
        if self.conn is not None:
            DatabaseConnection.reset_instance()


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    students_repo = MySQLStudentRepository(conn)
    notifier = build_notifier(settings)
    student_service = StudentService(
        students_repo,
        notifier,
        default_fee=getattr(settings, "DEFAULT_FEE", 500),
    )

    return Container(
        conn=conn,
        students_repo=students_repo,
        notifier=notifier,
        student_service=student_service,
    )
