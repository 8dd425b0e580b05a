# employee_api/store.py
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db import Base
from .exceptions import EmployeeNotFound, OperationCancelled
from .models import EmployeeRow
from .schemas import Employee, EmployeeIn, EmployeePatch

logger = logging.getLogger(__name__)


def _utcnow(after: Optional[datetime] = None) -> datetime:
    """Current UTC time, nudged forward so it is strictly later than `after`."""
    now = datetime.now(timezone.utc)
    if after is not None:
        floor = after if after.tzinfo else after.replace(tzinfo=timezone.utc)
        if now <= floor:
            now = floor + timedelta(microseconds=1)
    return now


def merge_patch(stored: Employee, patch: EmployeePatch) -> Employee:
    """Build the record an update should write; empty patch fields keep the stored value."""
    return Employee(
        id=stored.id,
        name=patch.name or stored.name,
        designation=patch.designation or stored.designation,
        salary=patch.salary or stored.salary,
        created_at=stored.created_at,
        updated_at=stored.updated_at,
    )


def _check_cancel(db: Session, cancel: Optional[threading.Event], action: str) -> None:
    if cancel is not None and cancel.is_set():
        db.rollback()
        logger.info("Abandoned %s before commit: caller timed out", action)
        raise OperationCancelled(f"{action} cancelled before commit")


class EmployeeStore:
    """Row-level CRUD over the employee table.

    Every call checks a session out of `session_factory` and returns it on exit,
    so one store can serve concurrent callers. Mutating calls take an optional
    `cancel` event and refuse to commit once it is set.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def ensure_schema(self) -> None:
        engine = self.session_factory.kw["bind"]
        Base.metadata.create_all(bind=engine, tables=[EmployeeRow.__table__])
        logger.info("Ensured employee table exists")

    def ping(self) -> bool:
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1")).scalar_one()
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def _get_row(self, db: Session, employee_id: int) -> EmployeeRow:
        row = db.execute(
            select(EmployeeRow).where(EmployeeRow.id == employee_id)
        ).scalar_one_or_none()
        if row is None:
            raise EmployeeNotFound(employee_id)
        return row

    def create(self, record: EmployeeIn, cancel: Optional[threading.Event] = None) -> Employee:
        now = _utcnow()
        row = EmployeeRow(
            name=record.name,
            designation=record.designation,
            salary=record.salary,
            created_at=now,
            updated_at=now,
        )
        if record.id:
            row.id = record.id
        with self.session_factory() as db:
            db.add(row)
            try:
                db.flush()
                _check_cancel(db, cancel, "create")
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            db.refresh(row)
            return Employee.from_row(row)

    def read_one(self, employee_id: int) -> Employee:
        with self.session_factory() as db:
            return Employee.from_row(self._get_row(db, employee_id))

    def read_page(self, limit: int, offset: int) -> List[Employee]:
        if limit <= 0 or offset < 0:
            return []
        with self.session_factory() as db:
            rows = db.execute(
                select(EmployeeRow).order_by(EmployeeRow.id).limit(limit).offset(offset)
            ).scalars().all()
            return [Employee.from_row(r) for r in rows]

    def update(
        self,
        employee_id: int,
        patch: EmployeePatch,
        cancel: Optional[threading.Event] = None,
    ) -> Employee:
        with self.session_factory() as db:
            row = self._get_row(db, employee_id)
            merged = merge_patch(Employee.from_row(row), patch)

            row.name = merged.name
            row.designation = merged.designation
            row.salary = merged.salary
            row.updated_at = _utcnow(after=row.updated_at)
            try:
                db.flush()
                _check_cancel(db, cancel, "update")
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            db.refresh(row)
            return Employee.from_row(row)

    def delete(self, employee_id: int, cancel: Optional[threading.Event] = None) -> None:
        with self.session_factory() as db:
            row = self._get_row(db, employee_id)
            db.delete(row)
            try:
                db.flush()
                _check_cancel(db, cancel, "delete")
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
