from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Schedule, ScheduledShift, ShiftTemplate
from .materializer import MaterializationResult, ShiftInstance, materialize

logger = logging.getLogger(__name__)

MATERIALIZATION_KEY = "uq_scheduled_shift_materialization"


class DuplicateShiftError(Exception):
    """A shift with the same (date, template, role) already exists."""


class InvalidShiftError(Exception):
    """The batch violated a constraint other than the materialization key."""


class ShiftWriteTimeout(Exception):
    """The batch insert ran past the configured statement timeout."""


class ExistingInstanceSource(Protocol):
    def list(self, schedule_id: int) -> List[ScheduledShift]: ...

    def list_window(self, restaurant_id: int, start_date: date, end_date: date) -> List[ScheduledShift]: ...


class BatchInstanceWriter(Protocol):
    def create_many(self, instances: Sequence[ShiftInstance]) -> List[int]: ...


class TemplateSource(Protocol):
    def list_by_restaurant(self, restaurant_id: int) -> List[ShiftTemplate]: ...


class SqlTemplateSource:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_by_restaurant(self, restaurant_id: int) -> List[ShiftTemplate]:
        return (
            self.db.query(ShiftTemplate)
            .filter(ShiftTemplate.restaurant_id == restaurant_id)
            .order_by(ShiftTemplate.id)
            .all()
        )


class SqlScheduledShiftStore:
    """Reads a schedule's shifts and inserts new ones as a single transaction."""

    def __init__(self, db: Session, timeout_seconds: Optional[int] = None) -> None:
        self.db = db
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else get_settings().query_timeout_seconds

    def list(self, schedule_id: int) -> List[ScheduledShift]:
        return (
            self.db.query(ScheduledShift)
            .filter(ScheduledShift.schedule_id == schedule_id)
            .order_by(ScheduledShift.shift_date, ScheduledShift.start_time, ScheduledShift.id)
            .all()
        )

    def list_window(self, restaurant_id: int, start_date: date, end_date: date) -> List[ScheduledShift]:
        """Template-derived shifts of every schedule of the restaurant within the dates."""
        return (
            self.db.query(ScheduledShift)
            .filter(
                ScheduledShift.restaurant_id == restaurant_id,
                ScheduledShift.shift_template_id.isnot(None),
                ScheduledShift.shift_date >= start_date,
                ScheduledShift.shift_date <= end_date,
            )
            .order_by(ScheduledShift.shift_date, ScheduledShift.id)
            .all()
        )

    def create_many(self, instances: Sequence[ShiftInstance]) -> List[int]:
        if not instances:
            return []
        rows = [_to_row(instance) for instance in instances]
        try:
            self._apply_timeout()
            self.db.add_all(rows)
            self.db.flush()
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Batch insert of %d shift(s) rejected: %s", len(rows), exc.orig)
            if _is_materialization_conflict(exc):
                raise DuplicateShiftError("shift already exists for this date, template and role") from exc
            raise InvalidShiftError(str(exc.orig)) from exc
        except OperationalError as exc:
            self.db.rollback()
            if "statement timeout" in str(exc.orig).lower():
                raise ShiftWriteTimeout(f"batch insert exceeded {self.timeout_seconds}s") from exc
            raise
        except Exception:
            self.db.rollback()
            raise
        return [row.id for row in rows]

    def _apply_timeout(self) -> None:
        if not self.timeout_seconds or self.db.get_bind().dialect.name != "postgresql":
            return
        # SET LOCAL does not accept bind parameters.
        self.db.execute(text(f"SET LOCAL statement_timeout = {int(self.timeout_seconds) * 1000}"))


def _is_materialization_conflict(exc: IntegrityError) -> bool:
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == MATERIALIZATION_KEY
    # SQLite names the columns instead of the constraint.
    message = str(exc.orig)
    return MATERIALIZATION_KEY in message or (
        "UNIQUE constraint failed" in message and "shift_template_id" in message
    )


def _to_row(instance: ShiftInstance) -> ScheduledShift:
    return ScheduledShift(
        schedule_id=instance.schedule_id,
        restaurant_id=instance.restaurant_id,
        shift_template_id=instance.shift_template_id,
        role_id=instance.role_id,
        employee_id=instance.employee_id,
        shift_date=instance.shift_date,
        start_time=instance.start_time,
        end_time=instance.end_time,
        notes=instance.notes,
    )


def generate_shifts_for_schedule(
    schedule: Schedule,
    templates: TemplateSource,
    source: ExistingInstanceSource,
    writer: BatchInstanceWriter,
) -> tuple[MaterializationResult, List[int]]:
    result = materialize(
        schedule,
        templates.list_by_restaurant(schedule.restaurant_id),
        [
            *source.list(schedule.id),
            *source.list_window(schedule.restaurant_id, schedule.start_date, schedule.end_date),
        ],
    )
    created_ids = writer.create_many(result.created) if result.created else []
    return result, created_ids
