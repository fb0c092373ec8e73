from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from ..models import Employee, Event, Restaurant, Schedule, ScheduledShift
from . import mailer

logger = logging.getLogger(__name__)


@dataclass
class SendFailure:
    employee_id: int
    employee_name: str
    email: str
    error: str


@dataclass
class SendSummary:
    total_recipients: int = 0
    successful: int = 0
    failed: int = 0
    failures: List[SendFailure] = field(default_factory=list)


def format_display_date(value: date) -> str:
    return f"{value.strftime('%a, %b')} {value.day}, {value.year}"


def format_shift_date(value: date) -> str:
    return f"{value.strftime('%A, %b')} {value.day}"


def format_display_time(value: time) -> str:
    return value.strftime("%I:%M %p").lstrip("0")


def build_schedule_email_data(
    employee: Employee,
    shifts: Iterable[ScheduledShift],
    events: Optional[Iterable[Event]],
    restaurant_name: str,
    schedule: Schedule,
) -> dict:
    own_shifts = [
        {
            "date": format_shift_date(shift.shift_date),
            "start_time": format_display_time(shift.start_time),
            "end_time": format_display_time(shift.end_time),
            "role_name": shift.role.name if shift.role else "",
            "role_color": shift.role.color if shift.role else "",
            "notes": shift.notes or "",
        }
        for shift in shifts
        if shift.employee_id == employee.id
    ]
    event_rows = [
        {
            "date": format_display_date(event.event_date),
            "title": event.title,
            "description": event.description or "",
            "start_time": format_display_time(event.start_time),
            "end_time": format_display_time(event.end_time),
        }
        for event in events or ()
    ]
    return {
        "restaurant_name": restaurant_name,
        "employee_name": employee.full_name,
        "schedule_start": format_display_date(schedule.start_date),
        "schedule_end": format_display_date(schedule.end_date),
        "shifts": own_shifts,
        "events": event_rows,
        "has_shifts": bool(own_shifts),
        "has_events": bool(event_rows),
    }


def send_schedule_emails(
    db: Session,
    restaurant: Restaurant,
    schedule: Schedule,
    include_events: bool = False,
    send: Callable[[str, dict], None] = mailer.send_schedule_email,
) -> SendSummary:
    """Email every employee their own shifts; failures are collected, not raised."""
    employees = (
        db.query(Employee)
        .filter(Employee.restaurant_id == restaurant.id)
        .order_by(Employee.full_name, Employee.id)
        .all()
    )
    shifts = (
        db.query(ScheduledShift)
        .options(joinedload(ScheduledShift.role))
        .filter(ScheduledShift.schedule_id == schedule.id)
        .order_by(ScheduledShift.shift_date, ScheduledShift.start_time)
        .all()
    )
    events: List[Event] = []
    if include_events:
        events = (
            db.query(Event)
            .filter(
                Event.restaurant_id == restaurant.id,
                Event.event_date >= schedule.start_date,
                Event.event_date <= schedule.end_date,
            )
            .order_by(Event.event_date, Event.start_time)
            .all()
        )

    summary = SendSummary(total_recipients=len(employees))
    for employee in employees:
        if not employee.email:
            summary.failed += 1
            summary.failures.append(SendFailure(employee.id, employee.full_name, "", "no email address"))
            continue
        context = build_schedule_email_data(employee, shifts, events, restaurant.name, schedule)
        try:
            send(employee.email, context)
        except Exception as exc:
            logger.warning(
                "Failed to send schedule email to employee %s (%s): %s",
                employee.id,
                employee.email,
                exc,
            )
            summary.failed += 1
            summary.failures.append(SendFailure(employee.id, employee.full_name, employee.email, str(exc)))
            continue
        summary.successful += 1
    return summary
