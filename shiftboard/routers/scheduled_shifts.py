from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Employee, ScheduledShift, ShiftTemplate
from ..schemas.schedule import ScheduledShiftCreate, ScheduledShiftRead, ScheduledShiftUpdate
from ..services.materializer import ShiftInstance
from ..services.scheduled_shifts import DuplicateShiftError, InvalidShiftError, SqlScheduledShiftStore
from ..services.timerange import InvalidRange, TimeRange, day_of_week
from .common import ensure_roles_belong, get_restaurant_or_404, get_schedule_or_404

router = APIRouter(
    prefix="/api/restaurants/{restaurant_id}/schedules/{schedule_id}/shifts",
    tags=["scheduled-shifts"],
)


def _validate_window(start, end) -> None:
    try:
        TimeRange.from_clock("1970-01-01", start, end)
    except InvalidRange:
        raise HTTPException(status_code=400, detail="End time must be after start time")


def _ensure_employee(db: Session, restaurant_id: int, employee_id: int | None) -> None:
    if employee_id is None:
        return
    exists = (
        db.query(Employee.id)
        .filter(Employee.id == employee_id, Employee.restaurant_id == restaurant_id)
        .first()
    )
    if not exists:
        raise HTTPException(status_code=400, detail="Employee not found")


def _ensure_template(db: Session, restaurant_id: int, template_id: int | None, shift_date) -> None:
    if template_id is None:
        return
    template = (
        db.query(ShiftTemplate)
        .filter(ShiftTemplate.id == template_id, ShiftTemplate.restaurant_id == restaurant_id)
        .one_or_none()
    )
    if not template:
        raise HTTPException(status_code=400, detail="Shift template not found")
    if template.day_of_week != day_of_week(shift_date):
        raise HTTPException(status_code=400, detail="Shift date does not fall on the template's weekday")


@router.get("", response_model=list[ScheduledShiftRead])
async def list_scheduled_shifts(restaurant_id: int, schedule_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    return SqlScheduledShiftStore(db).list(schedule.id)


@router.post("", response_model=ScheduledShiftRead, status_code=status.HTTP_201_CREATED)
async def create_scheduled_shift(
    restaurant_id: int,
    schedule_id: int,
    payload: ScheduledShiftCreate,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    if not schedule.start_date <= payload.shift_date <= schedule.end_date:
        raise HTTPException(status_code=400, detail="Shift date is outside the schedule")
    _validate_window(payload.start_time, payload.end_time)
    ensure_roles_belong(db, restaurant_id, [payload.role_id])
    _ensure_employee(db, restaurant_id, payload.employee_id)
    _ensure_template(db, restaurant_id, payload.shift_template_id, payload.shift_date)

    instance = ShiftInstance(
        schedule_id=schedule.id,
        restaurant_id=restaurant_id,
        shift_template_id=payload.shift_template_id,
        role_id=payload.role_id,
        shift_date=payload.shift_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        employee_id=payload.employee_id,
        notes=payload.notes,
    )
    try:
        (shift_id,) = SqlScheduledShiftStore(db).create_many([instance])
    except DuplicateShiftError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InvalidShiftError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return db.get(ScheduledShift, shift_id)


def _get_shift(db: Session, schedule_id: int, shift_id: int) -> ScheduledShift:
    shift = (
        db.query(ScheduledShift)
        .filter(ScheduledShift.id == shift_id, ScheduledShift.schedule_id == schedule_id)
        .one_or_none()
    )
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


@router.patch("/{shift_id}", response_model=ScheduledShiftRead)
async def update_scheduled_shift(
    restaurant_id: int,
    schedule_id: int,
    shift_id: int,
    payload: ScheduledShiftUpdate,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    shift = _get_shift(db, schedule.id, shift_id)
    changes = payload.model_dump(exclude_unset=True)
    if "employee_id" in changes:
        # An explicit null unassigns the shift.
        _ensure_employee(db, restaurant_id, changes["employee_id"])
        shift.employee_id = changes["employee_id"]
    start = changes.get("start_time") or shift.start_time
    end = changes.get("end_time") or shift.end_time
    _validate_window(start, end)
    shift.start_time = start
    shift.end_time = end
    if changes.get("notes") is not None:
        shift.notes = changes["notes"]
    db.commit()
    db.refresh(shift)
    return shift


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scheduled_shift(
    restaurant_id: int,
    schedule_id: int,
    shift_id: int,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    shift = _get_shift(db, schedule.id, shift_id)
    db.delete(shift)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
