from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Employee, Schedule
from ..schemas.schedule import (
    GenerateShiftsResponse,
    ScheduleCreate,
    ScheduleRead,
    ScheduleUpdate,
    SendScheduleEmailRequest,
    SendScheduleEmailResponse,
)
from ..services.notifications import send_schedule_emails
from ..services.scheduled_shifts import (
    DuplicateShiftError,
    InvalidShiftError,
    ShiftWriteTimeout,
    SqlScheduledShiftStore,
    SqlTemplateSource,
    generate_shifts_for_schedule,
)
from .common import get_restaurant_or_404, get_schedule_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants/{restaurant_id}/schedules", tags=["schedules"])


@router.get("", response_model=list[ScheduleRead])
async def list_schedules(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return (
        db.query(Schedule)
        .filter(Schedule.restaurant_id == restaurant_id)
        .order_by(Schedule.start_date.desc(), Schedule.id.desc())
        .all()
    )


@router.post("", response_model=ScheduleRead, status_code=status.HTTP_201_CREATED)
async def create_schedule(restaurant_id: int, payload: ScheduleCreate, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    schedule = Schedule(restaurant_id=restaurant_id, start_date=payload.start_date, end_date=payload.end_date)
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.get("/{schedule_id}", response_model=ScheduleRead)
async def get_schedule(restaurant_id: int, schedule_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return get_schedule_or_404(db, restaurant_id, schedule_id)


@router.patch("/{schedule_id}", response_model=ScheduleRead)
async def update_schedule(
    restaurant_id: int,
    schedule_id: int,
    payload: ScheduleUpdate,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    start_date = payload.start_date or schedule.start_date
    end_date = payload.end_date or schedule.end_date
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="End date must be after or equal to start date")
    schedule.start_date = start_date
    schedule.end_date = end_date
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(restaurant_id: int, schedule_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    db.delete(schedule)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{schedule_id}/publish", status_code=status.HTTP_204_NO_CONTENT)
async def publish_schedule(restaurant_id: int, schedule_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    if schedule.published_at is not None:
        raise HTTPException(status_code=400, detail="Schedule is already published")
    schedule.published_at = datetime.utcnow()
    db.commit()
    logger.info("Published schedule %s for restaurant %s", schedule.id, restaurant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{schedule_id}/shifts/generate", response_model=GenerateShiftsResponse)
async def generate_shifts(restaurant_id: int, schedule_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    store = SqlScheduledShiftStore(db)
    try:
        result, created_ids = generate_shifts_for_schedule(schedule, SqlTemplateSource(db), store, store)
    except DuplicateShiftError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InvalidShiftError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ShiftWriteTimeout as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return GenerateShiftsResponse(created_count=len(created_ids), created_ids=created_ids)


@router.post("/{schedule_id}/send-email", response_model=SendScheduleEmailResponse)
async def send_schedule_email(
    restaurant_id: int,
    schedule_id: int,
    payload: SendScheduleEmailRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    schedule = get_schedule_or_404(db, restaurant_id, schedule_id)
    has_employees = db.query(Employee.id).filter(Employee.restaurant_id == restaurant_id).first()
    if not has_employees:
        raise HTTPException(status_code=400, detail="No employees to send schedule to")
    include_events = payload.include_events if payload else False
    summary = send_schedule_emails(db, restaurant, schedule, include_events=include_events)
    logger.info(
        "Schedule %s emailed: %d sent, %d failed",
        schedule.id,
        summary.successful,
        summary.failed,
    )
    return asdict(summary)
