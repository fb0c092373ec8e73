from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Event
from ..schemas.event import EventCreate, EventRead
from ..services.timerange import InvalidRange, TimeRange
from .common import get_restaurant_or_404

router = APIRouter(prefix="/api/restaurants/{restaurant_id}/events", tags=["events"])


@router.get("", response_model=list[EventRead])
async def list_events(
    restaurant_id: int,
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    if start > end:
        start, end = end, start
    return (
        db.query(Event)
        .filter(
            Event.restaurant_id == restaurant_id,
            Event.event_date >= start,
            Event.event_date <= end,
        )
        .order_by(Event.event_date, Event.start_time, Event.id)
        .all()
    )


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(restaurant_id: int, payload: EventCreate, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    try:
        TimeRange.from_clock(payload.event_date, payload.start_time, payload.end_time)
    except InvalidRange:
        raise HTTPException(status_code=400, detail="End time must be after start time")
    event = Event(
        restaurant_id=restaurant_id,
        title=payload.title.strip(),
        description=payload.description,
        event_date=payload.event_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(restaurant_id: int, event_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    event = (
        db.query(Event)
        .filter(Event.id == event_id, Event.restaurant_id == restaurant_id)
        .one_or_none()
    )
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    db.delete(event)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
