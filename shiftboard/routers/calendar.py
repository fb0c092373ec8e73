from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..constants import DAY_LABELS
from ..db import get_db
from ..models import Event, ShiftTemplate
from ..schemas.calendar import DayLayoutRead, GeometryRead, PlacementRead, WeekLayoutRead
from ..services.calendar import Placement, build_week, peak_overlap
from ..services.geometry import mapper_from_settings
from ..services.timerange import format_clock, week_start
from .common import get_restaurant_or_404

router = APIRouter(prefix="/api/restaurants/{restaurant_id}/calendar", tags=["calendar"])


def _serialize_placement(placement: Placement, title: str, role_ids: list[int] | None = None) -> PlacementRead:
    geometry = placement.geometry
    return PlacementRead(
        source_id=placement.source_id,
        title=title,
        start_time=format_clock(placement.time_range.start_minute),
        end_time=format_clock(placement.time_range.end_minute),
        column_index=placement.column_index,
        column_count=placement.column_count,
        geometry=GeometryRead(top=geometry.top, height=geometry.height, left=geometry.left, width=geometry.width),
        role_ids=list(role_ids or []),
    )


@router.get("/week", response_model=WeekLayoutRead)
async def week_layout(
    restaurant_id: int,
    start: date | None = Query(default=None),
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    first = week_start(start or date.today())
    last = first + timedelta(days=6)
    templates = (
        db.query(ShiftTemplate)
        .filter(ShiftTemplate.restaurant_id == restaurant_id)
        .order_by(ShiftTemplate.id)
        .all()
    )
    events = (
        db.query(Event)
        .filter(
            Event.restaurant_id == restaurant_id,
            Event.event_date >= first,
            Event.event_date <= last,
        )
        .order_by(Event.id)
        .all()
    )
    mapper = mapper_from_settings()
    days = []
    for day in build_week(first, templates, events, mapper):
        days.append(
            DayLayoutRead(
                date=day.day,
                day_of_week=day.day_of_week,
                day_label=DAY_LABELS[day.day_of_week],
                template_peak_overlap=peak_overlap(day.templates),
                event_peak_overlap=peak_overlap(day.events),
                templates=[_serialize_placement(p, p.payload.name, p.payload.role_ids) for p in day.templates],
                events=[_serialize_placement(p, p.payload.title) for p in day.events],
            )
        )
    return WeekLayoutRead(week_start=first, week_end=last, pixels_per_hour=mapper.pixels_per_hour, days=days)
