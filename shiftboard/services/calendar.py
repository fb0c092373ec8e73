from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

from .geometry import Geometry, GeometryMapper, mapper_from_settings
from .layout import LayoutItem, layout_day, max_concurrency
from .timerange import TimeRange, day_of_week, format_date, week_start


@dataclass(frozen=True)
class Placement:
    source_id: int
    payload: Any
    time_range: TimeRange
    column_index: int
    column_count: int
    geometry: Geometry


@dataclass
class DayLayout:
    day: date
    templates: List[Placement] = field(default_factory=list)
    events: List[Placement] = field(default_factory=list)

    @property
    def day_key(self) -> str:
        return format_date(self.day)

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.day)


def place_items(items: List[LayoutItem], mapper: GeometryMapper) -> List[Placement]:
    placements: List[Placement] = []
    for assignment in layout_day(items):
        item = assignment.item
        placements.append(
            Placement(
                source_id=item.source_id,
                payload=item.payload,
                time_range=item.time_range,
                column_index=assignment.column_index,
                column_count=assignment.column_count,
                geometry=mapper.for_assignment(assignment),
            )
        )
    return placements


def templates_for_day(templates: Iterable[Any], day: date) -> List[LayoutItem]:
    weekday = day_of_week(day)
    return [
        LayoutItem(TimeRange.from_clock(day, t.start_time, t.end_time), t.id, t)
        for t in templates
        if t.day_of_week == weekday
    ]


def events_for_day(events: Iterable[Any], day: date) -> List[LayoutItem]:
    return [
        LayoutItem(TimeRange.from_clock(day, e.start_time, e.end_time), e.id, e)
        for e in events
        if e.event_date == day
    ]


def build_week(
    reference: date,
    templates: Iterable[Any],
    events: Iterable[Any],
    mapper: Optional[GeometryMapper] = None,
) -> List[DayLayout]:
    """Lay out a Sunday-first week containing ``reference``."""
    mapper = mapper or mapper_from_settings()
    templates = list(templates)
    events = list(events)
    first = week_start(reference)
    days: List[DayLayout] = []
    for offset in range(7):
        current = first + timedelta(days=offset)
        days.append(
            DayLayout(
                day=current,
                templates=place_items(templates_for_day(templates, current), mapper),
                events=place_items(events_for_day(events, current), mapper),
            )
        )
    return days


def peak_overlap(placements: List[Placement]) -> int:
    return max_concurrency(
        [LayoutItem(p.time_range, p.source_id) for p in placements]
    )
