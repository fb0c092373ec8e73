from datetime import date

from pydantic import BaseModel


class GeometryRead(BaseModel):
    top: float
    height: float
    left: float
    width: float


class PlacementRead(BaseModel):
    source_id: int
    title: str
    start_time: str
    end_time: str
    column_index: int
    column_count: int
    geometry: GeometryRead
    role_ids: list[int] = []


class DayLayoutRead(BaseModel):
    date: date
    day_of_week: int
    day_label: str
    template_peak_overlap: int
    event_peak_overlap: int
    templates: list[PlacementRead]
    events: list[PlacementRead]


class WeekLayoutRead(BaseModel):
    week_start: date
    week_end: date
    pixels_per_hour: int
    days: list[DayLayoutRead]
