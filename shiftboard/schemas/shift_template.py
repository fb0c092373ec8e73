from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..services.timerange import InvalidRange, TimeRange
from .common import ClockTime


def _check_window(start, end) -> None:
    try:
        TimeRange.from_clock("1970-01-01", start, end)
    except InvalidRange as exc:
        raise ValueError("end time must be after start time") from exc


class ShiftTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    day_of_week: int = Field(ge=0, le=6)
    start_time: ClockTime
    end_time: ClockTime
    notes: str = ""
    role_ids: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_window(self):
        _check_window(self.start_time, self.end_time)
        return self


class ShiftTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    notes: str | None = None
    role_ids: list[int] | None = None


class ShiftTemplateRead(BaseModel):
    id: int
    restaurant_id: int
    name: str
    day_of_week: int
    start_time: ClockTime
    end_time: ClockTime
    notes: str
    role_ids: list[int]
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
