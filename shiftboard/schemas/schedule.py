from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..services.timerange import parse_date
from .common import ClockTime


def _coerce_date(value):
    if isinstance(value, str):
        return parse_date(value)
    return value


class ScheduleCreate(BaseModel):
    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_flexible_dates(cls, value):
        return _coerce_date(value)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end date must be after or equal to start date")
        return self


class ScheduleUpdate(BaseModel):
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_flexible_dates(cls, value):
        return _coerce_date(value)


class ScheduleRead(BaseModel):
    id: int
    restaurant_id: int
    start_date: date
    end_date: date
    published_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ScheduledShiftCreate(BaseModel):
    role_id: int
    shift_date: date
    start_time: ClockTime
    end_time: ClockTime
    employee_id: int | None = None
    shift_template_id: int | None = None
    notes: str = ""


class ScheduledShiftUpdate(BaseModel):
    employee_id: int | None = None
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    notes: str | None = None


class ScheduledShiftRead(BaseModel):
    id: int
    schedule_id: int
    restaurant_id: int
    shift_template_id: int | None = None
    role_id: int
    employee_id: int | None = None
    shift_date: date
    start_time: ClockTime
    end_time: ClockTime
    notes: str

    model_config = ConfigDict(from_attributes=True)


class GenerateShiftsResponse(BaseModel):
    created_count: int
    created_ids: list[int]


class SendScheduleEmailRequest(BaseModel):
    include_events: bool = False


class SendScheduleEmailFailure(BaseModel):
    employee_id: int
    employee_name: str
    email: str
    error: str

    model_config = ConfigDict(from_attributes=True)


class SendScheduleEmailResponse(BaseModel):
    total_recipients: int
    successful: int
    failed: int
    failures: list[SendScheduleEmailFailure] = []

    model_config = ConfigDict(from_attributes=True)
