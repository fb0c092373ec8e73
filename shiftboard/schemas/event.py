from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from .common import ClockTime


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    event_date: date
    start_time: ClockTime
    end_time: ClockTime


class EventRead(BaseModel):
    id: int
    restaurant_id: int
    title: str
    description: str
    event_date: date
    start_time: ClockTime
    end_time: ClockTime

    model_config = ConfigDict(from_attributes=True)
