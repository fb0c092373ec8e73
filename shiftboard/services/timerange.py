from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator

from ..constants import CLOCK_FORMAT, DATE_FORMAT, MINUTES_PER_DAY


class InvalidRange(ValueError):
    """Raised when a time range has no positive duration inside a single day."""


@dataclass(frozen=True)
class TimeRange:
    day_key: str
    start_minute: int
    end_minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.start_minute < MINUTES_PER_DAY:
            raise InvalidRange(f"start_minute {self.start_minute} outside 0..{MINUTES_PER_DAY - 1}")
        if self.end_minute > MINUTES_PER_DAY:
            raise InvalidRange(f"end_minute {self.end_minute} past end of day")
        if self.end_minute <= self.start_minute:
            raise InvalidRange(
                f"end_minute {self.end_minute} must be after start_minute {self.start_minute}"
            )

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    @classmethod
    def from_clock(cls, day: date | str, start: time | str, end: time | str) -> "TimeRange":
        """Build a range from wall-clock values; an end of 00:00 means midnight."""
        day_key = day if isinstance(day, str) else format_date(day)
        start_minute = minutes_of_day(start)
        end_minute = minutes_of_day(end)
        if end_minute == 0 and start_minute > 0:
            end_minute = MINUTES_PER_DAY
        return cls(day_key, start_minute, end_minute)


def minutes_of_day(value: time | str) -> int:
    if isinstance(value, str):
        value = parse_clock(value)
    return value.hour * 60 + value.minute


def parse_clock(value: str) -> time:
    candidate = value.strip()
    for fmt in (CLOCK_FORMAT, f"{CLOCK_FORMAT}:%S"):
        try:
            return datetime.strptime(candidate, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time {value!r}, use 24-hour format (HH:MM)")


def format_clock(value: time | int) -> str:
    if isinstance(value, int):
        hours, minutes = divmod(value, 60)
        return f"{hours:02d}:{minutes:02d}"
    return value.strftime(CLOCK_FORMAT)


def parse_date(value: str) -> date:
    """Accept YYYY-MM-DD or a full ISO-8601 timestamp (the time part is dropped)."""
    candidate = value.strip()
    try:
        return datetime.strptime(candidate, DATE_FORMAT).date()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError(f"invalid date {value!r}, use YYYY-MM-DD") from exc


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def day_of_week(value: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return value.isoweekday() % 7


def week_start(value: date) -> date:
    return value - timedelta(days=day_of_week(value))


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
