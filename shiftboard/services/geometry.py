from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from ..config import get_settings
from .layout import ColumnAssignment


@dataclass(frozen=True)
class Geometry:
    top: float
    height: float
    left: float
    width: float

    def as_css(self) -> dict[str, str]:
        return {
            "top": f"{self.top:g}px",
            "height": f"{self.height:g}px",
            "left": f"{self.left:g}%",
            "width": f"{self.width:g}%",
        }


@dataclass(frozen=True)
class GeometryMapper:
    """Maps minutes and column slots onto grid pixels and percentages."""

    pixels_per_hour: int = 60
    min_height_px: int = 0
    gutter_percent: float = 0.0

    def __post_init__(self) -> None:
        if self.pixels_per_hour <= 0:
            raise ValueError("pixels_per_hour must be positive")
        if self.min_height_px < 0:
            raise ValueError("min_height_px cannot be negative")
        if not 0 <= self.gutter_percent < 100:
            raise ValueError("gutter_percent must be within [0, 100)")

    @property
    def pixels_per_minute(self) -> float:
        return self.pixels_per_hour / 60

    def map(self, start_minute: int, end_minute: int, column_index: int, column_count: int) -> Geometry:
        return _compute(
            start_minute,
            end_minute,
            column_index,
            column_count,
            self.pixels_per_hour,
            self.min_height_px,
            self.gutter_percent,
        )

    def for_assignment(self, assignment: ColumnAssignment) -> Geometry:
        return self.map(
            assignment.item.start_minute,
            assignment.item.end_minute,
            assignment.column_index,
            assignment.column_count,
        )


@lru_cache(maxsize=4096)
def _compute(
    start_minute: int,
    end_minute: int,
    column_index: int,
    column_count: int,
    pixels_per_hour: int,
    min_height_px: int,
    gutter_percent: float,
) -> Geometry:
    if column_count < 1 or not 0 <= column_index < column_count:
        raise ValueError(f"column {column_index} outside a {column_count}-column cluster")
    per_minute = pixels_per_hour / 60
    # Gutters sit between columns only and never take more than half the row.
    gutter = 0.0
    if column_count > 1:
        gutter = min(gutter_percent, 50 / (column_count - 1))
    width = (100 - gutter * (column_count - 1)) / column_count
    return Geometry(
        top=start_minute * per_minute,
        height=max((end_minute - start_minute) * per_minute, min_height_px),
        left=column_index * (width + gutter),
        width=width,
    )


def mapper_from_settings() -> GeometryMapper:
    settings = get_settings()
    return GeometryMapper(
        pixels_per_hour=settings.calendar_pixels_per_hour,
        min_height_px=settings.calendar_min_event_height_px,
        gutter_percent=settings.calendar_column_gutter_percent,
    )


def geometry_for(assignment: ColumnAssignment, mapper: Optional[GeometryMapper] = None) -> Geometry:
    return (mapper or mapper_from_settings()).for_assignment(assignment)
