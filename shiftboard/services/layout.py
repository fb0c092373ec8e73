"""Side-by-side column layout for items that share a day on the week grid.

Items are first split into clusters of transitively overlapping ranges, then each
cluster is packed into the fewest columns that keep same-column items apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, List, Sequence, Tuple

from .timerange import TimeRange


@dataclass(frozen=True)
class LayoutItem:
    time_range: TimeRange
    source_id: Hashable
    payload: Any = None

    @property
    def start_minute(self) -> int:
        return self.time_range.start_minute

    @property
    def end_minute(self) -> int:
        return self.time_range.end_minute


Cluster = Tuple[LayoutItem, ...]


@dataclass(frozen=True)
class ColumnAssignment:
    item: LayoutItem
    column_index: int
    column_count: int


def ranges_overlap(a: TimeRange, b: TimeRange) -> bool:
    # Touching endpoints (10:00-11:00 after 9:00-10:00) are not an overlap.
    return a.start_minute < b.end_minute and b.start_minute < a.end_minute


def build_clusters(items: Sequence[LayoutItem]) -> List[Cluster]:
    if not items:
        return []
    day_keys = {item.time_range.day_key for item in items}
    if len(day_keys) > 1:
        raise ValueError(f"layout items span several days: {sorted(day_keys)}")

    ordered = sorted(items, key=lambda item: (item.start_minute, item.source_id))
    clusters: List[Cluster] = []
    current: List[LayoutItem] = [ordered[0]]
    max_end = ordered[0].end_minute
    for item in ordered[1:]:
        if item.start_minute >= max_end:
            clusters.append(tuple(current))
            current = [item]
            max_end = item.end_minute
            continue
        current.append(item)
        max_end = max(max_end, item.end_minute)
    clusters.append(tuple(current))
    return clusters


def assign_columns(cluster: Sequence[LayoutItem]) -> List[ColumnAssignment]:
    ordered = sorted(
        cluster,
        key=lambda item: (item.start_minute, item.time_range.duration, item.source_id),
    )
    column_ends: List[int] = []
    placed: List[Tuple[LayoutItem, int]] = []
    for item in ordered:
        for index, end in enumerate(column_ends):
            if end <= item.start_minute:
                column_ends[index] = item.end_minute
                break
        else:
            index = len(column_ends)
            column_ends.append(item.end_minute)
        placed.append((item, index))

    column_count = len(column_ends)
    return [ColumnAssignment(item, index, column_count) for item, index in placed]


def layout_day(items: Sequence[LayoutItem]) -> List[ColumnAssignment]:
    assignments: List[ColumnAssignment] = []
    for cluster in build_clusters(items):
        assignments.extend(assign_columns(cluster))
    return assignments


def max_concurrency(items: Sequence[LayoutItem]) -> int:
    """Largest number of items active at one instant; ends are processed before starts."""
    points: List[Tuple[int, int]] = []
    for item in items:
        points.append((item.start_minute, 1))
        points.append((item.end_minute, -1))
    points.sort()
    active = peak = 0
    for _, delta in points:
        active += delta
        peak = max(peak, active)
    return peak
