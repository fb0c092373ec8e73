"""Expand weekly shift templates into dated shift instances for a schedule.

Everything here is pure: the caller supplies a snapshot of the instances that already
exist and is responsible for handing the result to a batch writer. Uniqueness across
concurrent calls is enforced by the ``uq_scheduled_shift_materialization`` constraint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from .timerange import day_of_week, iter_dates

logger = logging.getLogger(__name__)

MaterializationKey = Tuple[date, int, int]


class ScheduleLike(Protocol):
    id: int
    restaurant_id: int
    start_date: date
    end_date: date


class TemplateLike(Protocol):
    id: int
    day_of_week: int
    start_time: time
    end_time: time
    role_ids: Sequence[int]


class InstanceLike(Protocol):
    shift_date: date
    shift_template_id: Optional[int]
    role_id: int


@dataclass(frozen=True)
class ShiftInstance:
    schedule_id: int
    restaurant_id: int
    shift_template_id: Optional[int]
    role_id: int
    shift_date: date
    start_time: time
    end_time: time
    employee_id: Optional[int] = None
    notes: str = ""

    @property
    def key(self) -> Optional[MaterializationKey]:
        return materialization_key(self)


@dataclass
class MaterializationResult:
    created: List[ShiftInstance] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)


def materialization_key(instance: InstanceLike) -> Optional[MaterializationKey]:
    if instance.shift_template_id is None:
        return None
    return (instance.shift_date, instance.shift_template_id, instance.role_id)


class ExistingInstanceIndex:
    """Keys of template-derived instances already persisted for a schedule."""

    def __init__(self, keys: Iterable[MaterializationKey] = ()) -> None:
        self._keys: Set[MaterializationKey] = set(keys)

    @classmethod
    def from_instances(cls, instances: Iterable[InstanceLike]) -> "ExistingInstanceIndex":
        # Ad-hoc shifts have no template id and never block materialization.
        return cls(key for key in map(materialization_key, instances) if key is not None)

    def __contains__(self, key: MaterializationKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def add(self, key: MaterializationKey) -> None:
        self._keys.add(key)


def materialize(
    schedule: ScheduleLike,
    templates: Sequence[TemplateLike],
    existing: Iterable[InstanceLike],
) -> MaterializationResult:
    index = ExistingInstanceIndex.from_instances(existing)
    result = MaterializationResult()

    by_weekday: dict[int, list[TemplateLike]] = {}
    for template in templates:
        if not template.role_ids:
            logger.debug("Skipping shift template %s: no roles", template.id)
            continue
        by_weekday.setdefault(template.day_of_week, []).append(template)

    for shift_date in iter_dates(schedule.start_date, schedule.end_date):
        for template in by_weekday.get(day_of_week(shift_date), ()):
            for role_id in template.role_ids:
                key = (shift_date, template.id, role_id)
                if key in index:
                    continue
                index.add(key)
                result.created.append(
                    ShiftInstance(
                        schedule_id=schedule.id,
                        restaurant_id=schedule.restaurant_id,
                        shift_template_id=template.id,
                        role_id=role_id,
                        shift_date=shift_date,
                        start_time=template.start_time,
                        end_time=template.end_time,
                    )
                )

    logger.info(
        "Materialized %d shift(s) for schedule %s (%s..%s)",
        result.created_count,
        schedule.id,
        schedule.start_date,
        schedule.end_date,
    )
    return result
