"""Seed a demo restaurant with roles, staff, weekly templates and one materialized week."""

from datetime import date, time, timedelta

from shiftboard.db import SessionLocal
from shiftboard.models import Employee, Restaurant, Role, Schedule, ShiftTemplate
from shiftboard.services.scheduled_shifts import (
    SqlScheduledShiftStore,
    SqlTemplateSource,
    generate_shifts_for_schedule,
)
from shiftboard.services.timerange import week_start

RESTAURANT_NAME = "Demo Bistro"
ROLES = [("Server", "#2563eb"), ("Cook", "#dc2626"), ("Host", "#16a34a")]
STAFF = [
    ("Alex Rivera", "alex@example.com"),
    ("Sam Chen", "sam@example.com"),
    ("Jordan Patel", None),
]
# (day_of_week, name, start, end, role names)
TEMPLATES = [
    (1, "Lunch", time(10, 30), time(15, 0), ["Server", "Cook"]),
    (1, "Dinner", time(16, 0), time(22, 0), ["Server", "Cook", "Host"]),
    (5, "Brunch prep", time(8, 0), time(11, 0), ["Cook"]),
    (5, "Dinner", time(16, 0), time(23, 0), ["Server", "Server", "Cook", "Host"]),
]


def ensure_restaurant(session) -> Restaurant:
    restaurant = session.query(Restaurant).filter(Restaurant.name == RESTAURANT_NAME).one_or_none()
    if restaurant is None:
        restaurant = Restaurant(name=RESTAURANT_NAME, timezone="America/New_York")
        session.add(restaurant)
        session.flush()
    return restaurant


def ensure_roles(session, restaurant: Restaurant) -> dict[str, Role]:
    roles: dict[str, Role] = {}
    for name, color in ROLES:
        role = (
            session.query(Role)
            .filter(Role.restaurant_id == restaurant.id, Role.name == name)
            .one_or_none()
        )
        if role is None:
            role = Role(restaurant_id=restaurant.id, name=name, color=color)
            session.add(role)
            session.flush()
        roles[name] = role
    return roles


def ensure_staff(session, restaurant: Restaurant) -> None:
    for full_name, email in STAFF:
        exists = (
            session.query(Employee)
            .filter(Employee.restaurant_id == restaurant.id, Employee.full_name == full_name)
            .one_or_none()
        )
        if exists is None:
            session.add(Employee(restaurant_id=restaurant.id, full_name=full_name, email=email))


def ensure_templates(session, restaurant: Restaurant, roles: dict[str, Role]) -> None:
    for day_of_week, name, start, end, role_names in TEMPLATES:
        template = (
            session.query(ShiftTemplate)
            .filter(
                ShiftTemplate.restaurant_id == restaurant.id,
                ShiftTemplate.day_of_week == day_of_week,
                ShiftTemplate.name == name,
            )
            .one_or_none()
        )
        if template is None:
            session.add(
                ShiftTemplate(
                    restaurant_id=restaurant.id,
                    name=name,
                    day_of_week=day_of_week,
                    start_time=start,
                    end_time=end,
                    role_ids=[roles[role].id for role in role_names],
                )
            )


def ensure_schedule(session, restaurant: Restaurant) -> Schedule:
    start = week_start(date.today())
    schedule = (
        session.query(Schedule)
        .filter(Schedule.restaurant_id == restaurant.id, Schedule.start_date == start)
        .one_or_none()
    )
    if schedule is None:
        schedule = Schedule(restaurant_id=restaurant.id, start_date=start, end_date=start + timedelta(days=6))
        session.add(schedule)
        session.flush()
    return schedule


def main() -> None:
    session = SessionLocal()
    try:
        restaurant = ensure_restaurant(session)
        roles = ensure_roles(session, restaurant)
        ensure_staff(session, restaurant)
        ensure_templates(session, restaurant, roles)
        schedule = ensure_schedule(session, restaurant)
        session.commit()

        store = SqlScheduledShiftStore(session)
        _, created_ids = generate_shifts_for_schedule(schedule, SqlTemplateSource(session), store, store)
        print("Demo data ready:")
        print(f"  Restaurant #{restaurant.id}: {restaurant.name}")
        print(f"  Schedule #{schedule.id}: {schedule.start_date} - {schedule.end_date}")
        print(f"  Shifts created this run: {len(created_ids)}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
