from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..models import Restaurant, Role, Schedule


def get_restaurant_or_404(db: Session, restaurant_id: int) -> Restaurant:
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).one_or_none()
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


def get_schedule_or_404(db: Session, restaurant_id: int, schedule_id: int) -> Schedule:
    schedule = (
        db.query(Schedule)
        .filter(Schedule.id == schedule_id, Schedule.restaurant_id == restaurant_id)
        .one_or_none()
    )
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


def ensure_roles_belong(db: Session, restaurant_id: int, role_ids: list[int]) -> None:
    wanted = set(role_ids)
    if not wanted:
        return
    found = {
        role_id
        for (role_id,) in db.query(Role.id).filter(Role.restaurant_id == restaurant_id, Role.id.in_(wanted))
    }
    missing = sorted(wanted - found)
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown role ids: {missing}")
