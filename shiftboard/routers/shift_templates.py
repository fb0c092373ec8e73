from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import ScheduledShift, ShiftTemplate
from ..schemas.shift_template import ShiftTemplateCreate, ShiftTemplateRead, ShiftTemplateUpdate
from ..services.timerange import InvalidRange, TimeRange
from .common import ensure_roles_belong, get_restaurant_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants/{restaurant_id}/shift-templates", tags=["shift-templates"])


def _get_template(db: Session, restaurant_id: int, template_id: int) -> ShiftTemplate:
    template = (
        db.query(ShiftTemplate)
        .filter(ShiftTemplate.id == template_id, ShiftTemplate.restaurant_id == restaurant_id)
        .one_or_none()
    )
    if not template:
        raise HTTPException(status_code=404, detail="Shift template not found")
    return template


@router.get("", response_model=list[ShiftTemplateRead])
async def list_shift_templates(restaurant_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    return (
        db.query(ShiftTemplate)
        .filter(ShiftTemplate.restaurant_id == restaurant_id)
        .order_by(ShiftTemplate.day_of_week, ShiftTemplate.start_time, ShiftTemplate.id)
        .all()
    )


@router.post("", response_model=ShiftTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_shift_template(restaurant_id: int, payload: ShiftTemplateCreate, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    ensure_roles_belong(db, restaurant_id, payload.role_ids)
    if not payload.role_ids:
        logger.info("Shift template %r saved without roles; it will not generate shifts", payload.name)
    template = ShiftTemplate(
        restaurant_id=restaurant_id,
        name=payload.name.strip(),
        day_of_week=payload.day_of_week,
        start_time=payload.start_time,
        end_time=payload.end_time,
        notes=payload.notes,
        role_ids=list(dict.fromkeys(payload.role_ids)),
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@router.patch("/{template_id}", response_model=ShiftTemplateRead)
async def update_shift_template(
    restaurant_id: int,
    template_id: int,
    payload: ShiftTemplateUpdate,
    db: Session = Depends(get_db),
):
    get_restaurant_or_404(db, restaurant_id)
    template = _get_template(db, restaurant_id, template_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("role_ids") is not None:
        ensure_roles_belong(db, restaurant_id, changes["role_ids"])
        changes["role_ids"] = list(dict.fromkeys(changes["role_ids"]))
    start = changes.get("start_time") or template.start_time
    end = changes.get("end_time") or template.end_time
    try:
        TimeRange.from_clock("1970-01-01", start, end)
    except InvalidRange:
        raise HTTPException(status_code=400, detail="End time must be after start time")
    for name, value in changes.items():
        if value is None:
            continue
        setattr(template, name, value.strip() if name == "name" else value)
    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shift_template(restaurant_id: int, template_id: int, db: Session = Depends(get_db)):
    get_restaurant_or_404(db, restaurant_id)
    template = _get_template(db, restaurant_id, template_id)
    # Generated shifts outlive their template and become ad-hoc.
    db.query(ScheduledShift).filter(ScheduledShift.shift_template_id == template.id).update(
        {ScheduledShift.shift_template_id: None}, synchronize_session=False
    )
    db.delete(template)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
