from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from . import Base


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="ck_schedules_date_range"),)

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    published_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    shifts = relationship("ScheduledShift", back_populates="schedule", cascade="all, delete-orphan")


class ScheduledShift(Base):
    __tablename__ = "scheduled_shifts"
    __table_args__ = (
        UniqueConstraint(
            "shift_date",
            "shift_template_id",
            "role_id",
            name="uq_scheduled_shift_materialization",
        ),
    )

    id = Column(Integer, primary_key=True)
    schedule_id = Column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    shift_template_id = Column(Integer, ForeignKey("shift_templates.id", ondelete="SET NULL"), nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    shift_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    schedule = relationship("Schedule", back_populates="shifts")
    role = relationship("Role")
    employee = relationship("Employee")
