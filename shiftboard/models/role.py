from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from . import Base


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("restaurant_id", "name", name="uq_role_restaurant_name"),)

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    color = Column(String(16), nullable=False, default="#64748b")
    created_at = Column(DateTime, server_default=func.now())
