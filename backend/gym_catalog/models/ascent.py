"""
Ascent model for logged climbs of gym routes.
"""
from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship

from gym_catalog.db.session import Base

# Logged attempt, as opposed to a completed ("made") ascent
PROJECT_STATUS = "project"


class AscentGymRoute(Base):
    """An attempt (project) or completed ascent of a gym route."""

    __tablename__ = "ascent_gym_routes"

    id = Column(Integer, primary_key=True, index=True)
    gym_route_id = Column(
        Integer, ForeignKey("gym_routes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, nullable=True, index=True)
    ascent_status = Column(String(50), nullable=False, default="sent")
    note = Column(Integer, nullable=True)
    released_at = Column(Date, nullable=True)

    gym_route = relationship("GymRoute", back_populates="ascent_gym_routes")

    def __repr__(self):
        return f"<AscentGymRoute(id={self.id}, gym_route_id={self.gym_route_id}, status='{self.ascent_status}')>"
