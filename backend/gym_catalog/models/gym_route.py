"""
Gym route model with its openers association.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Float, ForeignKey, JSON, Table
from sqlalchemy.orm import relationship

from gym_catalog.db.session import Base

gym_route_openers = Table(
    "gym_route_openers",
    Base.metadata,
    Column("gym_route_id", Integer, ForeignKey("gym_routes.id", ondelete="CASCADE"), primary_key=True),
    Column("gym_opener_id", Integer, ForeignKey("gym_openers.id", ondelete="CASCADE"), primary_key=True),
)


class GymOpener(Base):
    """A route setter credited with opening routes."""

    __tablename__ = "gym_openers"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<GymOpener(id={self.id}, name='{self.name}')>"


class GymRoute(Base):
    """
    A route set on a gym wall.

    dismounted_at is NULL while the route is mounted.
    """

    __tablename__ = "gym_routes"

    id = Column(Integer, primary_key=True, index=True)
    gym_sector_id = Column(Integer, ForeignKey("gym_sectors.id"), nullable=False, index=True)
    gym_grade_line_id = Column(Integer, ForeignKey("gym_grade_lines.id"), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    opened_at = Column(Date, nullable=False, index=True)
    dismounted_at = Column(Date, nullable=True, index=True)
    min_grade_value = Column(Integer, nullable=True)
    max_grade_value = Column(Integer, nullable=True)
    points = Column(Integer, nullable=True)
    calculated_point = Column(Float, nullable=True)
    hold_colors = Column(JSON, nullable=True)
    tag_colors = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    gym_sector = relationship("GymSector", back_populates="gym_routes")
    gym_grade_line = relationship("GymGradeLine")
    gym_openers = relationship("GymOpener", secondary=gym_route_openers)
    ascent_gym_routes = relationship(
        "AscentGymRoute",
        back_populates="gym_route",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<GymRoute(id={self.id}, name='{self.name}', opened_at={self.opened_at})>"
