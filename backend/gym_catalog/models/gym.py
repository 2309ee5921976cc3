"""
Gym, space and sector models.
"""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from gym_catalog.db.session import Base


class Gym(Base):
    """A climbing gym owning spaces, grades and openers."""

    __tablename__ = "gyms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    gym_spaces = relationship("GymSpace", back_populates="gym", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Gym(id={self.id}, name='{self.name}')>"


class GymSpace(Base):
    """A room or area of a gym, grouping sectors."""

    __tablename__ = "gym_spaces"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    order = Column(Integer, nullable=True)

    gym = relationship("Gym", back_populates="gym_spaces")
    gym_sectors = relationship("GymSector", back_populates="gym_space", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<GymSpace(id={self.id}, name='{self.name}')>"


class GymSector(Base):
    """A wall section holding routes, optionally bound to a single grade scheme."""

    __tablename__ = "gym_sectors"

    id = Column(Integer, primary_key=True, index=True)
    gym_space_id = Column(Integer, ForeignKey("gym_spaces.id"), nullable=False, index=True)
    gym_grade_id = Column(Integer, ForeignKey("gym_grades.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    order = Column(Integer, nullable=True)

    gym_space = relationship("GymSpace", back_populates="gym_sectors")
    gym_grade = relationship("GymGrade")
    gym_routes = relationship("GymRoute", back_populates="gym_sector", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<GymSector(id={self.id}, name='{self.name}', order={self.order})>"
