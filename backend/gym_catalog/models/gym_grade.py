"""
Grade schemes and their level lines.
"""
from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship

from gym_catalog.db.session import Base

DIFFICULTY_BY_GRADE = "grade"
DIFFICULTY_BY_LEVEL = "level"


class GymGrade(Base):
    """
    A difficulty scale used by a gym.

    difficulty_system is either "grade" (numeric scale stored on the route's
    min/max grade values) or "level" (ordered, coloured GymGradeLine tiers).
    """

    __tablename__ = "gym_grades"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    difficulty_system = Column(String(20), nullable=False, default=DIFFICULTY_BY_GRADE)
    tag_color = Column(Boolean, nullable=False, default=False)
    hold_color = Column(Boolean, nullable=False, default=False)

    gym_grade_lines = relationship(
        "GymGradeLine",
        back_populates="gym_grade",
        order_by="GymGradeLine.order",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<GymGrade(id={self.id}, name='{self.name}', system='{self.difficulty_system}')>"


class GymGradeLine(Base):
    """One named, coloured tier of a level-based grade."""

    __tablename__ = "gym_grade_lines"

    id = Column(Integer, primary_key=True, index=True)
    gym_grade_id = Column(Integer, ForeignKey("gym_grades.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False)
    colors = Column(JSON, nullable=True)
    grade_value = Column(Integer, nullable=True)

    gym_grade = relationship("GymGrade", back_populates="gym_grade_lines")

    def __repr__(self):
        return f"<GymGradeLine(id={self.id}, name='{self.name}', order={self.order})>"
