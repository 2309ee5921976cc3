"""
Immutable snapshots of catalog entities.

The store hands these to the lifecycle, grouping and statistics services;
they never carry a database session and cannot be mutated.
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class DifficultySystem(str, Enum):
    """How a grade scheme classifies difficulty. Never both."""
    GRADE = "grade"
    LEVEL = "level"


class RouteState(str, Enum):
    MOUNTED = "mounted"
    DISMOUNTED = "dismounted"


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class GradeLineSnapshot(Snapshot):
    """A tier of a level-based grade. `order` is its rank within the grade."""
    id: int
    name: str
    order: int
    colors: Tuple[str, ...] = ()


class GradeSnapshot(Snapshot):
    """A grade scheme with its complete, rank-ordered list of lines."""
    id: int
    name: str
    difficulty_system: DifficultySystem = DifficultySystem.GRADE
    tag_color: bool = False
    hold_color: bool = False
    lines: Tuple[GradeLineSnapshot, ...] = ()

    @property
    def difficulty_by_grade(self) -> bool:
        return self.difficulty_system == DifficultySystem.GRADE

    @property
    def difficulty_by_level(self) -> bool:
        return self.difficulty_system == DifficultySystem.LEVEL


class GymSnapshot(Snapshot):
    id: int
    name: str


class SectorSnapshot(Snapshot):
    id: int
    name: str
    order: Optional[int] = None
    gym_space_id: Optional[int] = None


class RouteSnapshot(Snapshot):
    """
    A gym route as read from the store.

    `grade` is the scheme the route is graded with: the grade of its
    grade-line when it has one, otherwise the grade of its sector.
    """
    id: int
    sector: SectorSnapshot
    opened_at: date
    dismounted_at: Optional[date] = None
    name: Optional[str] = None
    min_grade_value: Optional[int] = None
    max_grade_value: Optional[int] = None
    grade: Optional[GradeSnapshot] = None
    grade_line: Optional[GradeLineSnapshot] = None
    points: Optional[int] = None
    calculated_point: Optional[float] = None
    opener_ids: Tuple[int, ...] = ()
    hold_colors: Tuple[str, ...] = ()
    tag_colors: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _dismounted_after_opening(self):
        if self.dismounted_at is not None and self.dismounted_at < self.opened_at:
            raise ValueError("dismounted_at must be on or after opened_at")
        return self

    @property
    def mounted(self) -> bool:
        return self.dismounted_at is None

    @property
    def state(self) -> RouteState:
        return RouteState.MOUNTED if self.mounted else RouteState.DISMOUNTED

    @property
    def version(self) -> str:
        """Cache version of the route: its last update timestamp."""
        stamp = self.updated_at or self.created_at
        return stamp.isoformat() if stamp else "0"


class AscentSnapshot(Snapshot):
    """A logged ascent. Anything but a project counts as made."""
    id: int
    gym_route_id: int
    ascent_status: str = "sent"
    note: Optional[int] = None

    @property
    def made(self) -> bool:
        return self.ascent_status != "project"


class RouteScope(Snapshot):
    """
    Filter handed to RouteStore.fetch_routes.

    Empty id tuples mean "no restriction"; mounted=None returns both
    mounted and dismounted routes.
    """
    gym_id: Optional[int] = None
    space_ids: Tuple[int, ...] = ()
    sector_id: Optional[int] = None
    opener_ids: Tuple[int, ...] = ()
    mounted: Optional[bool] = None
