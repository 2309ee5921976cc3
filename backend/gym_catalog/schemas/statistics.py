"""
Pydantic schemas for gym statistics.
"""
from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class OpeningFigures(FrozenModel):
    youngest_opening_date: Optional[date] = None
    oldest_opening_date: Optional[date] = None
    oldest_route_age: Optional[int] = None
    youngest_route_age: Optional[int] = None
    average_route_age: Optional[int] = None


class GradeFigures(FrozenModel):
    max_value: Optional[int] = None
    min_value: Optional[int] = None
    average_value: Optional[int] = None


class Figures(FrozenModel):
    """Headline numbers of the active population."""
    route_count: int = 0
    ascent_count: int = 0
    opening: OpeningFigures = OpeningFigures()
    grade: GradeFigures = GradeFigures()


class GradeDistribution(FrozenModel):
    """Histogram over odd grade-value buckets (parallel arrays)."""
    labels: Tuple[int, ...] = ()
    counts: Tuple[int, ...] = ()
    colors: Tuple[str, ...] = ()


class LevelChart(FrozenModel):
    """Route count per line of one level-based grade, in rank order."""
    grade_id: int
    grade_name: str
    labels: Tuple[str, ...] = ()
    counts: Tuple[int, ...] = ()
    colors: Tuple[Optional[str], ...] = ()


class NoteDistribution(FrozenModel):
    """Made-ascent count per satisfaction note (0-6)."""
    labels: Tuple[int, ...] = ()
    counts: Tuple[int, ...] = ()

    def as_dict(self) -> dict:
        return dict(zip(self.labels, self.counts))


class OpeningFrequency(FrozenModel):
    """Daily count of opened routes, gaps filled with zero."""
    labels: Tuple[str, ...] = ()
    counts: Tuple[int, ...] = ()


class StatisticsBundle(FrozenModel):
    gym_id: int
    observation_date: date
    figures: Figures
    grade_distribution: GradeDistribution
    level_distribution: Tuple[LevelChart, ...] = ()
    note_distribution: NoteDistribution
    opening_frequency: OpeningFrequency
