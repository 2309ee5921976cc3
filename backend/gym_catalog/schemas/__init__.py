"""
Pydantic schemas export.
"""
from gym_catalog.schemas.catalog import (
    AscentSnapshot,
    DifficultySystem,
    GradeLineSnapshot,
    GradeSnapshot,
    RouteScope,
    RouteSnapshot,
    RouteState,
    SectorSnapshot,
)
from gym_catalog.schemas.grouping import GroupedRoutes, LevelInfo, RouteBucket
from gym_catalog.schemas.route import RouteSummary, RouteUpdate
from gym_catalog.schemas.lifecycle import BatchTransitionResult, RouteIdsRequest, TransitionOutcome
from gym_catalog.schemas.statistics import (
    Figures,
    GradeDistribution,
    GradeFigures,
    LevelChart,
    NoteDistribution,
    OpeningFigures,
    OpeningFrequency,
    StatisticsBundle,
)

__all__ = [
    # Snapshots
    "AscentSnapshot",
    "DifficultySystem",
    "GradeLineSnapshot",
    "GradeSnapshot",
    "RouteScope",
    "RouteSnapshot",
    "RouteState",
    "SectorSnapshot",
    # Grouping
    "GroupedRoutes",
    "LevelInfo",
    "RouteBucket",
    # Lifecycle
    "BatchTransitionResult",
    "RouteIdsRequest",
    "TransitionOutcome",
    # Routes
    "RouteSummary",
    "RouteUpdate",
    # Statistics
    "Figures",
    "GradeDistribution",
    "GradeFigures",
    "LevelChart",
    "NoteDistribution",
    "OpeningFigures",
    "OpeningFrequency",
    "StatisticsBundle",
]
