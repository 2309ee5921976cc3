"""
Gym statistics API endpoints.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from gym_catalog.api.deps import get_route_store
from gym_catalog.schemas.statistics import (
    Figures,
    GradeDistribution,
    LevelChart,
    NoteDistribution,
    OpeningFrequency,
    StatisticsBundle,
)
from gym_catalog.services.gym_statistics import GymStatistics
from gym_catalog.services.route_store import RouteStore

router = APIRouter()


def gym_statistics(
    gym_id: int,
    observed_on: Optional[date] = Query(None, alias="date", description="Observation date (default: today)"),
    space_ids: Optional[List[int]] = Query(None, description="Restrict to these gym spaces"),
    opener_ids: Optional[List[int]] = Query(None, description="Restrict to routes of these openers"),
    store: RouteStore = Depends(get_route_store),
) -> GymStatistics:
    return GymStatistics(store, gym_id, observed_on=observed_on, space_ids=space_ids, opener_ids=opener_ids)


@router.get("/gyms/{gym_id}/statistics", response_model=StatisticsBundle)
async def get_statistics(statistics: GymStatistics = Depends(gym_statistics)):
    """
    All statistics of a gym on a date.

    - **date**: observation date, routes on the wall that day are counted
    - **space_ids**: optional gym space filter (repeat the parameter)
    - **opener_ids**: optional opener filter (repeat the parameter)
    """
    return await statistics.bundle()


@router.get("/gyms/{gym_id}/statistics/figures", response_model=Figures)
async def get_figures(statistics: GymStatistics = Depends(gym_statistics)):
    return await statistics.figures()


@router.get("/gyms/{gym_id}/statistics/grades", response_model=GradeDistribution)
async def get_grade_distribution(statistics: GymStatistics = Depends(gym_statistics)):
    return await statistics.grade_distribution()


@router.get("/gyms/{gym_id}/statistics/levels", response_model=List[LevelChart])
async def get_level_distribution(statistics: GymStatistics = Depends(gym_statistics)):
    return list(await statistics.level_distribution())


@router.get("/gyms/{gym_id}/statistics/notes", response_model=NoteDistribution)
async def get_note_distribution(statistics: GymStatistics = Depends(gym_statistics)):
    return await statistics.note_distribution()


@router.get("/gyms/{gym_id}/statistics/opening_frequencies", response_model=OpeningFrequency)
async def get_opening_frequency(statistics: GymStatistics = Depends(gym_statistics)):
    return await statistics.opening_frequency()
