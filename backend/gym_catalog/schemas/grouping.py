"""
Result shapes of the grouping engine.
"""
from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from gym_catalog.schemas.catalog import RouteSnapshot, SectorSnapshot


class LevelInfo(BaseModel):
    """Display data of a level bucket."""
    model_config = ConfigDict(frozen=True)

    grade_id: int
    grade_name: str
    name: str
    order: int
    colors: Tuple[str, ...] = ()
    tag_color: bool = False
    hold_color: bool = False


class RouteBucket(BaseModel):
    """
    A named group of routes.

    Exactly one of sector / opened_at / grade_value / level is set,
    depending on the grouping that produced the bucket.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    routes: Tuple[RouteSnapshot, ...] = ()
    sector: Optional[SectorSnapshot] = None
    opened_at: Optional[date] = None
    grade_value: Optional[int] = None
    level: Optional[LevelInfo] = None


class GroupedRoutes(BaseModel):
    """Either a flat ordered sequence (`routes`) or ordered `buckets`."""
    model_config = ConfigDict(frozen=True)

    group_by: str
    direction: str
    routes: Optional[Tuple[RouteSnapshot, ...]] = None
    buckets: Optional[Tuple[RouteBucket, ...]] = None

    @property
    def is_flat(self) -> bool:
        return self.buckets is None
