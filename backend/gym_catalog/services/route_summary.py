"""
Cached public summary of a gym route.

Summaries are cached per (route id, route version). The lifecycle manager
and the route editor invalidate them explicitly whenever they write.
"""
import logging
from typing import Dict, Optional

from gym_catalog.schemas.catalog import RouteSnapshot
from gym_catalog.schemas.route import RouteSummary
from gym_catalog.services.route_store import RouteStore
from gym_catalog.utils.cache import get_cached_route_summary, set_cached_route_summary

logger = logging.getLogger(__name__)


def build_route_summary(route: RouteSnapshot) -> RouteSummary:
    return RouteSummary(
        id=route.id,
        name=route.name,
        opened_at=route.opened_at,
        dismounted_at=route.dismounted_at,
        mounted=route.mounted,
        grade=route.grade.name if route.grade else None,
        grade_line=route.grade_line.name if route.grade_line else None,
        min_grade_value=route.min_grade_value,
        max_grade_value=route.max_grade_value,
        points=route.points,
        calculated_point=route.calculated_point,
        hold_colors=list(route.hold_colors),
        tag_colors=list(route.tag_colors),
        gym_sector_id=route.sector.id,
        gym_sector_name=route.sector.name,
    )


async def get_route_summary(store: RouteStore, route_id: int, gym_id: Optional[int] = None) -> Dict:
    """
    Summary of a route, served from cache when its current version is cached.

    Raises:
        RouteNotFoundError: Unknown route, or a route of another gym
    """
    route = await store.get_route(route_id, gym_id)
    return cached_route_summary(route)


def cached_route_summary(route: RouteSnapshot) -> Dict:
    """Summary of a route snapshot, read through the cache."""
    cached = get_cached_route_summary(route.id, route.version)
    if cached is not None:
        return cached

    summary = build_route_summary(route).model_dump(mode="json")
    set_cached_route_summary(route.id, route.version, summary)
    return summary
