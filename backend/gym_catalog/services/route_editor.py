"""
Editor operations on gym routes (update, hard delete).

Both drop the route's cached summary before returning. With a `gym_id`,
a route of another gym is reported as not found and left untouched.
"""
import logging
from typing import Any, Dict, Optional

from gym_catalog.schemas.catalog import RouteSnapshot
from gym_catalog.services.route_store import RouteStore

logger = logging.getLogger(__name__)


async def update_route(
    store: RouteStore,
    route_id: int,
    changes: Dict[str, Any],
    gym_id: Optional[int] = None,
) -> RouteSnapshot:
    """
    Apply editor changes to a route.

    Raises:
        RouteNotFoundError: Unknown route, or a route of another gym
        RouteValidationError: Field not editable or invalid dates
    """
    if gym_id is not None:
        await store.get_route(route_id, gym_id)
    route = await store.update_route(route_id, changes)
    store.invalidate_route_cache(route_id)
    logger.info(f"Gym route {route_id} updated: {sorted(changes)}")
    return route


async def delete_route(store: RouteStore, route_id: int, gym_id: Optional[int] = None) -> None:
    """Remove a route and its ascents from the catalog."""
    if gym_id is not None:
        await store.get_route(route_id, gym_id)
    await store.delete_route(route_id)
    store.invalidate_route_cache(route_id)
    logger.info(f"Gym route {route_id} deleted")
