"""
Shared FastAPI dependencies.
"""
from functools import lru_cache

from fastapi import Depends

from gym_catalog.services.route_lifecycle import RouteLifecycle
from gym_catalog.services.route_store import RouteStore, SqlRouteStore


@lru_cache
def get_route_store() -> RouteStore:
    """
    Route store backed by the application database.
    Usage:
        @router.get("/items")
        async def read_items(store: RouteStore = Depends(get_route_store)):
            ...
    """
    return SqlRouteStore()


def get_route_lifecycle(store: RouteStore = Depends(get_route_store)) -> RouteLifecycle:
    return RouteLifecycle(store)


async def require_gym(gym_id: int, store: RouteStore = Depends(get_route_store)) -> None:
    """404 for every /gyms/{gym_id}/... request naming an unknown gym."""
    await store.get_gym(gym_id)
