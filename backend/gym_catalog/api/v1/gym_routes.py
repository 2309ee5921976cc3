"""
Gym routes API endpoints.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, Response, status

from gym_catalog.api.deps import get_route_lifecycle, get_route_store, require_gym
from gym_catalog.schemas.catalog import RouteScope
from gym_catalog.schemas.grouping import GroupedRoutes
from gym_catalog.schemas.lifecycle import BatchTransitionResult, RouteIdsRequest, TransitionOutcome
from gym_catalog.schemas.route import RouteSummary, RouteUpdate
from gym_catalog.services.route_editor import delete_route, update_route
from gym_catalog.services.route_grouping import group_routes
from gym_catalog.services.route_lifecycle import RouteLifecycle
from gym_catalog.services.route_store import RouteStore
from gym_catalog.services.route_summary import build_route_summary, get_route_summary

# Every endpoint answers 404 for an unknown gym
router = APIRouter(dependencies=[Depends(require_gym)])
logger = logging.getLogger(__name__)


@router.get("/gyms/{gym_id}/routes", response_model=GroupedRoutes)
async def list_gym_routes(
    gym_id: int,
    gym_space_id: Optional[int] = Query(None, description="Restrict to a gym space"),
    gym_sector_id: Optional[int] = Query(None, description="Restrict to a gym sector"),
    group_by: Optional[str] = Query(None, description="none, sector, opened_at, grade, level or point"),
    order_by: Optional[str] = Query(None, description="opened_at, grade, level, sector or point"),
    direction: str = Query("asc", description="asc or desc"),
    dismounted: bool = Query(False, description="List dismounted routes instead of mounted ones"),
    store: RouteStore = Depends(get_route_store),
):
    """
    List the routes of a gym, ordered and optionally grouped.

    - **gym_space_id** / **gym_sector_id**: narrow the scope (sector wins)
    - **group_by**: unknown values return a flat list in retrieval order
    - **direction**: applies to both the order and the bucket order
    - **dismounted**: false (default) lists mounted routes
    """
    scope = RouteScope(
        gym_id=gym_id,
        space_ids=(gym_space_id,) if gym_space_id is not None and gym_sector_id is None else (),
        sector_id=gym_sector_id,
        mounted=not dismounted,
    )
    routes = await store.fetch_routes(scope)
    return group_routes(routes, group_by=group_by, order_by=order_by, direction=direction)


@router.get("/gyms/{gym_id}/routes/{route_id}", response_model=RouteSummary)
async def get_gym_route(
    gym_id: int,
    route_id: int,
    store: RouteStore = Depends(get_route_store),
):
    """Public summary of a route (cached per route version)."""
    return await get_route_summary(store, route_id, gym_id)


@router.patch("/gyms/{gym_id}/routes/{route_id}", response_model=RouteSummary)
async def update_gym_route(
    gym_id: int,
    route_id: int,
    payload: RouteUpdate,
    store: RouteStore = Depends(get_route_store),
):
    """Update editable fields of a route."""
    route = await update_route(store, route_id, payload.model_dump(exclude_unset=True), gym_id)
    return build_route_summary(route)


@router.delete("/gyms/{gym_id}/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gym_route(
    gym_id: int,
    route_id: int,
    store: RouteStore = Depends(get_route_store),
):
    """Remove a route (and its ascents) from the catalog."""
    await delete_route(store, route_id, gym_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/gyms/{gym_id}/routes/dismount_collection", response_model=BatchTransitionResult)
async def dismount_gym_routes(
    gym_id: int,
    payload: RouteIdsRequest,
    lifecycle: RouteLifecycle = Depends(get_route_lifecycle),
):
    """
    Dismount several routes. Each route succeeds or fails on its own.

    Routes of other gyms fail as not found.
    """
    return await lifecycle.dismount_batch(payload.route_ids, gym_id)


@router.put("/gyms/{gym_id}/routes/mount_collection", response_model=BatchTransitionResult)
async def mount_gym_routes(
    gym_id: int,
    payload: RouteIdsRequest,
    lifecycle: RouteLifecycle = Depends(get_route_lifecycle),
):
    """
    Mount several routes. Each route succeeds or fails on its own.

    Routes of other gyms fail as not found.
    """
    return await lifecycle.mount_batch(payload.route_ids, gym_id)


@router.put("/gyms/{gym_id}/routes/{route_id}/dismount", response_model=TransitionOutcome)
async def dismount_gym_route(
    gym_id: int,
    route_id: int,
    lifecycle: RouteLifecycle = Depends(get_route_lifecycle),
):
    """Dismount a route as of today. Already dismounted routes are left as is."""
    return await lifecycle.dismount(route_id, gym_id)


@router.put("/gyms/{gym_id}/routes/{route_id}/mount", response_model=TransitionOutcome)
async def mount_gym_route(
    gym_id: int,
    route_id: int,
    lifecycle: RouteLifecycle = Depends(get_route_lifecycle),
):
    """Put a route back on the wall. Mounted routes are left as is."""
    return await lifecycle.mount(route_id, gym_id)


@router.put("/gyms/{gym_id}/sectors/{sector_id}/dismount_routes", response_model=BatchTransitionResult)
async def dismount_gym_sector_routes(
    gym_id: int,
    sector_id: int,
    lifecycle: RouteLifecycle = Depends(get_route_lifecycle),
):
    """Dismount every mounted route of a sector."""
    return await lifecycle.dismount_sector(sector_id, gym_id)
