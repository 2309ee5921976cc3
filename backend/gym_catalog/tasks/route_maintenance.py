"""
Background route maintenance tasks.

- Large mount/dismount batches run off-request
- Nightly warming of mounted route summaries
"""
import asyncio
import logging
from typing import List

from gym_catalog.celery_app import celery_app
from gym_catalog.schemas.catalog import RouteScope
from gym_catalog.services.route_lifecycle import RouteLifecycle
from gym_catalog.services.route_store import RouteStore, SqlRouteStore
from gym_catalog.services.route_summary import cached_route_summary

logger = logging.getLogger(__name__)


@celery_app.task(name="gym_catalog.tasks.route_maintenance.dismount_routes_task")
def dismount_routes_task(route_ids: List[int]) -> dict:
    """Dismount a batch of routes; returns the per-route outcomes."""
    result = asyncio.run(RouteLifecycle(SqlRouteStore()).dismount_batch(route_ids))
    return result.model_dump(mode="json")


@celery_app.task(name="gym_catalog.tasks.route_maintenance.mount_routes_task")
def mount_routes_task(route_ids: List[int]) -> dict:
    """Mount a batch of routes; returns the per-route outcomes."""
    result = asyncio.run(RouteLifecycle(SqlRouteStore()).mount_batch(route_ids))
    return result.model_dump(mode="json")


@celery_app.task(name="gym_catalog.tasks.route_maintenance.warm_route_summaries")
def warm_route_summaries():
    """
    Rebuild the cached summary of every mounted route of every gym.

    Runs nightly via Celery Beat, after which route pages are served from
    cache until the next write to a route.
    """
    logger.info("Starting route summary warming...")

    try:
        result = asyncio.run(_warm_route_summaries_async(SqlRouteStore()))
        logger.info(f"Route summary warming completed: {result}")
        return result
    except Exception as e:
        logger.error(f"Route summary warming failed: {e}", exc_info=True)
        raise


async def _warm_route_summaries_async(store: RouteStore) -> dict:
    """
    Async implementation of summary warming.

    Returns:
        dict: Statistics about the warming process
    """
    gym_ids = await store.fetch_gym_ids()
    if not gym_ids:
        logger.warning("No gyms found for summary warming")
        return {"status": "no_gyms", "warmed": 0}

    warmed_count = 0
    for gym_id in gym_ids:
        routes = await store.fetch_routes(RouteScope(gym_id=gym_id, mounted=True))
        for route in routes:
            cached_route_summary(route)
            warmed_count += 1

    return {
        "status": "completed",
        "gyms_processed": len(gym_ids),
        "total_warmed": warmed_count,
    }
