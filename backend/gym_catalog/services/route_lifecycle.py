"""
Route Lifecycle Manager

Mounted/dismounted state machine of gym routes:

    MOUNTED --dismount--> DISMOUNTED   (dismounted_at = today)
    DISMOUNTED --mount--> MOUNTED      (dismounted_at = NULL)

Both transitions are idempotent: asking for the current state is a
successful no-op. Every effective transition drops the route's cached
summary before returning.

Batch variants are best-effort: each route is transitioned on its own and
its outcome (success or validation errors) is reported independently.
"""
import asyncio
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional

from gym_catalog.config import settings
from gym_catalog.exceptions import BatchTooLargeError, CatalogError, RouteValidationError
from gym_catalog.schemas.catalog import RouteScope, RouteSnapshot, RouteState
from gym_catalog.schemas.lifecycle import BatchTransitionResult, TransitionOutcome
from gym_catalog.services.route_store import RouteStore, check_route_dates

logger = logging.getLogger(__name__)


class RouteLifecycle:
    """
    Applies mount/dismount transitions through a RouteStore.

    Args:
        store: Persistence collaborator
        max_batch_size: Largest accepted batch (default: settings.BATCH_MAX_SIZE)
        max_concurrency: Concurrent store calls per batch (default: settings.BATCH_MAX_CONCURRENCY)
        today: Clock returning the current date, for dismount timestamps
    """

    def __init__(
        self,
        store: RouteStore,
        max_batch_size: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.max_batch_size = max_batch_size or settings.BATCH_MAX_SIZE
        self.max_concurrency = max_concurrency or settings.BATCH_MAX_CONCURRENCY
        self.today = today

    # -------------------------------------------------------------------------
    # Single route
    # -------------------------------------------------------------------------

    async def dismount(self, route_id: int, gym_id: Optional[int] = None) -> TransitionOutcome:
        """
        Dismount a route as of today.

        With `gym_id`, only a route of that gym is transitioned.

        Raises:
            RouteNotFoundError: Unknown route, or a route of another gym
            RouteValidationError: Route opens after today, or the store rejected the update
        """
        route = await self.store.get_route(route_id, gym_id)
        if not route.mounted:
            return TransitionOutcome(route_id=route_id, ok=True, state=RouteState.DISMOUNTED)

        dismounted_at = self.today()
        errors = check_route_dates(route.opened_at, dismounted_at)
        if errors:
            raise RouteValidationError(errors, route_id=route_id)

        updated = await self.store.update_route_state(route_id, dismounted_at)
        self.store.invalidate_route_cache(route_id)
        logger.info(f"Gym route {route_id} dismounted on {dismounted_at}")
        return TransitionOutcome(route_id=route_id, ok=True, state=updated.state, changed=True)

    async def mount(self, route_id: int, gym_id: Optional[int] = None) -> TransitionOutcome:
        """
        Put a dismounted route back on the wall.

        Raises:
            RouteNotFoundError: Unknown route, or a route of another gym
            RouteValidationError: The store rejected the update
        """
        route = await self.store.get_route(route_id, gym_id)
        if route.mounted:
            return TransitionOutcome(route_id=route_id, ok=True, state=RouteState.MOUNTED)

        updated = await self.store.update_route_state(route_id, None)
        self.store.invalidate_route_cache(route_id)
        logger.info(f"Gym route {route_id} mounted again")
        return TransitionOutcome(route_id=route_id, ok=True, state=updated.state, changed=True)

    # -------------------------------------------------------------------------
    # Batches
    # -------------------------------------------------------------------------

    async def dismount_batch(self, route_ids: Iterable[int], gym_id: Optional[int] = None) -> BatchTransitionResult:
        return await self._run_batch("dismount", self.dismount, route_ids, gym_id)

    async def mount_batch(self, route_ids: Iterable[int], gym_id: Optional[int] = None) -> BatchTransitionResult:
        return await self._run_batch("mount", self.mount, route_ids, gym_id)

    async def dismount_sector(self, sector_id: int, gym_id: Optional[int] = None) -> BatchTransitionResult:
        """
        Dismount every route currently mounted in a sector.

        Raises:
            SectorNotFoundError: Unknown sector, or a sector of another gym
        """
        await self.store.fetch_sector(sector_id, gym_id)
        routes: List[RouteSnapshot] = await self.store.fetch_routes(
            RouteScope(gym_id=gym_id, sector_id=sector_id, mounted=True)
        )
        logger.info(f"Dismounting {len(routes)} routes of gym sector {sector_id}")
        return await self.dismount_batch([route.id for route in routes], gym_id)

    async def _run_batch(
        self, action: str, transition, route_ids: Iterable[int], gym_id: Optional[int] = None
    ) -> BatchTransitionResult:
        # Duplicates collapse onto their first occurrence
        unique_ids = list(dict.fromkeys(route_ids))
        if len(unique_ids) > self.max_batch_size:
            raise BatchTooLargeError(len(unique_ids), self.max_batch_size)

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(route_id: int) -> TransitionOutcome:
            async with semaphore:
                try:
                    return await transition(route_id, gym_id)
                except RouteValidationError as e:
                    logger.warning(f"Could not {action} gym route {route_id}: {e.errors}")
                    return TransitionOutcome(route_id=route_id, ok=False, errors=e.errors)
                except CatalogError as e:
                    logger.warning(f"Could not {action} gym route {route_id}: {e.message}")
                    return TransitionOutcome(route_id=route_id, ok=False, errors={"base": [e.message]})

        outcomes = await asyncio.gather(*(run_one(route_id) for route_id in unique_ids))
        result = BatchTransitionResult(action=action, outcomes=tuple(outcomes))
        logger.info(
            f"Batch {action}: {len(result.succeeded)} succeeded, {len(result.failed)} failed"
        )
        return result
