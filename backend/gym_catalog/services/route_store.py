"""
Route Catalog Store

Read/write contract between the catalog services and persistence, plus the
SQLAlchemy implementation used by the API and the background tasks.

Every call opens its own session from the session factory, so independent
calls (e.g. the items of a batch transition) may run concurrently.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from gym_catalog.exceptions import (
    GymNotFoundError,
    RouteNotFoundError,
    RouteValidationError,
    SectorNotFoundError,
)
from gym_catalog.models import (
    AscentGymRoute,
    Gym,
    GymGrade,
    GymGradeLine,
    GymRoute,
    GymSector,
    GymSpace,
    gym_route_openers,
)
from gym_catalog.models.ascent import PROJECT_STATUS
from gym_catalog.schemas.catalog import (
    AscentSnapshot,
    GradeLineSnapshot,
    GradeSnapshot,
    GymSnapshot,
    RouteScope,
    RouteSnapshot,
    SectorSnapshot,
)
from gym_catalog.utils.cache import invalidate_route_summary

logger = logging.getLogger(__name__)

# Fields an editor may change through update_route
EDITABLE_FIELDS = (
    "name",
    "opened_at",
    "min_grade_value",
    "max_grade_value",
    "gym_grade_line_id",
    "points",
    "hold_colors",
    "tag_colors",
)


class RouteStore(Protocol):
    """Persistence contract consumed by the catalog services."""

    async def fetch_routes(self, scope: RouteScope) -> List[RouteSnapshot]:
        ...

    async def get_gym(self, gym_id: int) -> GymSnapshot:
        ...

    async def get_route(self, route_id: int, gym_id: Optional[int] = None) -> RouteSnapshot:
        ...

    async def fetch_sector(self, sector_id: int, gym_id: Optional[int] = None) -> SectorSnapshot:
        ...

    async def fetch_ascents(self, route_ids: Sequence[int], made_only: bool) -> List[AscentSnapshot]:
        ...

    async def update_route_state(self, route_id: int, dismounted_at: Optional[date]) -> RouteSnapshot:
        ...

    async def update_route(self, route_id: int, changes: Dict[str, Any]) -> RouteSnapshot:
        ...

    async def delete_route(self, route_id: int) -> None:
        ...

    async def fetch_gym_ids(self) -> List[int]:
        ...

    def invalidate_route_cache(self, route_id: int) -> None:
        ...


# =============================================================================
# ORM -> SNAPSHOT CONVERSION
# =============================================================================


def grade_line_snapshot(line: GymGradeLine) -> GradeLineSnapshot:
    return GradeLineSnapshot(
        id=line.id,
        name=line.name,
        order=line.order,
        colors=tuple(line.colors or ()),
    )


def grade_snapshot(grade: GymGrade) -> GradeSnapshot:
    return GradeSnapshot(
        id=grade.id,
        name=grade.name,
        difficulty_system=grade.difficulty_system,
        tag_color=bool(grade.tag_color),
        hold_color=bool(grade.hold_color),
        lines=tuple(grade_line_snapshot(line) for line in grade.gym_grade_lines),
    )


def sector_snapshot(sector: GymSector) -> SectorSnapshot:
    return SectorSnapshot(
        id=sector.id,
        name=sector.name,
        order=sector.order,
        gym_space_id=sector.gym_space_id,
    )


def route_snapshot(route: GymRoute) -> RouteSnapshot:
    """Convert a fully loaded GymRoute into an immutable snapshot."""
    line = route.gym_grade_line
    if line is not None:
        grade = line.gym_grade
    else:
        grade = route.gym_sector.gym_grade

    return RouteSnapshot(
        id=route.id,
        sector=sector_snapshot(route.gym_sector),
        opened_at=route.opened_at,
        dismounted_at=route.dismounted_at,
        name=route.name,
        min_grade_value=route.min_grade_value,
        max_grade_value=route.max_grade_value,
        grade=grade_snapshot(grade) if grade is not None else None,
        grade_line=grade_line_snapshot(line) if line is not None else None,
        points=route.points,
        calculated_point=route.calculated_point,
        opener_ids=tuple(opener.id for opener in route.gym_openers),
        hold_colors=tuple(route.hold_colors or ()),
        tag_colors=tuple(route.tag_colors or ()),
        created_at=route.created_at,
        updated_at=route.updated_at,
    )


def _route_load_options():
    return (
        selectinload(GymRoute.gym_sector)
        .selectinload(GymSector.gym_grade)
        .selectinload(GymGrade.gym_grade_lines),
        selectinload(GymRoute.gym_grade_line)
        .selectinload(GymGradeLine.gym_grade)
        .selectinload(GymGrade.gym_grade_lines),
        selectinload(GymRoute.gym_openers),
    )


def check_route_dates(opened_at: Optional[date], dismounted_at: Optional[date]) -> Dict[str, List[str]]:
    """
    Validate the opening/dismounting dates of a route.

    Returns:
        Field -> messages mapping, empty when valid
    """
    errors: Dict[str, List[str]] = {}
    if opened_at is None:
        errors["opened_at"] = ["can't be blank"]
    elif dismounted_at is not None and dismounted_at < opened_at:
        errors["dismounted_at"] = ["must be on or after opened_at"]
    return errors


# =============================================================================
# SQLALCHEMY STORE
# =============================================================================


class SqlRouteStore:
    """
    RouteStore backed by the async SQLAlchemy models.

    Args:
        session_factory: Callable returning an AsyncSession context manager
            (defaults to the application's AsyncSessionLocal)
    """

    def __init__(self, session_factory=None):
        if session_factory is None:
            from gym_catalog.db.session import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self._session_factory = session_factory

    async def fetch_routes(self, scope: RouteScope) -> List[RouteSnapshot]:
        query = (
            select(GymRoute)
            .join(GymSector, GymRoute.gym_sector_id == GymSector.id)
            .join(GymSpace, GymSector.gym_space_id == GymSpace.id)
            .options(*_route_load_options())
            .order_by(GymRoute.id)
        )

        if scope.gym_id is not None:
            query = query.where(GymSpace.gym_id == scope.gym_id)
        if scope.space_ids:
            query = query.where(GymSpace.id.in_(scope.space_ids))
        if scope.sector_id is not None:
            query = query.where(GymSector.id == scope.sector_id)
        if scope.opener_ids:
            query = query.where(
                exists().where(
                    gym_route_openers.c.gym_route_id == GymRoute.id,
                    gym_route_openers.c.gym_opener_id.in_(scope.opener_ids),
                )
            )
        if scope.mounted is True:
            query = query.where(GymRoute.dismounted_at.is_(None))
        elif scope.mounted is False:
            query = query.where(GymRoute.dismounted_at.isnot(None))

        async with self._session_factory() as session:
            result = await session.execute(query)
            routes = result.scalars().all()
            return [route_snapshot(route) for route in routes]

    async def get_gym(self, gym_id: int) -> GymSnapshot:
        async with self._session_factory() as session:
            gym = await session.get(Gym, gym_id)
            if gym is None:
                raise GymNotFoundError(gym_id)
            return GymSnapshot(id=gym.id, name=gym.name)

    async def get_route(self, route_id: int, gym_id: Optional[int] = None) -> RouteSnapshot:
        """
        Snapshot of a route.

        With `gym_id`, a route of another gym is reported as not found.
        """
        async with self._session_factory() as session:
            route = await self._load_route(session, route_id, gym_id=gym_id)
            return route_snapshot(route)

    async def fetch_sector(self, sector_id: int, gym_id: Optional[int] = None) -> SectorSnapshot:
        query = select(GymSector).where(GymSector.id == sector_id)
        if gym_id is not None:
            query = query.join(GymSpace, GymSector.gym_space_id == GymSpace.id).where(
                GymSpace.gym_id == gym_id
            )

        async with self._session_factory() as session:
            result = await session.execute(query)
            sector = result.scalar_one_or_none()
            if sector is None:
                raise SectorNotFoundError(sector_id)
            return sector_snapshot(sector)

    async def fetch_ascents(self, route_ids: Sequence[int], made_only: bool) -> List[AscentSnapshot]:
        if not route_ids:
            return []

        query = (
            select(AscentGymRoute)
            .where(AscentGymRoute.gym_route_id.in_(list(route_ids)))
            .order_by(AscentGymRoute.id)
        )
        if made_only:
            query = query.where(AscentGymRoute.ascent_status != PROJECT_STATUS)

        async with self._session_factory() as session:
            result = await session.execute(query)
            return [
                AscentSnapshot(
                    id=ascent.id,
                    gym_route_id=ascent.gym_route_id,
                    ascent_status=ascent.ascent_status,
                    note=ascent.note,
                )
                for ascent in result.scalars().all()
            ]

    async def update_route_state(self, route_id: int, dismounted_at: Optional[date]) -> RouteSnapshot:
        async with self._session_factory() as session:
            route = await self._load_route(session, route_id)
            errors = check_route_dates(route.opened_at, dismounted_at)
            if errors:
                raise RouteValidationError(errors, route_id=route_id)

            route.dismounted_at = dismounted_at
            route.updated_at = datetime.utcnow()
            await self._commit(session, route_id)
            return route_snapshot(route)

    async def update_route(self, route_id: int, changes: Dict[str, Any]) -> RouteSnapshot:
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise RouteValidationError(
                {field: ["is not editable"] for field in unknown}, route_id=route_id
            )

        async with self._session_factory() as session:
            route = await self._load_route(session, route_id)
            opened_at = changes.get("opened_at", route.opened_at)
            errors = check_route_dates(opened_at, route.dismounted_at)
            if errors:
                raise RouteValidationError(errors, route_id=route_id)

            for field, value in changes.items():
                setattr(route, field, value)
            route.updated_at = datetime.utcnow()
            await self._commit(session, route_id)

            # Grade line may have changed: reload relationships for the snapshot
            route = await self._load_route(session, route_id, refresh=True)
            return route_snapshot(route)

    async def delete_route(self, route_id: int) -> None:
        async with self._session_factory() as session:
            await self._load_route(session, route_id)
            await session.execute(
                delete(AscentGymRoute).where(AscentGymRoute.gym_route_id == route_id)
            )
            await session.execute(
                delete(gym_route_openers).where(gym_route_openers.c.gym_route_id == route_id)
            )
            await session.execute(delete(GymRoute).where(GymRoute.id == route_id))
            await self._commit(session, route_id)

    async def fetch_gym_ids(self) -> List[int]:
        async with self._session_factory() as session:
            result = await session.execute(select(Gym.id).order_by(Gym.id))
            return list(result.scalars().all())

    def invalidate_route_cache(self, route_id: int) -> None:
        invalidate_route_summary(route_id)

    # -------------------------------------------------------------------------

    async def _load_route(
        self, session, route_id: int, refresh: bool = False, gym_id: Optional[int] = None
    ) -> GymRoute:
        query = select(GymRoute).where(GymRoute.id == route_id).options(*_route_load_options())
        if gym_id is not None:
            query = (
                query.join(GymSector, GymRoute.gym_sector_id == GymSector.id)
                .join(GymSpace, GymSector.gym_space_id == GymSpace.id)
                .where(GymSpace.gym_id == gym_id)
            )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await session.execute(query)
        route = result.scalar_one_or_none()
        if route is None:
            raise RouteNotFoundError(route_id)
        return route

    async def _commit(self, session, route_id: int) -> None:
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Failed to persist gym route {route_id}: {e}")
            raise RouteValidationError({"base": [str(e.__class__.__name__)]}, route_id=route_id) from e
