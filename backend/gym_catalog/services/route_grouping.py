"""
Route Grouping Engine

Orders and partitions an in-memory route collection for the route list
endpoints. Pure functions of the collection: no store access, no I/O.

Two request keys drive it:
- order_by:  secondary order applied first (opened_at, grade, level, sector, point)
- group_by:  none, sector, opened_at, grade, level, or point

Both sorts are stable, so routes with equal keys keep the order they were
retrieved in. An unknown key falls back to NONE instead of raising.
"""
import logging
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from gym_catalog.schemas.catalog import GradeSnapshot, RouteSnapshot
from gym_catalog.schemas.grouping import GroupedRoutes, LevelInfo, RouteBucket
from gym_catalog.utils.time_utils import iso_day

logger = logging.getLogger(__name__)


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: Union[str, "_ParsableEnum", None]):
        """Map request input to a member; anything unknown becomes NONE."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower()) if value is not None else cls.NONE
        except ValueError:
            logger.debug(f"Unknown {cls.__name__} '{value}', using default order")
            return cls.NONE


class GroupBy(_ParsableEnum):
    NONE = "none"
    SECTOR = "sector"
    OPENED_AT = "opened_at"
    GRADE = "grade"
    LEVEL = "level"
    POINT = "point"


class OrderBy(_ParsableEnum):
    NONE = "none"
    OPENED_AT = "opened_at"
    GRADE = "grade"
    LEVEL = "level"
    SECTOR = "sector"
    POINT = "point"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union[str, "Direction", None]) -> "Direction":
        """Anything other than "asc" (or nothing) sorts descending."""
        if isinstance(value, cls):
            return value
        if value is None or str(value).strip().lower() == "asc":
            return cls.ASC
        return cls.DESC

    @property
    def reverse(self) -> bool:
        return self is Direction.DESC


# =============================================================================
# SORT KEYS
# =============================================================================


def point_key(route: RouteSnapshot) -> float:
    """Computed point score; a missing score orders as zero."""
    return route.calculated_point or 0


def grade_key(route: RouteSnapshot) -> int:
    return route.max_grade_value or 0


def level_key(route: RouteSnapshot) -> Tuple[int, str]:
    """Grade-line rank, then grade name. Routes without a line order first."""
    if route.grade_line is None:
        return (-1, "")
    return (route.grade_line.order, route.grade.name if route.grade else "")


ORDER_KEYS: Dict[OrderBy, Callable[[RouteSnapshot], Any]] = {
    OrderBy.OPENED_AT: lambda route: route.opened_at,
    OrderBy.GRADE: grade_key,
    OrderBy.LEVEL: level_key,
    OrderBy.SECTOR: lambda route: route.sector.name,
    OrderBy.POINT: point_key,
}


def order_routes(
    routes: Iterable[RouteSnapshot],
    order_by: Union[str, OrderBy, None] = None,
    direction: Union[str, Direction, None] = None,
) -> Tuple[RouteSnapshot, ...]:
    """
    Stable sort of a route collection by a secondary order key.

    OrderBy.NONE keeps retrieval order whatever the direction.
    """
    order_by = OrderBy.parse(order_by)
    direction = Direction.parse(direction)
    key = ORDER_KEYS.get(order_by)
    if key is None:
        return tuple(routes)
    return tuple(sorted(routes, key=key, reverse=direction.reverse))


# =============================================================================
# GROUPINGS
# =============================================================================


def _partition(
    routes: Iterable[RouteSnapshot],
    bucket_key: Callable[[RouteSnapshot], Optional[Hashable]],
) -> Dict[Hashable, Tuple[RouteSnapshot, ...]]:
    """
    Split routes by key, preserving first-appearance order of keys and
    retrieval order inside each bucket. A None key drops the route.
    """
    members: Dict[Hashable, List[RouteSnapshot]] = {}
    for route in routes:
        key = bucket_key(route)
        if key is None:
            continue
        members.setdefault(key, []).append(route)
    return {key: tuple(group) for key, group in members.items()}


def _sorted_buckets(buckets: List[RouteBucket], sort_key, direction: Direction) -> Tuple[RouteBucket, ...]:
    return tuple(sorted(buckets, key=sort_key, reverse=direction.reverse))


def _flat(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    return GroupedRoutes(group_by=GroupBy.NONE.value, direction=direction.value, routes=tuple(routes))


def _by_point(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    ordered = tuple(sorted(routes, key=point_key, reverse=direction.reverse))
    return GroupedRoutes(group_by=GroupBy.POINT.value, direction=direction.value, routes=ordered)


def _by_sector(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    partition = _partition(routes, lambda route: route.sector.id)
    buckets = [
        RouteBucket(key=str(sector_id), sector=group[0].sector, routes=group)
        for sector_id, group in partition.items()
    ]
    ranked = [bucket for bucket in buckets if bucket.sector.order is not None]
    # Sectors without an explicit order come last in either direction
    unranked = tuple(bucket for bucket in buckets if bucket.sector.order is None)
    ordered = _sorted_buckets(ranked, lambda bucket: bucket.sector.order, direction) + unranked
    return GroupedRoutes(group_by=GroupBy.SECTOR.value, direction=direction.value, buckets=ordered)


def _by_opened_at(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    partition = _partition(routes, lambda route: route.opened_at)
    buckets = [
        RouteBucket(key=iso_day(opened_at), opened_at=opened_at, routes=group)
        for opened_at, group in partition.items()
    ]
    ordered = _sorted_buckets(buckets, lambda bucket: bucket.opened_at, direction)
    return GroupedRoutes(group_by=GroupBy.OPENED_AT.value, direction=direction.value, buckets=ordered)


def _grade_value(route: RouteSnapshot) -> Optional[int]:
    if route.grade is None or not route.grade.difficulty_by_grade:
        return None
    return route.max_grade_value


def _by_grade(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    partition = _partition(routes, _grade_value)
    buckets = [
        RouteBucket(key=str(value), grade_value=value, routes=group)
        for value, group in partition.items()
    ]
    ordered = _sorted_buckets(buckets, lambda bucket: bucket.grade_value, direction)
    return GroupedRoutes(group_by=GroupBy.GRADE.value, direction=direction.value, buckets=ordered)


def _level_of(route: RouteSnapshot) -> Optional[Tuple[int, int]]:
    if route.grade is None or not route.grade.difficulty_by_level or route.grade_line is None:
        return None
    return (route.grade.id, route.grade_line.order)


def _by_level(routes: Sequence[RouteSnapshot], direction: Direction) -> GroupedRoutes:
    """
    One bucket per line of every represented level grade.

    Lines without a matching route still get an (empty) bucket so each
    grade's scale is complete. Buckets are grouped by grade (name, then id),
    each grade's lines in rank order. Keys are "<grade id>-<line rank>" so
    lines sharing a name under different grades never collide.
    """
    partition = _partition(routes, _level_of)

    grades: Dict[int, GradeSnapshot] = {}
    for route in routes:
        if _level_of(route) is not None:
            grades.setdefault(route.grade.id, route.grade)

    buckets = [
        RouteBucket(
            key=f"{grade.id}-{line.order}",
            level=LevelInfo(
                grade_id=grade.id,
                grade_name=grade.name,
                name=line.name,
                order=line.order,
                colors=line.colors,
                tag_color=grade.tag_color,
                hold_color=grade.hold_color,
            ),
            routes=partition.get((grade.id, line.order), ()),
        )
        for grade in grades.values()
        for line in sorted(grade.lines, key=lambda line: line.order)
    ]
    ordered = _sorted_buckets(
        buckets,
        lambda bucket: (bucket.level.grade_name, bucket.level.grade_id, bucket.level.order),
        direction,
    )
    return GroupedRoutes(group_by=GroupBy.LEVEL.value, direction=direction.value, buckets=ordered)


GROUPINGS: Dict[GroupBy, Callable[[Sequence[RouteSnapshot], Direction], GroupedRoutes]] = {
    GroupBy.NONE: _flat,
    GroupBy.SECTOR: _by_sector,
    GroupBy.OPENED_AT: _by_opened_at,
    GroupBy.GRADE: _by_grade,
    GroupBy.LEVEL: _by_level,
    GroupBy.POINT: _by_point,
}


def group_routes(
    routes: Iterable[RouteSnapshot],
    group_by: Union[str, GroupBy, None] = None,
    order_by: Union[str, OrderBy, None] = None,
    direction: Union[str, Direction, None] = None,
) -> GroupedRoutes:
    """
    Order then group a route collection.

    Args:
        routes: Routes already narrowed to the requested scope, in retrieval order
        group_by: Grouping key; unknown values give a flat, unforced order
        order_by: Secondary order applied before grouping
        direction: "asc" (default) or anything else for descending

    Returns:
        GroupedRoutes holding either `routes` (flat) or `buckets`

    Example:
        >>> result = group_routes(routes, group_by="grade", direction="desc")
        >>> [bucket.grade_value for bucket in result.buckets]
        [21, 15]
    """
    group_by = GroupBy.parse(group_by)
    direction = Direction.parse(direction)
    ordered = order_routes(routes, order_by, direction)
    return GROUPINGS[group_by](ordered, direction)
