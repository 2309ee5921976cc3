"""
Gym Statistics Aggregation

Statistics of a gym's route population as it stood on an observation date.

The active population is a point-in-time reconstruction, not the current
state: a route counts when it was opened on or before the date and was
either never dismounted or dismounted on or after the date.

    opened_at <= date AND (dismounted_at IS NULL OR dismounted_at >= date)

The builders below are pure functions of that population. GymStatistics
resolves the population (and its made ascents) once per session and feeds
every statistic from the same snapshot, so the figures of one bundle are
always consistent with each other.
"""
import logging
from collections import Counter
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from gym_catalog.schemas.catalog import AscentSnapshot, GradeSnapshot, RouteScope, RouteSnapshot
from gym_catalog.schemas.statistics import (
    Figures,
    GradeDistribution,
    GradeFigures,
    LevelChart,
    NoteDistribution,
    OpeningFigures,
    OpeningFrequency,
    StatisticsBundle,
)
from gym_catalog.services.grade_scale import MAX_GRADE_VALUE, grade_value_color
from gym_catalog.services.route_store import RouteStore
from gym_catalog.utils.stats_utils import rounded_mean
from gym_catalog.utils.time_utils import date_range, days_between, iso_day

logger = logging.getLogger(__name__)

# Histogram buckets: one per whole grade step (1, 3, 5, ... 53)
GRADE_BUCKETS: Tuple[int, ...] = tuple(range(1, MAX_GRADE_VALUE, 2))

# Satisfaction notes an ascent can carry
NOTE_DOMAIN: Tuple[int, ...] = tuple(range(0, 7))


# =============================================================================
# POPULATION
# =============================================================================


def is_active_on(route: RouteSnapshot, observed_on: date) -> bool:
    """True when the route was on the wall on `observed_on`."""
    if route.opened_at > observed_on:
        return False
    return route.dismounted_at is None or route.dismounted_at >= observed_on


def active_population(routes: Iterable[RouteSnapshot], observed_on: date) -> Tuple[RouteSnapshot, ...]:
    return tuple(route for route in routes if is_active_on(route, observed_on))


# =============================================================================
# BUILDERS
# =============================================================================


def build_figures(routes: Sequence[RouteSnapshot], ascent_count: int, observed_on: date) -> Figures:
    """
    Headline figures of a population.

    Ages are whole days before `observed_on`; the average age is floored.
    The grade average is taken over max grade values and rounded half up.
    Every field is None on an empty population (counts are 0).
    """
    if not routes:
        return Figures(route_count=0, ascent_count=ascent_count)

    opening_dates = [route.opened_at for route in routes]
    youngest = max(opening_dates)
    oldest = min(opening_dates)
    age_sum = sum(days_between(opened_at, observed_on) for opened_at in opening_dates)

    max_values = [route.max_grade_value for route in routes if route.max_grade_value is not None]
    min_values = [route.min_grade_value for route in routes if route.min_grade_value is not None]

    return Figures(
        route_count=len(routes),
        ascent_count=ascent_count,
        opening=OpeningFigures(
            youngest_opening_date=youngest,
            oldest_opening_date=oldest,
            oldest_route_age=days_between(oldest, observed_on),
            youngest_route_age=days_between(youngest, observed_on),
            average_route_age=age_sum // len(routes),
        ),
        grade=GradeFigures(
            max_value=max(max_values) if max_values else None,
            min_value=min(min_values) if min_values else None,
            average_value=rounded_mean(max_values),
        ),
    )


def grade_bucket(value: Optional[int]) -> Optional[int]:
    """
    Histogram bucket of a minimum grade value.

    Even values ("+" grades) fall into the bucket below. Missing, zero and
    off-scale values have no bucket.

    Example:
        >>> grade_bucket(16), grade_bucket(15), grade_bucket(0)
        (15, 15, None)
    """
    if not value:
        return None
    if value % 2 == 0:
        value -= 1
    return value if 1 <= value <= GRADE_BUCKETS[-1] else None


def build_grade_distribution(
    routes: Iterable[RouteSnapshot],
    color_for: Callable[[int], str] = grade_value_color,
) -> GradeDistribution:
    """
    Route count per grade bucket over the full numeric scale.

    A bucket is drawn in the colour of the value just below it, so bucket 1
    has no grade colour.
    """
    counts = Counter(
        bucket
        for bucket in (grade_bucket(route.min_grade_value) for route in routes)
        if bucket is not None
    )
    return GradeDistribution(
        labels=GRADE_BUCKETS,
        counts=tuple(counts.get(bucket, 0) for bucket in GRADE_BUCKETS),
        colors=tuple(color_for(bucket - 1) for bucket in GRADE_BUCKETS),
    )


def build_level_distribution(routes: Iterable[RouteSnapshot]) -> Tuple[LevelChart, ...]:
    """
    One chart per level grade used by the population.

    Each chart lists every line of the grade in rank order, lines without
    routes included. Charts come in order of first appearance.
    """
    grades: Dict[int, GradeSnapshot] = {}
    line_counts: Counter = Counter()
    for route in routes:
        if route.grade_line is None or route.grade is None or not route.grade.difficulty_by_level:
            continue
        grades.setdefault(route.grade.id, route.grade)
        line_counts[route.grade_line.id] += 1

    charts: List[LevelChart] = []
    for grade in grades.values():
        lines = sorted(grade.lines, key=lambda line: line.order)
        charts.append(
            LevelChart(
                grade_id=grade.id,
                grade_name=grade.name,
                labels=tuple(line.name for line in lines),
                counts=tuple(line_counts.get(line.id, 0) for line in lines),
                colors=tuple(line.colors[0] if line.colors else None for line in lines),
            )
        )
    return tuple(charts)


def build_note_distribution(ascents: Iterable[AscentSnapshot]) -> NoteDistribution:
    """Made ascents per note 0-6. Unobserved notes are reported as 0."""
    counts = Counter(
        ascent.note
        for ascent in ascents
        if ascent.made and ascent.note is not None
    )
    return NoteDistribution(
        labels=NOTE_DOMAIN,
        counts=tuple(counts.get(note, 0) for note in NOTE_DOMAIN),
    )


def build_opening_frequency(routes: Sequence[RouteSnapshot], observed_on: date) -> OpeningFrequency:
    """
    Routes opened per day, from the oldest opening through `observed_on`.

    Every calendar day is present; an empty population gives an empty series.
    """
    if not routes:
        return OpeningFrequency()

    oldest = min(route.opened_at for route in routes)
    counts = Counter(route.opened_at for route in routes)
    days = list(date_range(oldest, observed_on))
    return OpeningFrequency(
        labels=tuple(iso_day(day) for day in days),
        counts=tuple(counts.get(day, 0) for day in days),
    )


# =============================================================================
# SESSION
# =============================================================================


class GymStatistics:
    """
    One aggregation session for a gym on an observation date.

    Args:
        store: Route store to read from
        gym_id: Gym to observe (required)
        observed_on: Observation date (default: today)
        space_ids: Restrict to these gym spaces (empty = all)
        opener_ids: Restrict to routes opened by any of these openers (empty = all)
        color_for: Colour of a grade value, used for the grade distribution

    Raises:
        ValueError: gym_id is None
        GymNotFoundError: Unknown gym (when the population is first resolved)
    """

    def __init__(
        self,
        store: RouteStore,
        gym_id: int,
        observed_on: Optional[date] = None,
        space_ids: Optional[Iterable[int]] = None,
        opener_ids: Optional[Iterable[int]] = None,
        color_for: Callable[[int], str] = grade_value_color,
    ):
        if gym_id is None:
            raise ValueError("gym_id is required")
        self.store = store
        self.gym_id = gym_id
        self.observed_on = observed_on or date.today()
        self.space_ids = tuple(space_ids or ())
        self.opener_ids = tuple(opener_ids or ())
        self.color_for = color_for
        self._population: Optional[Tuple[RouteSnapshot, ...]] = None
        self._made_ascents: Optional[Tuple[AscentSnapshot, ...]] = None

    async def population(self) -> Tuple[RouteSnapshot, ...]:
        """
        Routes on the wall on the observation date (resolved once).

        Raises:
            GymNotFoundError: Unknown gym
        """
        if self._population is None:
            await self.store.get_gym(self.gym_id)
            routes = await self.store.fetch_routes(
                RouteScope(gym_id=self.gym_id, space_ids=self.space_ids, opener_ids=self.opener_ids)
            )
            self._population = active_population(routes, self.observed_on)
            logger.debug(
                f"Gym {self.gym_id} on {self.observed_on}: "
                f"{len(self._population)}/{len(routes)} routes active"
            )
        return self._population

    async def made_ascents(self) -> Tuple[AscentSnapshot, ...]:
        if self._made_ascents is None:
            routes = await self.population()
            ascents = await self.store.fetch_ascents([route.id for route in routes], made_only=True)
            self._made_ascents = tuple(ascent for ascent in ascents if ascent.made)
        return self._made_ascents

    async def figures(self) -> Figures:
        routes = await self.population()
        ascents = await self.made_ascents()
        return build_figures(routes, len(ascents), self.observed_on)

    async def grade_distribution(self) -> GradeDistribution:
        return build_grade_distribution(await self.population(), self.color_for)

    async def level_distribution(self) -> Tuple[LevelChart, ...]:
        return build_level_distribution(await self.population())

    async def note_distribution(self) -> NoteDistribution:
        return build_note_distribution(await self.made_ascents())

    async def opening_frequency(self) -> OpeningFrequency:
        return build_opening_frequency(await self.population(), self.observed_on)

    async def bundle(self) -> StatisticsBundle:
        return StatisticsBundle(
            gym_id=self.gym_id,
            observation_date=self.observed_on,
            figures=await self.figures(),
            grade_distribution=await self.grade_distribution(),
            level_distribution=await self.level_distribution(),
            note_distribution=await self.note_distribution(),
            opening_frequency=await self.opening_frequency(),
        )


async def compute_statistics(
    store: RouteStore,
    gym_id: int,
    observed_on: Optional[date] = None,
    space_ids: Optional[Iterable[int]] = None,
    opener_ids: Optional[Iterable[int]] = None,
) -> StatisticsBundle:
    """
    Full statistics bundle of a gym on a date.

    Example:
        >>> bundle = await compute_statistics(store, gym_id=1, observed_on=date(2024, 1, 10))
        >>> bundle.figures.route_count
        3
    """
    return await GymStatistics(store, gym_id, observed_on, space_ids, opener_ids).bundle()
