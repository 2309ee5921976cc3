"""
Tests for gym statistics aggregation.

Scenario used throughout: three routes opened on 2024-01-01, 2024-01-03 and
2024-01-03, observed on 2024-01-10.
"""
from datetime import date

import pytest

from gym_catalog.exceptions import GymNotFoundError
from gym_catalog.services.grade_scale import DEFAULT_COLOR, GRADE_COLORS, grade_value_color
from gym_catalog.services.gym_statistics import (
    GRADE_BUCKETS,
    GymStatistics,
    active_population,
    build_figures,
    build_grade_distribution,
    build_level_distribution,
    build_note_distribution,
    build_opening_frequency,
    compute_statistics,
    grade_bucket,
    is_active_on,
)
from factories import (
    COLOR_LINES,
    KIDS_CIRCUIT,
    KIDS_LINES,
    SECTOR_C,
    FakeRouteStore,
    make_ascent,
    make_level_route,
    make_route,
)

OBSERVED_ON = date(2024, 1, 10)
YELLOW, GREEN, BLUE = COLOR_LINES


@pytest.fixture
def scenario_routes():
    return [
        make_route(1, opened_at=date(2024, 1, 1), max_grade_value=15, opener_ids=[7]),
        make_route(2, opened_at=date(2024, 1, 3), max_grade_value=16, opener_ids=[8]),
        make_route(3, opened_at=date(2024, 1, 3), max_grade_value=21, sector=SECTOR_C, opener_ids=[7, 8]),
    ]


@pytest.fixture
def scenario_store(scenario_routes):
    ascents = [
        make_ascent(1, 1, note=3),
        make_ascent(2, 2, note=3),
        make_ascent(3, 3, note=6),
        make_ascent(4, 3, note=None),
        make_ascent(5, 1, note=5, status="project"),
    ]
    return FakeRouteStore(scenario_routes, ascents)


class TestActivePopulation:
    """Tests for the point-in-time population"""

    def test_route_opened_after_date_is_inactive(self):
        route = make_route(1, opened_at=date(2024, 1, 11))
        assert not is_active_on(route, OBSERVED_ON)

    def test_mounted_route_is_active(self):
        assert is_active_on(make_route(1, opened_at=date(2024, 1, 1)), OBSERVED_ON)

    def test_dismounted_route_active_until_dismount_day(self):
        route = make_route(1, opened_at=date(2024, 1, 1), dismounted_at=date(2024, 1, 3))

        assert is_active_on(route, date(2024, 1, 1))
        # Dismount day is inclusive
        assert is_active_on(route, date(2024, 1, 3))
        assert not is_active_on(route, date(2024, 1, 5))

    def test_population_preserves_order(self, scenario_routes):
        population = active_population(scenario_routes, date(2024, 1, 2))
        assert [route.id for route in population] == [1]


class TestFigures:
    """Tests for headline figures"""

    def test_scenario_figures(self, scenario_routes):
        figures = build_figures(scenario_routes, ascent_count=4, observed_on=OBSERVED_ON)

        assert figures.route_count == 3
        assert figures.ascent_count == 4
        assert figures.opening.oldest_opening_date == date(2024, 1, 1)
        assert figures.opening.youngest_opening_date == date(2024, 1, 3)
        assert figures.opening.oldest_route_age == 9
        assert figures.opening.youngest_route_age == 7
        # (9 + 7 + 7) // 3
        assert figures.opening.average_route_age == 7
        assert figures.grade.max_value == 21
        assert figures.grade.min_value == 15

    def test_average_grade_rounds_half_up(self):
        routes = [make_route(1, max_grade_value=15), make_route(2, max_grade_value=16)]
        figures = build_figures(routes, 0, OBSERVED_ON)
        assert figures.grade.average_value == 16

    def test_min_value_uses_min_grade(self):
        routes = [make_route(1, min_grade_value=12, max_grade_value=15)]
        figures = build_figures(routes, 0, OBSERVED_ON)
        assert figures.grade.min_value == 12
        assert figures.grade.max_value == 15

    def test_routes_without_grade_values(self):
        figures = build_figures([make_route(1)], 0, OBSERVED_ON)
        assert figures.route_count == 1
        assert figures.grade.max_value is None
        assert figures.grade.average_value is None

    def test_empty_population(self):
        figures = build_figures([], 0, OBSERVED_ON)

        assert figures.route_count == 0
        assert figures.opening.oldest_opening_date is None
        assert figures.opening.average_route_age is None
        assert figures.grade.max_value is None


class TestGradeDistribution:
    """Tests for the grade histogram"""

    @pytest.mark.parametrize("value,bucket", [
        (1, 1),
        (2, 1),
        (15, 15),
        (16, 15),
        (53, 53),
        (54, 53),
        (0, None),
        (None, None),
        (55, None),
        (-3, None),
    ])
    def test_grade_bucket(self, value, bucket):
        assert grade_bucket(value) == bucket

    def test_covers_full_scale(self):
        distribution = build_grade_distribution([])

        assert distribution.labels == GRADE_BUCKETS
        assert len(distribution.labels) == 27
        assert distribution.counts == (0,) * 27
        assert len(distribution.colors) == 27

    def test_plus_grades_fall_into_plain_bucket(self, scenario_routes):
        distribution = build_grade_distribution(scenario_routes)
        counts = dict(zip(distribution.labels, distribution.counts))

        assert counts[15] == 2
        assert counts[21] == 1
        assert sum(distribution.counts) == 3

    def test_custom_colors(self):
        distribution = build_grade_distribution([], color_for=lambda value: f"c{value}")
        assert distribution.colors[0] == "c0"
        assert distribution.colors[-1] == "c52"

    def test_bucket_drawn_in_colour_of_value_below(self):
        colors = dict(zip(GRADE_BUCKETS, build_grade_distribution([]).colors))

        assert colors[1] == DEFAULT_COLOR
        assert colors[7] == grade_value_color(6) == GRADE_COLORS[1]
        assert colors[9] == GRADE_COLORS[2]
        assert colors[31] == grade_value_color(30) == GRADE_COLORS[5]


class TestLevelDistribution:
    """Tests for per-grade level charts"""

    def test_chart_lists_every_line(self):
        routes = [make_level_route(1, GREEN), make_level_route(2, GREEN), make_route(3, max_grade_value=15)]
        charts = build_level_distribution(routes)

        assert len(charts) == 1
        chart = charts[0]
        assert chart.grade_id == 200
        assert chart.labels == ("Yellow", "Green", "Blue")
        assert chart.counts == (0, 2, 0)
        assert chart.colors == ("#ffff00", "#00ff00", "#0000ff")

    def test_one_chart_per_grade(self):
        routes = [make_level_route(1, BLUE), make_level_route(2, KIDS_LINES[0], grade=KIDS_CIRCUIT)]
        charts = build_level_distribution(routes)

        assert [chart.grade_name for chart in charts] == ["Circuits", "Kids"]
        assert charts[1].counts == (1, 0)

    def test_no_level_routes(self, scenario_routes):
        assert build_level_distribution(scenario_routes) == ()


class TestNoteDistribution:
    """Tests for the satisfaction note histogram"""

    def test_empty_gives_seven_zeros(self):
        distribution = build_note_distribution([])

        assert distribution.labels == (0, 1, 2, 3, 4, 5, 6)
        assert distribution.counts == (0,) * 7

    def test_counts_made_ascents_only(self):
        ascents = [
            make_ascent(1, 1, note=3),
            make_ascent(2, 1, note=3),
            make_ascent(3, 1, note=6),
            make_ascent(4, 1, note=5, status="project"),
            make_ascent(5, 1, note=None),
        ]
        distribution = build_note_distribution(ascents)

        assert distribution.as_dict() == {0: 0, 1: 0, 2: 0, 3: 2, 4: 0, 5: 0, 6: 1}

    def test_out_of_range_notes_ignored(self):
        distribution = build_note_distribution([make_ascent(1, 1, note=9), make_ascent(2, 1, note=-1)])
        assert sum(distribution.counts) == 0


class TestOpeningFrequency:
    """Tests for the daily opening series"""

    def test_scenario_series(self, scenario_routes):
        frequency = build_opening_frequency(scenario_routes, OBSERVED_ON)

        assert len(frequency.labels) == 10
        assert frequency.labels[0] == "2024-01-01"
        assert frequency.labels[-1] == "2024-01-10"
        assert frequency.counts == (1, 0, 2, 0, 0, 0, 0, 0, 0, 0)

    def test_empty_population(self):
        frequency = build_opening_frequency([], OBSERVED_ON)
        assert frequency.labels == ()
        assert frequency.counts == ()

    def test_single_day(self):
        frequency = build_opening_frequency([make_route(1, opened_at=OBSERVED_ON)], OBSERVED_ON)
        assert frequency.labels == ("2024-01-10",)
        assert frequency.counts == (1,)


class TestGymStatistics:
    """Tests for the aggregation session"""

    def test_gym_id_required(self, scenario_store):
        with pytest.raises(ValueError):
            GymStatistics(scenario_store, None)

    async def test_unknown_gym(self, scenario_store):
        with pytest.raises(GymNotFoundError):
            await GymStatistics(scenario_store, 99, OBSERVED_ON).bundle()
        assert scenario_store.fetch_routes_calls == 0

    async def test_known_gym_without_routes(self):
        bundle = await GymStatistics(FakeRouteStore(gym_ids=[4]), 4, OBSERVED_ON).bundle()
        assert bundle.figures.route_count == 0

    async def test_bundle(self, scenario_store):
        bundle = await GymStatistics(scenario_store, 1, OBSERVED_ON).bundle()

        assert bundle.gym_id == 1
        assert bundle.observation_date == OBSERVED_ON
        assert bundle.figures.route_count == 3
        # Project ascent excluded
        assert bundle.figures.ascent_count == 4
        assert bundle.note_distribution.counts == (0, 0, 0, 2, 0, 0, 1)
        assert bundle.opening_frequency.counts[:3] == (1, 0, 2)

    async def test_population_resolved_once(self, scenario_store):
        statistics = GymStatistics(scenario_store, 1, OBSERVED_ON)

        await statistics.bundle()
        await statistics.figures()

        assert scenario_store.fetch_routes_calls == 1
        assert scenario_store.fetch_ascents_calls == 1

    async def test_dismounted_route_depends_on_date(self, scenario_routes):
        routes = scenario_routes + [
            make_route(4, opened_at=date(2024, 1, 1), dismounted_at=date(2024, 1, 3)),
        ]
        store = FakeRouteStore(routes)

        later = await GymStatistics(store, 1, date(2024, 1, 5)).figures()
        earlier = await GymStatistics(store, 1, date(2024, 1, 1)).figures()

        assert later.route_count == 3
        assert earlier.route_count == 2

    async def test_ascents_of_inactive_routes_excluded(self, scenario_store):
        figures = await GymStatistics(scenario_store, 1, date(2024, 1, 2)).figures()

        assert figures.route_count == 1
        # Route 1 only; its project ascent does not count
        assert figures.ascent_count == 1

    async def test_space_filter(self, scenario_store):
        figures = await GymStatistics(scenario_store, 1, OBSERVED_ON, space_ids=[SECTOR_C.gym_space_id]).figures()
        assert figures.route_count == 1
        assert figures.grade.max_value == 21

    async def test_opener_filter_matches_any(self, scenario_store):
        only_seven = await GymStatistics(scenario_store, 1, OBSERVED_ON, opener_ids=[7]).figures()
        either = await GymStatistics(scenario_store, 1, OBSERVED_ON, opener_ids=[7, 8]).figures()

        assert only_seven.route_count == 2
        assert either.route_count == 3

    async def test_other_gym_routes_excluded(self, scenario_routes):
        store = FakeRouteStore(scenario_routes, space_gyms={SECTOR_C.gym_space_id: 2})

        gym_one = await GymStatistics(store, 1, OBSERVED_ON).figures()
        gym_two = await GymStatistics(store, 2, OBSERVED_ON).figures()

        assert gym_one.route_count == 2
        assert gym_two.route_count == 1

    async def test_defaults_to_today(self, scenario_store):
        statistics = GymStatistics(scenario_store, 1)
        assert statistics.observed_on == date.today()

    async def test_compute_statistics(self, scenario_store):
        bundle = await compute_statistics(scenario_store, gym_id=1, observed_on=OBSERVED_ON)
        assert bundle.figures.route_count == 3
        assert bundle.level_distribution == ()
