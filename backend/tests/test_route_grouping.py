"""
Tests for the route grouping engine.

Covers every grouping variant, direction symmetry, stable ties and the
fallback for unknown keys.
"""
from datetime import date

import pytest

from gym_catalog.schemas.catalog import SectorSnapshot
from gym_catalog.services.route_grouping import (
    Direction,
    GroupBy,
    OrderBy,
    group_routes,
    order_routes,
)
from factories import (
    COLOR_CIRCUIT,
    COLOR_LINES,
    KIDS_CIRCUIT,
    KIDS_LINES,
    SECTOR_A,
    SECTOR_B,
    SECTOR_C,
    make_level_route,
    make_route,
)

YELLOW, GREEN, BLUE = COLOR_LINES
KIDS_YELLOW, KIDS_GREEN = KIDS_LINES


def ids(routes):
    return [route.id for route in routes]


@pytest.fixture
def graded_routes():
    return [
        make_route(1, opened_at=date(2024, 1, 3), max_grade_value=21, sector=SECTOR_A, calculated_point=5),
        make_route(2, opened_at=date(2024, 1, 1), max_grade_value=15, sector=SECTOR_B),
        make_route(3, opened_at=date(2024, 1, 3), max_grade_value=15, sector=SECTOR_C, calculated_point=12.5),
        make_route(4, opened_at=date(2024, 1, 2), max_grade_value=30, sector=SECTOR_A, calculated_point=1),
    ]


class TestKeyParsing:
    """Tests for request key parsing"""

    def test_known_group_by(self):
        assert GroupBy.parse("grade") is GroupBy.GRADE
        assert GroupBy.parse("Opened_At") is GroupBy.OPENED_AT

    def test_unknown_group_by_falls_back_to_none(self):
        assert GroupBy.parse("popularity") is GroupBy.NONE
        assert GroupBy.parse(None) is GroupBy.NONE

    def test_unknown_order_by_falls_back_to_none(self):
        assert OrderBy.parse("relevance") is OrderBy.NONE

    def test_direction_defaults_to_ascending(self):
        assert Direction.parse(None) is Direction.ASC
        assert Direction.parse("asc") is Direction.ASC
        assert Direction.parse("desc") is Direction.DESC
        # Anything but "asc" sorts descending
        assert Direction.parse("down") is Direction.DESC


class TestFlatOrdering:
    """Tests for group_by=none with a secondary order"""

    def test_no_order_keeps_retrieval_order(self, graded_routes):
        result = group_routes(graded_routes)
        assert result.is_flat
        assert ids(result.routes) == [1, 2, 3, 4]

    def test_no_order_ignores_direction(self, graded_routes):
        result = group_routes(graded_routes, direction="desc")
        assert ids(result.routes) == [1, 2, 3, 4]

    def test_order_by_opened_at_is_stable(self, graded_routes):
        result = group_routes(graded_routes, order_by="opened_at")
        # Routes 1 and 3 share 2024-01-03 and keep retrieval order
        assert ids(result.routes) == [2, 4, 1, 3]

    def test_order_by_opened_at_desc_keeps_ties_stable(self, graded_routes):
        result = group_routes(graded_routes, order_by="opened_at", direction="desc")
        assert ids(result.routes) == [1, 3, 4, 2]

    def test_order_by_grade(self, graded_routes):
        result = group_routes(graded_routes, order_by="grade", direction="desc")
        assert ids(result.routes) == [4, 1, 2, 3]

    def test_order_by_level_puts_unleveled_routes_first(self):
        routes = [
            make_level_route(1, BLUE),
            make_route(2),
            make_level_route(3, YELLOW),
        ]
        assert ids(order_routes(routes, "level", "asc")) == [2, 3, 1]

    def test_unknown_group_by_degrades_to_flat(self, graded_routes):
        result = group_routes(graded_routes, group_by="popularity", order_by="grade")
        assert result.is_flat
        assert result.group_by == "none"
        assert ids(result.routes) == [2, 3, 1, 4]


class TestGroupByPoint:
    """Tests for the point sort"""

    def test_missing_point_sorts_as_zero(self, graded_routes):
        result = group_routes(graded_routes, group_by="point")
        assert result.is_flat
        assert ids(result.routes) == [2, 4, 1, 3]

    def test_descending(self, graded_routes):
        result = group_routes(graded_routes, group_by="point", direction="desc")
        assert ids(result.routes) == [3, 1, 4, 2]


class TestGroupBySector:
    """Tests for sector buckets"""

    def test_buckets_follow_sector_order(self, graded_routes):
        result = group_routes(graded_routes, group_by="sector")
        assert [bucket.sector.id for bucket in result.buckets] == [2, 1, 3]
        assert ids(result.buckets[1].routes) == [1, 4]

    def test_descending_reverses_buckets(self, graded_routes):
        result = group_routes(graded_routes, group_by="sector", direction="desc")
        assert [bucket.sector.id for bucket in result.buckets] == [3, 1, 2]

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_unordered_sectors_come_last(self, direction):
        loose = SectorSnapshot(id=9, name="Bloc libre", order=None, gym_space_id=10)
        routes = [
            make_route(1, sector=loose),
            make_route(2, sector=SECTOR_A),
            make_route(3, sector=SECTOR_B),
        ]
        result = group_routes(routes, group_by="sector", direction=direction)

        sector_ids = [bucket.sector.id for bucket in result.buckets]
        assert sector_ids[-1] == 9
        assert sector_ids[:2] == ([2, 1] if direction == "asc" else [1, 2])

    def test_sectors_without_routes_are_absent(self):
        result = group_routes([make_route(1, sector=SECTOR_C)], group_by="sector")
        assert [bucket.key for bucket in result.buckets] == ["3"]


class TestGroupByOpenedAt:
    """Tests for opening-day buckets"""

    def test_buckets_keyed_by_iso_day(self, graded_routes):
        result = group_routes(graded_routes, group_by="opened_at")
        assert [bucket.key for bucket in result.buckets] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert ids(result.buckets[2].routes) == [1, 3]

    def test_descending(self, graded_routes):
        result = group_routes(graded_routes, group_by="opened_at", direction="desc")
        assert [bucket.key for bucket in result.buckets] == ["2024-01-03", "2024-01-02", "2024-01-01"]


class TestGroupByGrade:
    """Tests for numeric grade buckets"""

    def test_one_bucket_per_grade_value(self, graded_routes):
        result = group_routes(graded_routes, group_by="grade")
        assert [bucket.grade_value for bucket in result.buckets] == [15, 21, 30]
        assert ids(result.buckets[0].routes) == [2, 3]

    def test_level_routes_are_excluded(self, graded_routes):
        routes = graded_routes + [make_level_route(9, GREEN, max_grade_value=15)]
        result = group_routes(routes, group_by="grade")
        grouped_ids = [route.id for bucket in result.buckets for route in bucket.routes]
        assert 9 not in grouped_ids
        keys = [bucket.key for bucket in result.buckets]
        assert len(keys) == len(set(keys))

    def test_routes_without_grade_scheme_are_excluded(self):
        result = group_routes([make_route(1, grade=None, max_grade_value=15)], group_by="grade")
        assert result.buckets == ()


class TestGroupByLevel:
    """Tests for level buckets"""

    def test_every_line_is_listed_in_rank_order(self):
        routes = [make_level_route(1, BLUE), make_level_route(2, BLUE)]
        result = group_routes(routes, group_by="level")
        assert [bucket.level.name for bucket in result.buckets] == ["Yellow", "Green", "Blue"]
        assert [len(bucket.routes) for bucket in result.buckets] == [0, 0, 2]

    def test_same_line_name_under_two_grades_does_not_collide(self):
        routes = [
            make_level_route(1, YELLOW),
            make_level_route(2, KIDS_YELLOW, grade=KIDS_CIRCUIT),
        ]
        result = group_routes(routes, group_by="level")
        keys = [bucket.key for bucket in result.buckets]
        assert keys == ["200-1", "200-2", "200-3", "300-1", "300-2"]
        yellow = {bucket.key: ids(bucket.routes) for bucket in result.buckets}
        assert yellow["200-1"] == [1]
        assert yellow["300-1"] == [2]

    def test_lines_of_one_grade_stay_together(self):
        routes = [
            make_level_route(1, KIDS_GREEN, grade=KIDS_CIRCUIT),
            make_level_route(2, BLUE),
        ]
        asc = group_routes(routes, group_by="level")
        desc = group_routes(routes, group_by="level", direction="desc")

        assert [bucket.level.grade_id for bucket in asc.buckets] == [200, 200, 200, 300, 300]
        assert [bucket.level.name for bucket in asc.buckets] == ["Yellow", "Green", "Blue", "Yellow", "Green"]
        assert [bucket.key for bucket in desc.buckets] == ["300-2", "300-1", "200-3", "200-2", "200-1"]

    def test_routes_without_line_are_excluded(self):
        routes = [make_route(1, grade=COLOR_CIRCUIT), make_level_route(2, GREEN)]
        result = group_routes(routes, group_by="level")
        grouped_ids = [route.id for bucket in result.buckets for route in bucket.routes]
        assert grouped_ids == [2]

    def test_bucket_carries_display_data(self):
        result = group_routes([make_level_route(1, GREEN)], group_by="level")
        green = result.buckets[1].level
        assert green.colors == ("#00ff00",)
        assert green.hold_color is True
        assert green.grade_name == "Circuits"


class TestDirectionSymmetry:
    """Reversing direction reverses bucket order exactly"""

    @pytest.mark.parametrize("group_by", ["sector", "opened_at", "grade", "level"])
    def test_bucket_order_reverses(self, graded_routes, group_by):
        routes = graded_routes + [make_level_route(7, YELLOW), make_level_route(8, BLUE)]
        asc = group_routes(routes, group_by=group_by, direction="asc")
        desc = group_routes(routes, group_by=group_by, direction="desc")
        assert [bucket.key for bucket in desc.buckets] == [bucket.key for bucket in reversed(asc.buckets)]

    def test_flat_order_reverses_for_distinct_keys(self):
        routes = [make_route(i, max_grade_value=value) for i, value in enumerate([20, 10, 30], start=1)]
        asc = group_routes(routes, order_by="grade", direction="asc")
        desc = group_routes(routes, order_by="grade", direction="desc")
        assert ids(desc.routes) == list(reversed(ids(asc.routes)))
