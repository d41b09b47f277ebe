"""Tests for stretch, curve, rotation and row alignment."""

import math

import pytest

from seatplace.config import LayoutConfig
from seatplace.geometry.dimensions import refresh_layout
from seatplace.geometry.grid_transform import SectionTransformer, measure_grid
from seatplace.venue.abstraction import (
    RowAlignment,
    create_ga_section,
    create_seated_section,
)


def row_xs(section, row_index):
    return [s.relative_x for s in section.rows()[row_index]]


def positions(section):
    return [v for s in section.seats for v in (s.relative_x, s.relative_y)]


def world_positions(section):
    return [v for s in section.seats for v in (s.x, s.y)]


@pytest.fixture
def transformer():
    return SectionTransformer()


class TestMeasureGrid:
    """Tests for base grid measurement."""

    def test_regular_grid(self, seated_section):
        metrics = measure_grid(seated_section)

        assert metrics.spacing_x == pytest.approx(24)
        assert metrics.spacing_y == pytest.approx(24)
        assert metrics.min_x == pytest.approx(20)
        assert metrics.max_x == pytest.approx(116)
        assert metrics.column_span == pytest.approx(4)

    def test_single_row_falls_back_to_default(self, wide_section):
        metrics = measure_grid(wide_section)
        assert metrics.spacing_y == pytest.approx(20)

    def test_ga_section_has_no_grid(self):
        assert measure_grid(create_ga_section("G", 0, 0, 100, 100)) is None


class TestStretch:
    """Tests for the stretch layer."""

    def test_horizontal_stretch_widens_columns(self, transformer, seated_section):
        transformer.set_stretch(seated_section, horizontal=10)

        xs = row_xs(seated_section, 0)
        gaps = [b - a for a, b in zip(xs, xs[1:])]
        assert gaps == pytest.approx([34] * 4)
        assert xs[0] == pytest.approx(20)

    def test_vertical_stretch_widens_rows(self, transformer, seated_section):
        transformer.set_stretch(seated_section, vertical=6)

        ys = [seated_section.rows()[r][0].relative_y for r in range(3)]
        assert ys == pytest.approx([20, 50, 80])

    def test_stretch_grows_section(self, transformer, seated_section):
        width = seated_section.content_width
        transformer.set_stretch(seated_section, horizontal=10)
        assert seated_section.content_width == pytest.approx(width + 40)

    @pytest.mark.parametrize("amount", [-1, -2, -5, -24, -1000])
    def test_spacing_never_below_minimum(self, transformer, seated_section, amount):
        transformer.set_stretch(seated_section, horizontal=amount, vertical=amount)
        min_spacing = LayoutConfig().min_spacing

        xs = row_xs(seated_section, 0)
        assert min(b - a for a, b in zip(xs, xs[1:])) >= min_spacing - 1e-9

        ys = [seated_section.rows()[r][0].relative_y for r in range(3)]
        assert min(b - a for a, b in zip(ys, ys[1:])) >= min_spacing - 1e-9

    def test_stretch_is_idempotent(self, transformer, seated_section):
        seated_section.stretch_h = 8
        transformer.apply_stretch(seated_section)
        first = positions(seated_section)

        transformer.apply_stretch(seated_section)
        assert positions(seated_section) == pytest.approx(first)

    def test_reset_returns_to_base(self, transformer, seated_section):
        base = positions(seated_section)
        transformer.set_stretch(seated_section, horizontal=12, vertical=4)
        transformer.set_stretch(seated_section, horizontal=0, vertical=0)

        assert positions(seated_section) == pytest.approx(base)

    def test_non_finite_stretch_is_ignored(self, transformer, seated_section):
        transformer.set_stretch(seated_section, horizontal=float("nan"))
        assert seated_section.stretch_h == 0


class TestCurve:
    """Tests for the curve layer."""

    def test_max_curve_for_wide_row(self, transformer, wide_section):
        """19 gaps of 24 give a 456 wide row: 2000 * 1.65 / 228 * 0.95."""
        assert transformer.calculate_max_curve(wide_section) == pytest.approx(13.75)

    def test_max_curve_capped_at_slider_limit(self, transformer):
        section = create_seated_section("N", 0, 0, rows=2, seats_per_row=2)
        refresh_layout(section)
        assert transformer.calculate_max_curve(section) == pytest.approx(100)

    def test_set_curve_clamps_to_max(self, transformer, wide_section):
        transformer.set_curve(wide_section, 100)
        assert wide_section.curve == pytest.approx(13.75)

    def test_negative_curve_clamps_to_zero(self, transformer, seated_section):
        base = positions(seated_section)
        transformer.set_curve(seated_section, -10)

        assert seated_section.curve == 0
        assert positions(seated_section) == pytest.approx(base)

    def test_curve_is_symmetric(self, transformer, seated_section):
        transformer.set_curve(seated_section, 20)
        row = seated_section.rows()[0]

        center_seat = row[2]
        assert center_seat.relative_x == pytest.approx(68)
        assert center_seat.relative_y == pytest.approx(20)

        assert row[0].relative_x + row[4].relative_x == pytest.approx(2 * 68)
        assert row[0].relative_y == pytest.approx(row[4].relative_y)
        assert row[0].relative_y < center_seat.relative_y

    def test_curve_keeps_arc_spacing(self, transformer, seated_section):
        """Seats of the first row sit on radius R at equal arc steps."""
        transformer.set_curve(seated_section, 20)
        radius = 2000 / 20
        cx, cy = 68, 20 - radius

        for seat in seated_section.rows()[0]:
            assert math.hypot(seat.relative_x - cx, seat.relative_y - cy) == pytest.approx(radius)

    def test_curve_is_idempotent(self, transformer, seated_section):
        transformer.set_curve(seated_section, 25)
        first = positions(seated_section)

        transformer.apply_curve(seated_section)
        transformer.apply_curve(seated_section)
        assert positions(seated_section) == pytest.approx(first)

    def test_arc_never_exceeds_max_angle(self, transformer, wide_section):
        transformer.set_curve(wide_section, 100)
        radius = 2000 / wide_section.curve
        metrics = measure_grid(wide_section)
        cx = (metrics.min_x + metrics.max_x) / 2
        cy = metrics.min_y - radius

        row = wide_section.rows()[0]
        first = math.atan2(row[0].relative_x - cx, row[0].relative_y - cy)
        last = math.atan2(row[-1].relative_x - cx, row[-1].relative_y - cy)
        assert abs(last - first) <= LayoutConfig().max_arc_angle

    def test_curve_includes_stretch(self, transformer, seated_section):
        transformer.set_stretch(seated_section, horizontal=10)
        transformer.set_curve(seated_section, 20)
        radius = 2000 / 20
        row = seated_section.rows()[0]

        theta = math.atan2(row[1].relative_x - 68, row[1].relative_y - (20 - radius))
        assert theta * radius == pytest.approx(-34)

    def test_curve_then_reset(self, transformer, seated_section):
        base = positions(seated_section)
        transformer.set_curve(seated_section, 30)
        transformer.set_curve(seated_section, 0)
        assert positions(seated_section) == pytest.approx(base)


class TestRotation:
    """Tests for rotation around the pivot."""

    def test_rotation_keeps_relative_positions(self, transformer, seated_section):
        base = positions(seated_section)
        transformer.set_rotation(seated_section, 45)

        assert positions(seated_section) == pytest.approx(base)
        assert seated_section.rotation_degrees == 45

    def test_quarter_turn(self, transformer, seated_section):
        seat = seated_section.seats[0]
        local_x = seat.x - seated_section.x
        local_y = seat.y - seated_section.y

        transformer.set_rotation(seated_section, 90)

        assert seat.x - seated_section.x == pytest.approx(-local_y)
        assert seat.y - seated_section.y == pytest.approx(local_x)
        assert seat.rotation == pytest.approx(math.pi / 2)

    def test_rotation_is_clamped(self, transformer, seated_section):
        transformer.set_rotation(seated_section, 270)
        assert seated_section.rotation_degrees == 180

        transformer.set_rotation(seated_section, -400)
        assert seated_section.rotation_degrees == -180

    def test_non_finite_rotation_is_ignored(self, transformer, seated_section):
        transformer.set_rotation(seated_section, 30)
        transformer.set_rotation(seated_section, float("inf"))
        assert seated_section.rotation_degrees == 30

    def test_rotation_does_not_change_box(self, transformer, seated_section):
        box = seated_section.bounding_box()
        transformer.set_rotation(seated_section, 60)
        assert seated_section.bounding_box() == pytest.approx(box)

    def test_rotation_and_curve_in_either_order(self, transformer):
        first = create_seated_section("P", 0, 0, rows=3, seats_per_row=8)
        second = create_seated_section("Q", 0, 0, rows=3, seats_per_row=8)
        refresh_layout(first)
        refresh_layout(second)

        transformer.set_rotation(first, 37)
        transformer.set_curve(first, 30)
        transformer.set_curve(second, 30)
        transformer.set_rotation(second, 37)

        assert first.curve == second.curve
        assert world_positions(first) == pytest.approx(world_positions(second))

        settled = world_positions(first)
        transformer.set_curve(first, 30)
        assert world_positions(first) == pytest.approx(settled)
        assert positions(first) == pytest.approx(positions(second))


@pytest.fixture
def ragged_section():
    """Three rows of 5, 3 and 5 seats, left-aligned."""
    section = create_seated_section("R", 0, 0, rows=3, seats_per_row=5)
    section.seats = [s for s in section.seats if not (s.row_index == 1 and s.col_index >= 3)]
    refresh_layout(section)
    return section


class TestAlignRows:
    """Tests for row alignment."""

    def test_align_left(self, transformer, ragged_section):
        transformer.align_rows(ragged_section, RowAlignment.LEFT)
        assert row_xs(ragged_section, 1) == pytest.approx([20, 44, 68])
        assert ragged_section.row_alignment == RowAlignment.LEFT

    def test_align_center(self, transformer, ragged_section):
        transformer.align_rows(ragged_section, RowAlignment.CENTER)
        assert row_xs(ragged_section, 1) == pytest.approx([44, 68, 92])
        assert row_xs(ragged_section, 0) == pytest.approx([20, 44, 68, 92, 116])

    def test_align_right(self, transformer, ragged_section):
        transformer.align_rows(ragged_section, RowAlignment.RIGHT)
        assert row_xs(ragged_section, 1) == pytest.approx([68, 92, 116])

    def test_alignment_redefines_base(self, transformer, ragged_section):
        transformer.align_rows(ragged_section, RowAlignment.RIGHT)
        bases = [s.base_relative_x for s in ragged_section.rows()[1]]
        assert bases == pytest.approx([68, 92, 116])

    def test_alignment_reapplies_stretch(self, transformer, ragged_section):
        transformer.set_stretch(ragged_section, horizontal=10)
        transformer.align_rows(ragged_section, RowAlignment.RIGHT)

        assert row_xs(ragged_section, 0)[-1] == pytest.approx(116 + 40)
        assert row_xs(ragged_section, 1)[-1] == pytest.approx(116 + 40)

    def test_ga_section_is_ignored(self, transformer):
        section = create_ga_section("G", 0, 0, 100, 100)
        transformer.align_rows(section, RowAlignment.LEFT)
        assert section.row_alignment == RowAlignment.CENTER


class TestRebuildBasePositions:
    """Tests for base position repair."""

    def test_rebuild_restores_grid(self, transformer, seated_section):
        for seat in seated_section.seats[1:]:
            seat.base_relative_x += 7.5
            seat.base_relative_y -= 3.0

        transformer.rebuild_base_positions(seated_section)

        for seat in seated_section.seats:
            assert seat.base_relative_x == pytest.approx(20 + seat.col_index * 24)
            assert seat.base_relative_y == pytest.approx(20 + seat.row_index * 24)
