"""Tests for the sliding drag constraint solver."""

import random

import pytest

from seatplace.geometry.bbox import test_overlap as boxes_overlap, translate
from seatplace.geometry.dimensions import refresh_layout
from seatplace.placement.drag import DragSession, compute_permitted_drag
from seatplace.venue.abstraction import Venue, create_ga_section, create_seated_section


def box(section_id, left, top, width, height):
    return create_ga_section(section_id, left, top, width, height)


class TestComputePermittedDrag:
    """Tests for per-axis clamping."""

    def test_zero_movement(self):
        moving = box("M", 0, 0, 40, 40)
        assert compute_permitted_drag([moving], 0, 0, []) == (0.0, 0.0)

    def test_free_movement(self):
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 500, 500, 40, 40)
        assert compute_permitted_drag([moving], 25, -15, [other]) == (25, -15)

    def test_blocked_on_x_stops_flush(self):
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 60, 0, 40, 40)
        assert compute_permitted_drag([moving], 50, 0, [other]) == (20, 0)

    def test_blocked_moving_left(self):
        moving = box("M", 100, 0, 40, 40)
        other = box("O", 0, 0, 60, 40)
        assert compute_permitted_drag([moving], -70, 0, [other]) == (-40, 0)

    def test_slides_along_obstacle(self):
        """X is blocked but Y is free, so the section slides."""
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 60, 0, 40, 40)
        assert compute_permitted_drag([moving], 50, 30, [other]) == (20, 30)

    def test_already_flush_slides(self):
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 40, 0, 40, 40)
        assert compute_permitted_drag([moving], 10, 15, [other]) == (0, 15)

    def test_corner_approach_is_clamped(self):
        """Diagonal moves cannot enter a box through its corner."""
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 50, 50, 40, 40)

        dx, dy = compute_permitted_drag([moving], 20, 20, [other])

        assert (dx, dy) == (20, 10)
        assert not boxes_overlap(translate(moving.bounding_box(), dx, dy), other.bounding_box())

    def test_large_step_does_not_jump_over_section(self):
        moving = box("M", 0, 0, 40, 40)
        thin = box("T", 60, 0, 5, 40)
        assert compute_permitted_drag([moving], 200, 0, [thin]) == (20, 0)

    def test_padding_keeps_clearance(self):
        moving = box("M", 0, 0, 40, 40)
        other = box("O", 60, 0, 40, 40)
        assert compute_permitted_drag([moving], 50, 0, [other], padding=5) == (15, 0)

    def test_group_uses_tightest_clamp(self):
        first = box("M1", 0, 0, 40, 40)
        second = box("M2", 0, 100, 40, 40)
        near = box("O1", 70, 0, 40, 40)
        nearer = box("O2", 50, 100, 40, 40)

        assert compute_permitted_drag([first, second], 50, 0, [near, nearer]) == (10, 0)

    def test_random_drags_never_overlap(self):
        """Starting from a clean layout, a permitted drag never creates overlap."""
        rng = random.Random(7)

        for _ in range(200):
            statics = []
            while len(statics) < 5:
                candidate = box(f"S{len(statics)}", rng.randint(-200, 200), rng.randint(-200, 200),
                                rng.randint(10, 80), rng.randint(10, 80))
                if not any(boxes_overlap(candidate.bounding_box(), s.bounding_box()) for s in statics):
                    statics.append(candidate)

            while True:
                moving = box("M", rng.randint(-200, 200), rng.randint(-200, 200),
                             rng.randint(10, 80), rng.randint(10, 80))
                if not any(boxes_overlap(moving.bounding_box(), s.bounding_box()) for s in statics):
                    break

            dx, dy = compute_permitted_drag([moving], rng.randint(-150, 150),
                                            rng.randint(-150, 150), statics)
            moved = translate(moving.bounding_box(), dx, dy)
            for other in statics:
                assert not boxes_overlap(moved, other.bounding_box())


@pytest.fixture
def drag_venue():
    venue = Venue(name="drag")
    venue.add_section(box("A", 0, 0, 40, 40))
    venue.add_section(box("B", 60, 0, 40, 40))
    return venue


class TestDragSession:
    """Tests for the pointer drag lifecycle."""

    def test_update_follows_pointer(self, drag_venue):
        a = drag_venue.get_section("A")
        session = DragSession(drag_venue)
        session.begin([a], 10, 10)

        assert session.update(10, 30) == (0, 20)
        assert a.top == pytest.approx(20)

    def test_update_clamps_and_slides(self, drag_venue):
        a = drag_venue.get_section("A")
        session = DragSession(drag_venue)
        session.begin([a], 0, 0)

        session.update(50, 0)
        assert a.left == pytest.approx(20)

        session.update(50, 30)
        assert a.left == pytest.approx(20)
        assert a.top == pytest.approx(30)

    def test_pointer_delta_is_measured_from_start(self, drag_venue):
        a = drag_venue.get_section("A")
        session = DragSession(drag_venue)
        session.begin([a], 0, 0)

        session.update(0, -30)
        session.update(0, -50)

        assert a.top == pytest.approx(-50)

    def test_end_resolves_and_resets(self, drag_venue):
        a = drag_venue.get_section("A")
        session = DragSession(drag_venue)
        session.begin([a], 0, 0)
        session.update(50, 0)

        result = session.end()

        assert result.converged
        assert result.pushes_applied == 0
        assert not session.active

    def test_end_without_drag(self, drag_venue):
        result = DragSession(drag_venue).end()
        assert result.converged
        assert result.iterations_used == 0

    def test_cancel_restores_positions(self, drag_venue):
        a = drag_venue.get_section("A")
        session = DragSession(drag_venue)
        session.begin([a], 0, 0)
        session.update(0, 80)

        session.cancel()

        assert a.left == pytest.approx(0)
        assert a.top == pytest.approx(0)
        assert not session.active

    def test_seats_move_with_section(self):
        venue = Venue()
        section = create_seated_section("S", 0, 0, rows=2, seats_per_row=3)
        refresh_layout(section)
        venue.add_section(section)
        seat = section.seats[0]
        start_x = seat.x

        session = DragSession(venue)
        session.begin([section], 0, 0)
        session.update(35, 0)

        assert seat.x == pytest.approx(start_x + 35)
