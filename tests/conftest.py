"""
Shared test fixtures for SeatPlace tests.

Provides reusable sections, venues and sessions for testing the geometry,
placement and editor API layers.
"""

import pytest

from seatplace.config import LayoutConfig, DEFAULT_CONFIG
from seatplace.geometry.dimensions import refresh_layout
from seatplace.api import EditorSession, EditorActions
from seatplace.venue.abstraction import (
    Section,
    RowLabelType,
    Venue,
    create_seated_section,
    create_ga_section,
)


def make_box_section(section_id: str, left: float, top: float,
                     width: float, height: float) -> Section:
    """A seatless section with a given top-left box (collision tests)."""
    return create_ga_section(section_id, left, top, width, height)


@pytest.fixture
def config() -> LayoutConfig:
    return DEFAULT_CONFIG


@pytest.fixture
def seated_section() -> Section:
    """A 3 row x 5 seat section laid out at (100, 100)."""
    section = create_seated_section("A", 100.0, 100.0, rows=3, seats_per_row=5)
    refresh_layout(section)
    return section


@pytest.fixture
def wide_section() -> Section:
    """A single 20-seat row, wide enough for curve limits to matter."""
    section = create_seated_section("W", 0.0, 0.0, rows=1, seats_per_row=20)
    refresh_layout(section)
    return section


@pytest.fixture
def labelled_section() -> Section:
    """A 4x4 section with numbered labels on both sides."""
    section = create_seated_section(
        "L", 0.0, 0.0, rows=4, seats_per_row=4,
        row_label_type=RowLabelType.NUMBERS,
        show_left_labels=True,
        show_right_labels=True,
    )
    refresh_layout(section)
    return section


@pytest.fixture
def row_venue() -> Venue:
    """Three boxes at x = 0, 50, 120 with widths 40, 30, 20, stacked apart on Y."""
    venue = Venue(name="row")
    venue.add_section(make_box_section("A", 0.0, 0.0, 40.0, 40.0))
    venue.add_section(make_box_section("B", 50.0, 100.0, 30.0, 30.0))
    venue.add_section(make_box_section("C", 120.0, 200.0, 20.0, 20.0))
    return venue


@pytest.fixture
def session(row_venue) -> EditorSession:
    return EditorSession(row_venue)


@pytest.fixture
def actions(session) -> EditorActions:
    return EditorActions(session)
