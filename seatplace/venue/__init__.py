"""Venue abstraction layer: sections, seats, row labels and the venue."""

from .abstraction import (
    Section,
    SectionKind,
    Seat,
    RowLabel,
    RowAlignment,
    RowLabelType,
    Venue,
    calculate_seat_dimensions,
    create_seated_section,
    create_ga_section,
    create_zone,
)

__all__ = [
    # Core abstractions
    "Section",
    "SectionKind",
    "Seat",
    "RowLabel",
    "RowAlignment",
    "RowLabelType",
    "Venue",
    # Factories
    "calculate_seat_dimensions",
    "create_seated_section",
    "create_ga_section",
    "create_zone",
]
