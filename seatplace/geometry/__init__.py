"""Bounding boxes, seat grid transforms and section dimensions."""

from .bbox import Box, test_overlap, overlap_extents, inflate, translate
from .dimensions import (
    row_label_text,
    update_row_labels,
    update_seat_numbers,
    recalculate_section_dimensions,
    position_seats_and_labels,
    refresh_layout,
)
from .grid_transform import SectionTransformer, GridMetrics, measure_grid

__all__ = [
    "Box",
    "test_overlap",
    "overlap_extents",
    "inflate",
    "translate",
    "row_label_text",
    "update_row_labels",
    "update_seat_numbers",
    "recalculate_section_dimensions",
    "position_seats_and_labels",
    "refresh_layout",
    "SectionTransformer",
    "GridMetrics",
    "measure_grid",
]
