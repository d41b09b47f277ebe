"""
Section dimension aggregation and world positioning.

After any change to seat relative positions, a section's logical size is
recomputed from the union of seat circles and row label boxes, padded by
edge_padding, and the pivot moves to the new centre. Seats and labels are
then placed in world space by rotating their local offsets around the pivot.
"""

import logging
import math
from typing import Optional

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..venue.abstraction import Section, RowLabel, RowLabelType
from .bbox import Box, union

logger = logging.getLogger(__name__)


def row_label_text(index: int, label_type: RowLabelType, start=None) -> str:
    """
    Text for the row label at a zero-based index.

    Numbers count up from start (default 1). Letters run A..Z, then AA, AB,
    ... beginning at the start letter (default "A").
    """
    if label_type == RowLabelType.NUMBERS:
        first = start if isinstance(start, int) else 1
        return str(index + first)

    if label_type == RowLabelType.LETTERS:
        first = str(start).upper() if isinstance(start, str) and start else "A"
        label_index = index + (ord(first[0]) - ord("A"))
        label = ""
        while label_index >= 0:
            label = chr(ord("A") + label_index % 26) + label
            label_index = label_index // 26 - 1
        return label

    return ""


def update_row_labels(section: Section, config: LayoutConfig = DEFAULT_CONFIG):
    """
    Regenerate the row labels of a section from its label settings.

    Labels are placed beside the outermost seats of each row using the
    current (transformed) seat positions.
    """
    section.row_labels = []
    if not section.has_seat_grid:
        return
    if section.row_label_type == RowLabelType.NONE:
        return
    if not section.show_left_labels and not section.show_right_labels:
        return

    rows = section.rows()
    total_rows = len(rows)
    offset = config.seat_radius + section.row_label_spacing

    for array_index, (row_index, row_seats) in enumerate(rows.items()):
        label_index = total_rows - 1 - array_index if section.row_label_reversed else array_index
        text = row_label_text(label_index, section.row_label_type, section.row_label_start)

        ordered = sorted(row_seats, key=lambda s: s.relative_x)
        leftmost, rightmost = ordered[0], ordered[-1]

        if section.show_left_labels:
            section.row_labels.append(RowLabel(
                row_index=row_index,
                text=text,
                side="left",
                relative_x=leftmost.relative_x - offset,
                relative_y=leftmost.relative_y,
                width=config.label_size,
                height=config.label_size,
                hidden=section.labels_hidden,
            ))

        if section.show_right_labels:
            section.row_labels.append(RowLabel(
                row_index=row_index,
                text=text,
                side="right",
                relative_x=rightmost.relative_x + offset,
                relative_y=rightmost.relative_y,
                width=config.label_size,
                height=config.label_size,
                hidden=section.labels_hidden,
            ))


def update_seat_numbers(section: Section):
    """
    Renumber the seats of every row from section.seat_number_start.

    Reversed numbering counts from the last column. Seats flagged
    manual_number keep their number but still take up a position in the
    count.
    """
    if not section.has_seat_grid:
        return

    start = section.seat_number_start or 1
    for row_seats in section.rows().values():
        ordered = list(reversed(row_seats)) if section.seat_number_reversed else row_seats
        for index, seat in enumerate(ordered):
            if seat.manual_number:
                continue
            seat.seat_number = start + index


def content_extents(section: Section, config: LayoutConfig = DEFAULT_CONFIG) -> Optional[Box]:
    """
    Unpadded local-frame extents of seats and visible labels.

    Returns:
        (min_x, min_y, max_x, max_y), or None for sections without seats
    """
    if not section.has_seat_grid:
        return None

    r = config.seat_radius
    extents = None
    for seat in section.seats:
        extents = union(extents, (seat.relative_x - r, seat.relative_y - r,
                                  seat.relative_x + r, seat.relative_y + r))

    for label in section.row_labels:
        if label.hidden:
            continue
        half_w = (label.width or config.label_size) / 2
        half_h = (label.height or config.label_size) / 2
        extents = union(extents, (label.relative_x - half_w, label.relative_y - half_h,
                                  label.relative_x + half_w, label.relative_y + half_h))

    return extents


def recalculate_section_dimensions(section: Section, config: LayoutConfig = DEFAULT_CONFIG):
    """
    Recompute content size, layout shift and pivot from seats and labels.

    The layout shift moves the content so its padded box starts at the local
    origin. GA sections and zones keep their drawn size.
    """
    extents = content_extents(section, config)
    if extents is None:
        return

    min_x, min_y, max_x, max_y = extents
    padding = config.edge_padding

    section.layout_shift_x = padding - min_x
    section.layout_shift_y = padding - min_y
    section.content_width = (max_x - min_x) + padding * 2
    section.content_height = (max_y - min_y) + padding * 2
    section.pivot_x = section.content_width / 2
    section.pivot_y = section.content_height / 2


def position_seats_and_labels(section: Section):
    """
    Place seats and labels in world space.

    Each local offset from the pivot is rotated by rotation_degrees and added
    to the section position. relative_x/relative_y are never modified.
    """
    if not section.has_seat_grid:
        return

    angle = math.radians(section.rotation_degrees)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    shift_x = section.layout_shift_x - section.pivot_x
    shift_y = section.layout_shift_y - section.pivot_y

    for seat in section.seats:
        local_x = seat.relative_x + shift_x
        local_y = seat.relative_y + shift_y
        seat.x = section.x + local_x * cos_a - local_y * sin_a
        seat.y = section.y + local_x * sin_a + local_y * cos_a
        seat.rotation = angle

    for label in section.row_labels:
        local_x = label.relative_x + shift_x
        local_y = label.relative_y + shift_y
        label.x = section.x + local_x * cos_a - local_y * sin_a
        label.y = section.y + local_x * sin_a + local_y * cos_a
        label.angle = section.rotation_degrees


def refresh_layout(section: Section, config: LayoutConfig = DEFAULT_CONFIG):
    """Rebuild labels, then dimensions, then world positions."""
    update_row_labels(section, config)
    recalculate_section_dimensions(section, config)
    position_seats_and_labels(section)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Layout %s: size=(%.1f, %.1f) shift=(%.1f, %.1f) labels=%d",
            section.section_id,
            section.content_width,
            section.content_height,
            section.layout_shift_x,
            section.layout_shift_y,
            len(section.row_labels),
        )
