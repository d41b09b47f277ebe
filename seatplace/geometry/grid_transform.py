"""
Grid Transform Engine

Converts each seat's canonical grid anchor (base_relative_x/y) into its
current relative position under the section's stretch and curve
parameters. Rotation is a separate, final rigid transform applied by
positioning, so the layers compose in any order of parameter changes.

Every transform recomputes from base positions, never from the previous
result, which keeps repeated applications free of drift:

    Base -> Stretch / Curve (optional) -> Rotated (optional)

Stretch:
    Each seat moves by its grid coordinate times the stretch amount, per
    axis. The effective stretch is clamped so neighbouring seats never get
    closer than min_spacing, measured against the section's own base
    spacing.

Curve:
    Curve c (0-100) gives curvature k = c / curve_divisor and radius R = 1/k.
    Row i lies on an arc of radius R + i * row_spacing; seats are placed at
    equal arc-length steps from the centre column and projected back to
    Cartesian coordinates.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..venue.abstraction import Section, Seat, RowAlignment
from .dimensions import refresh_layout, position_seats_and_labels

logger = logging.getLogger(__name__)

# Positions closer than this are the same grid line
GRID_EPSILON = 1e-6


@dataclass
class GridMetrics:
    """Measured base grid of a section."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    spacing_x: float  # base column spacing
    spacing_y: float  # base row spacing

    @property
    def column_span(self) -> float:
        """Width of the base grid in columns (n - 1 for a regular grid)."""
        return (self.max_x - self.min_x) / self.spacing_x

    def column_coordinate(self, seat: Seat) -> float:
        return (seat.base_relative_x - self.min_x) / self.spacing_x

    def row_coordinate(self, seat: Seat) -> float:
        return (seat.base_relative_y - self.min_y) / self.spacing_y


def _median(values: List[float]) -> float:
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def measure_grid(section: Section, config: LayoutConfig = DEFAULT_CONFIG) -> Optional[GridMetrics]:
    """
    Measure the base grid of a section.

    Column spacing is the median gap between neighbouring seats within rows;
    row spacing is the mean gap between distinct row lines. A single column
    or single row falls back to config.default_spacing.

    Returns:
        GridMetrics, or None for sections without seats
    """
    if not section.has_seat_grid:
        return None

    xs = [s.base_relative_x for s in section.seats]
    ys = [s.base_relative_y for s in section.seats]

    gaps = []
    for row_seats in section.rows().values():
        row_xs = sorted(s.base_relative_x for s in row_seats)
        for prev, curr in zip(row_xs, row_xs[1:]):
            if curr - prev > GRID_EPSILON:
                gaps.append(curr - prev)
    spacing_x = _median(gaps) if gaps else config.default_spacing

    row_lines: List[float] = []
    for y in sorted(ys):
        if not row_lines or y - row_lines[-1] > GRID_EPSILON:
            row_lines.append(y)
    if len(row_lines) > 1:
        spacing_y = (row_lines[-1] - row_lines[0]) / (len(row_lines) - 1)
    else:
        spacing_y = config.default_spacing

    return GridMetrics(
        min_x=min(xs),
        max_x=max(xs),
        min_y=min(ys),
        max_y=max(ys),
        spacing_x=spacing_x,
        spacing_y=spacing_y,
    )


class SectionTransformer:
    """
    Applies stretch, curve and rotation to sections.

    All public operations are policy clamps: extreme parameters are reduced
    to the nearest safe value instead of raising.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or DEFAULT_CONFIG

    # ------------------------------------------------------------------
    # Parameter clamps
    # ------------------------------------------------------------------

    def clamped_stretch(self, metrics: GridMetrics,
                        stretch_h: float, stretch_v: float) -> Tuple[float, float]:
        """Limit negative stretch so spacing stays at or above min_spacing."""
        min_spacing = self.config.min_spacing
        max_negative_h = -(metrics.spacing_x - min_spacing)
        max_negative_v = -(metrics.spacing_y - min_spacing)
        return (max(stretch_h, max_negative_h), max(stretch_v, max_negative_v))

    def calculate_max_curve(self, section: Section) -> float:
        """
        Maximum safe curve value for a section.

        Bounds the arc subtended by the innermost row to max_arc_angle so the
        two ends of a row cannot meet, with a safety margin.
        """
        metrics = measure_grid(section, self.config)
        if metrics is None:
            return self.config.max_curve

        stretch_h, _ = self.clamped_stretch(metrics, section.stretch_h or 0.0, 0.0)
        effective_spacing_x = metrics.spacing_x + stretch_h
        total_width = metrics.column_span * effective_spacing_x
        if total_width <= GRID_EPSILON:
            return self.config.max_curve

        min_radius = (total_width / 2) / (self.config.max_arc_angle / 2)
        max_k = 1 / min_radius
        max_curve = max_k * self.config.curve_divisor

        return min(self.config.max_curve, max_curve * self.config.curve_safety_factor)

    def effective_curve(self, section: Section) -> float:
        """Curve value actually applied: section.curve clamped to [0, max]."""
        curve = section.curve or 0.0
        if curve <= 0:
            return 0.0
        return min(curve, self.calculate_max_curve(section))

    # ------------------------------------------------------------------
    # Seat transforms (relative positions only)
    # ------------------------------------------------------------------

    def apply_stretch_transform(self, section: Section):
        """Set relative positions from base positions plus stretch."""
        metrics = measure_grid(section, self.config)
        if metrics is None:
            return

        stretch_h, stretch_v = self.clamped_stretch(
            metrics, section.stretch_h or 0.0, section.stretch_v or 0.0)

        for seat in section.seats:
            seat.relative_x = seat.base_relative_x + metrics.column_coordinate(seat) * stretch_h
            seat.relative_y = seat.base_relative_y + metrics.row_coordinate(seat) * stretch_v

    def apply_curve_transform(self, section: Section):
        """Set relative positions from base positions on concentric arcs."""
        metrics = measure_grid(section, self.config)
        if metrics is None:
            return

        curve = self.effective_curve(section)
        if curve == 0:
            self.apply_stretch_transform(section)
            return

        stretch_h, stretch_v = self.clamped_stretch(
            metrics, section.stretch_h or 0.0, section.stretch_v or 0.0)
        spacing_x = metrics.spacing_x + stretch_h
        spacing_y = metrics.spacing_y + stretch_v

        k = curve / self.config.curve_divisor
        radius = 1 / k
        center_col = metrics.column_span / 2
        center_x = (metrics.min_x + metrics.max_x) / 2
        center_y = metrics.min_y

        for seat in section.seats:
            r = radius + metrics.row_coordinate(seat) * spacing_y
            theta = (spacing_x / r) * (metrics.column_coordinate(seat) - center_col)
            seat.relative_x = center_x + r * math.sin(theta)
            seat.relative_y = center_y + r * math.cos(theta) - radius

    # ------------------------------------------------------------------
    # Section-level operations
    # ------------------------------------------------------------------

    def apply_transforms(self, section: Section, skip_layout: bool = False):
        """
        Recompute seat positions from base positions and refresh the layout.

        Args:
            section: The section to transform
            skip_layout: If True, only relative positions are updated; labels,
                         dimensions and world positions are left as they are.
        """
        if not section.has_seat_grid:
            return

        if self.effective_curve(section) != 0:
            self.apply_curve_transform(section)
        elif section.stretch_h or section.stretch_v:
            self.apply_stretch_transform(section)
        else:
            for seat in section.seats:
                seat.reset_to_base()

        if not skip_layout:
            refresh_layout(section, self.config)

    def apply_stretch(self, section: Section, skip_layout: bool = False):
        """Apply stretch (delegates to the curve layer when curved)."""
        self.apply_transforms(section, skip_layout=skip_layout)

    def apply_curve(self, section: Section, skip_layout: bool = False):
        """Apply curve, including stretch."""
        self.apply_transforms(section, skip_layout=skip_layout)

    def set_rotation(self, section: Section, degrees: float):
        """Rotate a section around its pivot, clamped to +/- rotation_limit."""
        if not math.isfinite(degrees):
            logger.debug("Ignoring non-finite rotation for %s", section.section_id)
            return
        limit = self.config.rotation_limit
        section.rotation_degrees = max(-limit, min(limit, degrees))
        position_seats_and_labels(section)

    def set_stretch(self, section: Section, horizontal: Optional[float] = None,
                    vertical: Optional[float] = None):
        """Update stretch amounts and re-derive seat positions."""
        if horizontal is not None and math.isfinite(horizontal):
            section.stretch_h = horizontal
        if vertical is not None and math.isfinite(vertical):
            section.stretch_v = vertical
        self.apply_stretch(section)

    def set_curve(self, section: Section, amount: float):
        """Update the curve, clamped to [0, calculate_max_curve(section)]."""
        if not math.isfinite(amount):
            logger.debug("Ignoring non-finite curve for %s", section.section_id)
            return
        max_curve = self.calculate_max_curve(section)
        section.curve = max(0.0, min(amount, max_curve))
        if logger.isEnabledFor(logging.DEBUG) and section.curve != amount:
            logger.debug(
                "Curve for %s clamped: requested=%.2f applied=%.2f max=%.2f",
                section.section_id, amount, section.curve, max_curve,
            )
        self.apply_curve(section)

    def align_rows(self, section: Section, alignment: RowAlignment):
        """
        Re-anchor every row against the widest row.

        This redefines base_relative_x (the canonical grid), then re-applies
        the active stretch/curve. No-op for GA sections and zones.
        """
        if not section.has_seat_grid:
            return

        section.row_alignment = alignment
        rows = section.rows()

        reference_row: List[Seat] = []
        for row_seats in rows.values():
            if len(row_seats) > len(reference_row):
                reference_row = row_seats

        ordered_ref = sorted(reference_row, key=lambda s: s.base_relative_x)
        spacing_x = self.config.default_spacing
        if len(ordered_ref) > 1:
            spacing_x = _median([b.base_relative_x - a.base_relative_x
                                 for a, b in zip(ordered_ref, ordered_ref[1:])])

        max_row_width = (len(reference_row) - 1) * spacing_x
        center_x = (ordered_ref[0].base_relative_x + ordered_ref[-1].base_relative_x) / 2

        for row_seats in rows.values():
            ordered = sorted(row_seats, key=lambda s: s.base_relative_x)
            row_width = (len(ordered) - 1) * spacing_x

            if alignment == RowAlignment.LEFT:
                offset = -(max_row_width / 2)
            elif alignment == RowAlignment.RIGHT:
                offset = (max_row_width / 2) - row_width
            else:
                offset = -(row_width / 2)

            for index, seat in enumerate(ordered):
                seat.base_relative_x = center_x + offset + index * spacing_x
                seat.relative_x = seat.base_relative_x

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Aligned rows of %s: alignment=%s rows=%d spacing=%.2f",
                section.section_id, alignment.value, len(rows), spacing_x,
            )

        self.apply_transforms(section)

    def rebuild_base_positions(self, section: Section):
        """
        Rebuild base positions from the immutable row/column indices.

        Used to repair corrupted base positions: the first seat of the first
        row keeps its base position as anchor and every seat is placed on a
        clean seat_size grid from there.
        """
        if not section.has_seat_grid:
            return

        row_indices = sorted({s.row_index for s in section.seats})
        col_indices = sorted({s.col_index for s in section.seats})
        row_rank: Dict[int, int] = {idx: pos for pos, idx in enumerate(row_indices)}
        col_rank: Dict[int, int] = {idx: pos for pos, idx in enumerate(col_indices)}

        first_row = [s for s in section.seats if s.row_index == row_indices[0]]
        anchor = min(first_row, key=lambda s: s.col_index)
        anchor_x, anchor_y = anchor.base_relative_x, anchor.base_relative_y

        spacing = self.config.seat_size
        for seat in section.seats:
            seat.base_relative_x = anchor_x + col_rank[seat.col_index] * spacing
            seat.base_relative_y = anchor_y + row_rank[seat.row_index] * spacing

        logger.info(
            "Rebuilt base positions for %s: rows=%d cols=%d anchor=(%.1f, %.1f)",
            section.section_id, len(row_indices), len(col_indices), anchor_x, anchor_y,
        )
