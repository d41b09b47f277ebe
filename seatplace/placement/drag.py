"""
Drag Constraint Solver

While a group of sections is dragged, each pointer-move tick asks how far
the group may actually move. Axes are solved independently ("sliding"):
a moving section blocked on X can still slide along Y.

For each moving/static pair:
- X: if the area swept by moving dx (Y held) overlaps, dx is clamped to
  the distance that leaves the boxes flush. Sweeping keeps a large tick
  from jumping over a narrow section.
- Y: the same with dy (X held).
The permitted delta is the tightest clamp over all pairs. A final check on
the combined (dx, dy) stops diagonal moves from entering a box through its
corner, which neither single-axis test sees.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..geometry.bbox import Box, inflate, test_overlap, translate, union
from ..geometry.dimensions import position_seats_and_labels
from ..venue.abstraction import Section, Venue
from .collision import CollisionSeparator, SeparationResult

logger = logging.getLogger(__name__)


def _clamp_x(moving: Box, other: Box, dx: float) -> float:
    """Largest dx (same direction) that keeps moving flush with other."""
    if dx > 0:
        return min(dx, other[0] - moving[2])
    return max(dx, other[2] - moving[0])


def _clamp_y(moving: Box, other: Box, dy: float) -> float:
    if dy > 0:
        return min(dy, other[1] - moving[3])
    return max(dy, other[3] - moving[1])


def _sweep(box: Box, dx: float, dy: float) -> Box:
    """Area covered while moving box by (dx, dy) along one axis."""
    return union(box, translate(box, dx, dy))


def compute_permitted_drag(moving_sections: Sequence[Section], dx: float, dy: float,
                           static_sections: Sequence[Section],
                           padding: float = 0.0) -> Tuple[float, float]:
    """
    Get the permitted drag movement with sliding behaviour.

    Args:
        moving_sections: Sections being dragged, at their current positions
        dx, dy: Desired movement
        static_sections: Obstacles
        padding: Clearance kept around each moving section

    Returns:
        (dx, dy) actually permitted
    """
    if dx == 0 and dy == 0:
        return (0.0, 0.0)

    final_dx, final_dy = dx, dy
    moving_boxes = [inflate(s.bounding_box(), padding) for s in moving_sections]
    static_boxes = [s.bounding_box() for s in static_sections]

    for moving in moving_boxes:
        for other in static_boxes:
            if final_dx != 0 and test_overlap(_sweep(moving, final_dx, 0.0), other):
                final_dx = _clamp_x(moving, other, final_dx)

            if final_dy != 0 and test_overlap(_sweep(moving, 0.0, final_dy), other):
                final_dy = _clamp_y(moving, other, final_dy)

    # Corner approach: both axes free on their own, blocked together
    for _ in range(len(moving_boxes) * len(static_boxes) + 1):
        changed = False
        for moving in moving_boxes:
            for other in static_boxes:
                if not test_overlap(translate(moving, final_dx, final_dy), other):
                    continue
                if final_dy != 0:
                    clamped = _clamp_y(translate(moving, final_dx, 0.0), other, final_dy)
                    if clamped != final_dy:
                        final_dy = clamped
                        changed = True
                        continue
                if final_dx != 0:
                    clamped = _clamp_x(translate(moving, 0.0, final_dy), other, final_dx)
                    if clamped != final_dx:
                        final_dx = clamped
                        changed = True
        if not changed:
            break

    return (final_dx, final_dy)


@dataclass
class DragSession:
    """
    A pointer drag of one or more sections.

    Positions are recomputed every tick from the original positions plus
    the pointer delta, constrained from where the sections currently are.
    """
    venue: Venue
    config: LayoutConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    separator: Optional[CollisionSeparator] = None

    sections: List[Section] = field(default_factory=list)
    start_x: float = 0.0
    start_y: float = 0.0
    original_positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    def __post_init__(self):
        if self.separator is None:
            self.separator = CollisionSeparator(self.config)

    @property
    def active(self) -> bool:
        return bool(self.sections)

    def begin(self, sections: Sequence[Section], start_x: float, start_y: float):
        """Start dragging sections from pointer position (start_x, start_y)."""
        self.sections = list(sections)
        self.start_x = start_x
        self.start_y = start_y
        self.original_positions = {s.section_id: (s.x, s.y) for s in self.sections}
        logger.debug("Drag start: sections=%d at (%.1f, %.1f)", len(self.sections), start_x, start_y)

    def update(self, pointer_x: float, pointer_y: float) -> Tuple[float, float]:
        """
        Move the dragged sections toward the pointer.

        Returns:
            The (dx, dy) applied this tick
        """
        if not self.sections:
            return (0.0, 0.0)

        lead = self.sections[0]
        orig_x, orig_y = self.original_positions[lead.section_id]
        desired_dx = orig_x + (pointer_x - self.start_x) - lead.x
        desired_dy = orig_y + (pointer_y - self.start_y) - lead.y

        static = self.venue.others(self.sections)
        dx, dy = compute_permitted_drag(self.sections, desired_dx, desired_dy, static,
                                        padding=self.config.collision_padding)

        for section in self.sections:
            section.x += dx
            section.y += dy
            position_seats_and_labels(section)

        return (dx, dy)

    def end(self) -> SeparationResult:
        """Release the drag and separate any remaining overlap."""
        if not self.sections:
            return SeparationResult()

        result = self.separator.resolve(self.sections, self.venue.sections)
        logger.debug(
            "Drag end: sections=%d pushes=%d converged=%s",
            len(self.sections),
            result.pushes_applied,
            result.converged,
        )
        self.sections = []
        self.original_positions = {}
        return result

    def cancel(self):
        """Abort the drag and restore original positions."""
        for section in self.sections:
            section.x, section.y = self.original_positions[section.section_id]
            position_seats_and_labels(section)
        self.sections = []
        self.original_positions = {}
