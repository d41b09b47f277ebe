"""
Collision Separator

Pushes overlapping sections apart after a discrete layout operation
(alignment, distribution, drag release, GA resize).

For every moved section and every other section, the Minimum Translation
Vector (MTV) is computed: the overlap on the axis that needs the smaller
nudge, signed to push away from the other section's centre. Pushes are
applied immediately (Gauss-Seidel relaxation) and seats are re-positioned
so later pair checks see up-to-date geometry.

Passes repeat until one finds no collision or the iteration ceiling is
reached. Dense packings may not converge within the ceiling; the residual
overlap is reported in the result and left visible.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..geometry.bbox import center, inflate, overlap_extents, test_overlap
from ..geometry.dimensions import position_seats_and_labels
from ..venue.abstraction import Section

logger = logging.getLogger(__name__)


@dataclass
class CollisionVector:
    """Push to apply to the first section of a colliding pair."""
    axis: str  # "x" or "y"
    delta: float


@dataclass
class SeparationResult:
    """Result of a separation run."""
    iterations_used: int = 0  # full passes over the moved sections
    pushes_applied: int = 0
    converged: bool = True  # a pass finished with zero collisions
    residual_overlaps: List[Tuple[str, str]] = field(default_factory=list)


def get_collision_vector(s1: Section, s2: Section,
                         padding: float = 0.0) -> Optional[CollisionVector]:
    """
    Calculate the MTV that separates s1 from s2.

    Padding inflates s1 only. Ties between the axis overlaps push on Y.

    Returns:
        CollisionVector for s1, or None when the boxes do not overlap
    """
    box1 = s1.bounding_box()
    box2 = s2.bounding_box()
    x_overlap, y_overlap = overlap_extents(box1, box2, padding)

    if x_overlap <= 0 or y_overlap <= 0:
        return None

    c1 = center(inflate(box1, padding))
    c2 = center(box2)

    if x_overlap < y_overlap:
        direction = -1 if c1[0] < c2[0] else 1
        return CollisionVector(axis="x", delta=x_overlap * direction)

    direction = -1 if c1[1] < c2[1] else 1
    return CollisionVector(axis="y", delta=y_overlap * direction)


def find_overlaps(sections: Sequence[Section], padding: float = 0.0) -> List[Tuple[str, str]]:
    """All overlapping pairs, as (section_id, section_id) tuples."""
    pairs = []
    for i, a in enumerate(sections):
        box_a = a.bounding_box()
        for b in sections[i + 1:]:
            if test_overlap(box_a, b.bounding_box(), padding):
                pairs.append((a.section_id, b.section_id))
    return pairs


class CollisionSeparator:
    """
    Iterative MTV relaxation for moved sections.

    Only moved sections are pushed; every other section acts as an obstacle.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def resolve(self, moved_sections: Sequence[Section],
                all_sections: Sequence[Section],
                max_iterations: Optional[int] = None,
                padding: Optional[float] = None) -> SeparationResult:
        """
        Separate moved sections from every other section.

        Args:
            moved_sections: Sections that may be pushed
            all_sections: Every section in the layout (obstacles)
            max_iterations: Pass ceiling (defaults to config.max_iterations)
            padding: Padding around the moved section (defaults to
                     config.collision_padding)

        Returns:
            SeparationResult with statistics
        """
        if max_iterations is None:
            max_iterations = self.config.max_iterations
        if padding is None:
            padding = self.config.collision_padding

        result = SeparationResult(converged=False)
        moved = list(moved_sections)

        for iteration in range(max_iterations):
            result.iterations_used = iteration + 1
            had_collision = False

            for section in moved:
                for other in all_sections:
                    if other is section:
                        continue

                    vector = get_collision_vector(section, other, padding)
                    if vector is None:
                        continue

                    had_collision = True
                    result.pushes_applied += 1
                    if vector.axis == "x":
                        section.x += vector.delta
                    else:
                        section.y += vector.delta
                    position_seats_and_labels(section)

                    if logger.isEnabledFor(logging.DEBUG):
                        logger.debug(
                            "Push %s away from %s: axis=%s delta=%.3f",
                            section.section_id,
                            other.section_id,
                            vector.axis,
                            vector.delta,
                        )

            if not had_collision:
                result.converged = True
                break

        for section in moved:
            position_seats_and_labels(section)

        if not result.converged:
            result.residual_overlaps = [
                (section.section_id, other.section_id)
                for section in moved
                for other in all_sections
                if other is not section and get_collision_vector(section, other, padding)
            ]
            logger.info(
                "Collision separation stopped after %d iterations with %d overlapping pairs",
                result.iterations_used,
                len(result.residual_overlaps),
            )
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Collision separation converged: moved=%d iterations=%d pushes=%d",
                len(moved),
                result.iterations_used,
                result.pushes_applied,
            )

        return result


def resolve_collisions(moved_sections: Sequence[Section],
                       all_sections: Sequence[Section],
                       max_iterations: int = DEFAULT_CONFIG.max_iterations,
                       padding: float = DEFAULT_CONFIG.collision_padding) -> SeparationResult:
    """
    Convenience function to run one separation pass.

    Args:
        moved_sections: Sections that may be pushed
        all_sections: Every section in the layout
        max_iterations: Pass ceiling
        padding: Padding around moved sections

    Returns:
        SeparationResult with statistics
    """
    separator = CollisionSeparator()
    return separator.resolve(moved_sections, all_sections,
                             max_iterations=max_iterations, padding=padding)
