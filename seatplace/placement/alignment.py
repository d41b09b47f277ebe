"""
Alignment and Distribution

Aligns two or more selected sections on a shared edge or centre line, and
distributes three or more sections with equal gaps. Both operations work on
the unrotated content boxes and finish with a collision separation pass over
the sections they moved.

Align:
    left / top       -> minimum edge of the selection
    right / bottom   -> maximum edge of the selection
    center_h / _v    -> mean of the selection's centres

Distribute (horizontal shown, vertical is the same on Y):
    Sections are sorted by left edge; the first and last stay fixed.
    gap = (space between first.right and last.left - middle widths) / (n - 1)
    If gap < distribution_gap, the last section is pushed right so that
    gap == distribution_gap.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..geometry.dimensions import position_seats_and_labels
from ..geometry.grid_transform import SectionTransformer
from ..venue.abstraction import Section, Venue
from .collision import CollisionSeparator, SeparationResult

logger = logging.getLogger(__name__)


class AlignEdge(Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER_H = "center_h"
    TOP = "top"
    BOTTOM = "bottom"
    CENTER_V = "center_v"

    @property
    def horizontal(self) -> bool:
        return self in (AlignEdge.LEFT, AlignEdge.RIGHT, AlignEdge.CENTER_H)


class DistributeAxis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class AlignmentResult:
    """Result of an align or distribute operation."""
    applied: bool = False
    moved_ids: List[str] = field(default_factory=list)
    separation: Optional[SeparationResult] = None


def _start(section: Section, horizontal: bool) -> float:
    return section.left if horizontal else section.top


def _extent(section: Section, horizontal: bool) -> float:
    return section.content_width if horizontal else section.content_height


def _move_start_to(section: Section, value: float, horizontal: bool):
    """Move one axis so the section's left (or top) edge sits at value."""
    if horizontal:
        section.x = value + section.pivot_x
    else:
        section.y = value + section.pivot_y
    position_seats_and_labels(section)


class AlignmentEngine:
    """
    Align and distribute sections of a venue.

    When no selection is passed, the venue's current selection is used.
    """

    def __init__(self, venue: Venue, config: Optional[LayoutConfig] = None,
                 transformer: Optional[SectionTransformer] = None,
                 separator: Optional[CollisionSeparator] = None):
        self.venue = venue
        self.config = config or DEFAULT_CONFIG
        self.transformer = transformer or SectionTransformer(self.config)
        self.separator = separator or CollisionSeparator(self.config)

    def _prepare(self, sections: Sequence[Section]):
        # Seat offsets must reflect the current stretch/curve before edges are read
        for section in sections:
            if section.curve or section.stretch_h or section.stretch_v:
                self.transformer.apply_transforms(section, skip_layout=True)

    def align(self, edge: AlignEdge,
              selection: Optional[Sequence[Section]] = None) -> AlignmentResult:
        """
        Align sections on an edge or centre line.

        Args:
            edge: Edge to align on
            selection: Sections to align (defaults to the venue selection)

        Returns:
            AlignmentResult; applied is False for fewer than two sections
        """
        sections = list(self.venue.selection if selection is None else selection)
        if len(sections) < 2:
            return AlignmentResult()

        self._prepare(sections)
        horizontal = edge.horizontal

        if edge in (AlignEdge.LEFT, AlignEdge.TOP):
            target = min(_start(s, horizontal) for s in sections)
            for section in sections:
                _move_start_to(section, target, horizontal)

        elif edge in (AlignEdge.RIGHT, AlignEdge.BOTTOM):
            target = max(_start(s, horizontal) + _extent(s, horizontal) for s in sections)
            for section in sections:
                _move_start_to(section, target - _extent(section, horizontal), horizontal)

        else:
            centers = [_start(s, horizontal) + _extent(s, horizontal) / 2 for s in sections]
            target = sum(centers) / len(centers)
            for section in sections:
                _move_start_to(section, target - _extent(section, horizontal) / 2, horizontal)

        logger.debug("Aligned %d sections: edge=%s target=%.2f", len(sections), edge.value, target)

        separation = self.separator.resolve(sections, self.venue.sections)
        return AlignmentResult(
            applied=True,
            moved_ids=[s.section_id for s in sections],
            separation=separation,
        )

    def distribute(self, axis: DistributeAxis,
                   selection: Optional[Sequence[Section]] = None) -> AlignmentResult:
        """
        Distribute sections with equal gaps between first and last.

        Args:
            axis: Distribution axis
            selection: Sections to distribute (defaults to the venue selection)

        Returns:
            AlignmentResult; applied is False for fewer than three sections
        """
        sections = list(self.venue.selection if selection is None else selection)
        if len(sections) < 3:
            return AlignmentResult()

        horizontal = axis == DistributeAxis.HORIZONTAL
        ordered = sorted(sections, key=lambda s: _start(s, horizontal))
        first, last = ordered[0], ordered[-1]
        middle = ordered[1:-1]

        start = _start(first, horizontal) + _extent(first, horizontal)
        end = _start(last, horizontal)
        middle_total = sum(_extent(s, horizontal) for s in middle)
        num_gaps = len(ordered) - 1

        gap = ((end - start) - middle_total) / num_gaps
        min_gap = self.config.distribution_gap
        if gap < min_gap:
            _move_start_to(last, start + min_gap * num_gaps + middle_total, horizontal)
            gap = min_gap
            logger.debug("Distribution gap below minimum, pushed %s to make room", last.section_id)

        current = start + gap
        for section in middle:
            _move_start_to(section, current, horizontal)
            current += _extent(section, horizontal) + gap

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Distributed %d sections: axis=%s gap=%.2f",
                len(ordered), axis.value, gap,
            )

        moved = ordered[1:]
        separation = self.separator.resolve(moved, self.venue.sections)
        return AlignmentResult(
            applied=True,
            moved_ids=[s.section_id for s in moved],
            separation=separation,
        )
