"""
SeatPlace Editor Actions

Sidebar-level operations of the layout editor. Each action validates its
target, runs the matching engine and records an undo step. Actions never
raise for user input; failures come back as ActionResult(success=False).

Usage:
    from seatplace.api import EditorSession, EditorActions
    session = EditorSession()
    actions = EditorActions(session)
    actions.set_curve(40, section_id="A")
"""

import math
from typing import List, Optional, Sequence
from dataclasses import dataclass

from ..geometry.dimensions import update_seat_numbers
from ..placement.alignment import AlignEdge, DistributeAxis
from ..venue.abstraction import Section, RowAlignment
from .session import EditorSession


@dataclass
class ActionResult:
    """Result of an editor action."""
    success: bool
    message: str
    modified_ids: List[str]


class EditorActions:
    """Single-section and selection actions on an EditorSession."""

    def __init__(self, session: EditorSession):
        self.session = session

    @property
    def transformer(self):
        return self.session.transformer

    def _target(self, section_id: Optional[str]):
        """
        Resolve the section an action applies to.

        Returns:
            (section, error_message); section is None on failure
        """
        if section_id is not None:
            section = self.session.venue.get_section(section_id)
            if section is None:
                return None, f"Section {section_id} not found"
            return section, ""

        selection = self.session.selection
        if len(selection) != 1:
            return None, f"Select exactly one section (selected: {len(selection)})"
        return selection[0], ""

    def _seated_target(self, section_id: Optional[str]):
        section, error = self._target(section_id)
        if section is not None and not section.has_seat_grid:
            return None, f"Section {section.section_id} has no seats"
        return section, error

    def _done(self, sections: Sequence[Section], message: str) -> ActionResult:
        ids = [s.section_id for s in sections]
        self.session.mark_modified(ids)
        self.session.checkpoint(message)
        return ActionResult(True, message, ids)

    # ------------------------------------------------------------------
    # Rotation / stretch / curve
    # ------------------------------------------------------------------

    def set_rotation(self, degrees: float, section_id: Optional[str] = None) -> ActionResult:
        """Rotate a section around its pivot (clamped to the rotation limit)."""
        section, error = self._target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if not math.isfinite(degrees):
            return ActionResult(False, "Rotation must be a finite number", [])

        self.transformer.set_rotation(section, degrees)
        return self._done([section], f"Rotated {section.section_id} to {section.rotation_degrees:.1f}°")

    def reset_rotation(self, section_id: Optional[str] = None) -> ActionResult:
        return self.set_rotation(0.0, section_id)

    def set_stretch_h(self, amount: float, section_id: Optional[str] = None) -> ActionResult:
        """Set horizontal stretch (extra spacing per column)."""
        section, error = self._seated_target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if not math.isfinite(amount):
            return ActionResult(False, "Stretch must be a finite number", [])

        self.transformer.set_stretch(section, horizontal=amount)
        return self._done([section], f"Stretched {section.section_id} horizontally by {amount:.1f}")

    def set_stretch_v(self, amount: float, section_id: Optional[str] = None) -> ActionResult:
        """Set vertical stretch (extra spacing per row)."""
        section, error = self._seated_target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if not math.isfinite(amount):
            return ActionResult(False, "Stretch must be a finite number", [])

        self.transformer.set_stretch(section, vertical=amount)
        return self._done([section], f"Stretched {section.section_id} vertically by {amount:.1f}")

    def reset_stretch_h(self, section_id: Optional[str] = None) -> ActionResult:
        return self.set_stretch_h(0.0, section_id)

    def reset_stretch_v(self, section_id: Optional[str] = None) -> ActionResult:
        return self.set_stretch_v(0.0, section_id)

    def set_curve(self, amount: float, section_id: Optional[str] = None) -> ActionResult:
        """Set the curve amount, clamped to the section's safe maximum."""
        section, error = self._seated_target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if not math.isfinite(amount):
            return ActionResult(False, "Curve must be a finite number", [])

        self.transformer.set_curve(section, amount)
        message = f"Curved {section.section_id} to {section.curve:.1f}"
        if section.curve < amount:
            message += f" (clamped from {amount:.1f})"
        return self._done([section], message)

    def reset_curve(self, section_id: Optional[str] = None) -> ActionResult:
        return self.set_curve(0.0, section_id)

    def align_rows(self, alignment: RowAlignment, section_id: Optional[str] = None) -> ActionResult:
        """Align the rows of a section left, centre or right."""
        section, error = self._seated_target(section_id)
        if section is None:
            return ActionResult(False, error, [])

        self.transformer.align_rows(section, alignment)
        return self._done([section], f"Aligned rows of {section.section_id} {alignment.value}")

    def set_seat_numbering(self, start: Optional[int] = None, reversed_order: Optional[bool] = None,
                           section_id: Optional[str] = None) -> ActionResult:
        """Change seat numbering settings and renumber every row."""
        section, error = self._seated_target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if start is not None:
            if isinstance(start, bool) or not isinstance(start, int) or start < 1:
                return ActionResult(False, "Seat numbers must start at a positive integer", [])
            section.seat_number_start = start
        if reversed_order is not None:
            section.seat_number_reversed = reversed_order

        update_seat_numbers(section)
        return self._done([section], f"Renumbered seats of {section.section_id} from {section.seat_number_start}")

    # ------------------------------------------------------------------
    # Multi-section layout
    # ------------------------------------------------------------------

    def _sections(self, section_ids: Optional[List[str]]):
        if section_ids is None:
            return list(self.session.selection), ""
        sections = []
        for section_id in section_ids:
            section = self.session.venue.get_section(section_id)
            if section is None:
                return None, f"Section {section_id} not found"
            sections.append(section)
        return sections, ""

    def align(self, edge: AlignEdge, section_ids: Optional[List[str]] = None) -> ActionResult:
        """Align sections on an edge or centre line."""
        sections, error = self._sections(section_ids)
        if sections is None:
            return ActionResult(False, error, [])

        result = self.session.alignment.align(edge, sections)
        if not result.applied:
            return ActionResult(False, "Need at least 2 sections to align", [])
        return self._done(sections, f"Aligned {len(sections)} sections {edge.value}")

    def distribute(self, axis: DistributeAxis, section_ids: Optional[List[str]] = None) -> ActionResult:
        """Distribute sections with equal gaps."""
        sections, error = self._sections(section_ids)
        if sections is None:
            return ActionResult(False, error, [])

        result = self.session.alignment.distribute(axis, sections)
        if not result.applied:
            return ActionResult(False, "Need at least 3 sections to distribute", [])
        moved = [s for s in sections if s.section_id in result.moved_ids]
        return self._done(moved, f"Distributed {len(sections)} sections {axis.value}")

    def resize_section(self, width: float, height: float,
                       section_id: Optional[str] = None) -> ActionResult:
        """Resize a GA section or zone, then push it clear of its neighbours."""
        section, error = self._target(section_id)
        if section is None:
            return ActionResult(False, error, [])
        if section.has_seat_grid or not (section.is_general_admission or section.is_zone):
            return ActionResult(False, f"Section {section.section_id} cannot be resized directly", [])
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            return ActionResult(False, "Width and height must be positive numbers", [])

        section.resize(width, height)
        self.session.separator.resolve([section], self.session.venue.sections)
        return self._done([section], f"Resized {section.section_id} to {width:.1f} x {height:.1f}")

    def move_sections(self, dx: float, dy: float,
                      section_ids: Optional[List[str]] = None) -> ActionResult:
        """
        Move sections by a delta as a single drag.

        The move slides along obstacles exactly like a pointer drag.
        """
        sections, error = self._sections(section_ids)
        if sections is None:
            return ActionResult(False, error, [])
        if not sections:
            return ActionResult(False, "No sections to move", [])

        self.session.begin_drag(0.0, 0.0, sections)
        applied_dx, applied_dy = self.session.drag_to(dx, dy)
        self.session.drag.end()
        return self._done(sections, f"Moved {len(sections)} sections by ({applied_dx:.2f}, {applied_dy:.2f})")
