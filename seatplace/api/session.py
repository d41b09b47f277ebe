"""
SeatPlace Editor Session

Composition root for an editing session: owns the venue, the layout config
and one instance of each engine, and keeps an undo/redo history of section
geometry.
"""

from typing import Optional, List, Dict, Any, Tuple, Sequence
from dataclasses import dataclass, field

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..geometry.grid_transform import SectionTransformer
from ..placement.alignment import AlignmentEngine
from ..placement.collision import CollisionSeparator, SeparationResult
from ..placement.drag import DragSession
from ..venue.abstraction import Section, RowAlignment, Venue


@dataclass
class SectionState:
    """Snapshot of a section's geometry and numbering."""
    x: float
    y: float
    content_width: float
    content_height: float
    rotation_degrees: float
    curve: float
    stretch_h: float
    stretch_v: float
    row_alignment: RowAlignment = RowAlignment.CENTER
    seat_number_start: int = 1
    seat_number_reversed: bool = False
    seat_numbers: List[int] = field(default_factory=list)
    base_positions: List[Tuple[float, float]] = field(default_factory=list)
    points: Optional[List[float]] = None


@dataclass
class VenueSnapshot:
    """Geometry of every section, for undo/redo."""
    section_states: Dict[str, SectionState]
    description: str = ""


class EditorSession:
    """
    Manages one venue editing session.

    Provides:
    - Shared engines built from one LayoutConfig
    - Pointer drag lifecycle
    - Undo/redo stack
    - Modified-section tracking
    """

    MAX_UNDO_STACK = 50

    def __init__(self, venue: Optional[Venue] = None,
                 config: Optional[LayoutConfig] = None):
        self.venue = venue or Venue()
        self.config = config or DEFAULT_CONFIG
        self.transformer = SectionTransformer(self.config)
        self.separator = CollisionSeparator(self.config)
        self.alignment = AlignmentEngine(self.venue, self.config,
                                         transformer=self.transformer,
                                         separator=self.separator)
        self.drag = DragSession(self.venue, self.config, separator=self.separator)

        self._undo_stack: List[VenueSnapshot] = []
        self._redo_stack: List[VenueSnapshot] = []
        self._modified_ids: set = set()

        self._save_snapshot("Initial state")

    @property
    def selection(self) -> List[Section]:
        return self.venue.selection

    @property
    def modified_sections(self) -> List[str]:
        """Ids of sections changed since the last clear_modified()."""
        return sorted(self._modified_ids)

    def add_section(self, section: Section) -> Section:
        """Add a section, lay it out and record the change."""
        self.venue.add_section(section)
        self.transformer.apply_transforms(section)
        self.checkpoint(f"Add {section.section_id}")
        return section

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def begin_drag(self, pointer_x: float, pointer_y: float,
                   sections: Optional[Sequence[Section]] = None):
        """Start dragging the given sections (defaults to the selection)."""
        self.drag.begin(self.venue.selection if sections is None else sections,
                        pointer_x, pointer_y)

    def drag_to(self, pointer_x: float, pointer_y: float) -> Tuple[float, float]:
        """Move the dragged sections toward the pointer, sliding on contact."""
        return self.drag.update(pointer_x, pointer_y)

    def end_drag(self) -> SeparationResult:
        """Release the drag; remaining overlaps are separated."""
        moved = [s.section_id for s in self.drag.sections]
        result = self.drag.end()
        if moved:
            self.mark_modified(moved)
            self.checkpoint("Drag")
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def checkpoint(self, description: str = ""):
        """Record the current geometry as an undo step."""
        self._save_snapshot(description)

    def undo(self) -> bool:
        """
        Undo last change.

        Returns:
            True if undo was performed, False if nothing to undo
        """
        if len(self._undo_stack) <= 1:  # Keep at least the initial state
            return False

        self._redo_stack.append(self._undo_stack.pop())
        self._restore_snapshot(self._undo_stack[-1])
        return True

    def redo(self) -> bool:
        """
        Redo last undone change.

        Returns:
            True if redo was performed, False if nothing to redo
        """
        if not self._redo_stack:
            return False

        snapshot = self._redo_stack.pop()
        self._undo_stack.append(snapshot)
        self._restore_snapshot(snapshot)
        return True

    def mark_modified(self, section_ids: List[str]):
        self._modified_ids.update(section_ids)

    def clear_modified(self):
        self._modified_ids.clear()

    def _take_snapshot(self, description: str = "") -> VenueSnapshot:
        states = {}
        for section in self.venue.sections:
            states[section.section_id] = SectionState(
                x=section.x,
                y=section.y,
                content_width=section.content_width,
                content_height=section.content_height,
                rotation_degrees=section.rotation_degrees,
                curve=section.curve,
                stretch_h=section.stretch_h,
                stretch_v=section.stretch_v,
                row_alignment=section.row_alignment,
                seat_number_start=section.seat_number_start,
                seat_number_reversed=section.seat_number_reversed,
                seat_numbers=[s.seat_number for s in section.seats],
                base_positions=[(s.base_relative_x, s.base_relative_y) for s in section.seats],
                points=list(section.points) if section.points else None,
            )
        return VenueSnapshot(section_states=states, description=description)

    def _save_snapshot(self, description: str = ""):
        self._undo_stack.append(self._take_snapshot(description))

        # Clear redo stack on new action
        self._redo_stack.clear()

        while len(self._undo_stack) > self.MAX_UNDO_STACK:
            self._undo_stack.pop(0)

    def _restore_snapshot(self, snapshot: VenueSnapshot):
        for section in self.venue.sections:
            state = snapshot.section_states.get(section.section_id)
            if state is None:
                continue

            section.x = state.x
            section.y = state.y
            section.rotation_degrees = state.rotation_degrees
            section.curve = state.curve
            section.stretch_h = state.stretch_h
            section.stretch_v = state.stretch_v
            section.row_alignment = state.row_alignment
            section.seat_number_start = state.seat_number_start
            section.seat_number_reversed = state.seat_number_reversed
            for seat, number in zip(section.seats, state.seat_numbers):
                seat.seat_number = number
            section.points = list(state.points) if state.points else None

            if section.has_seat_grid:
                for seat, (bx, by) in zip(section.seats, state.base_positions):
                    seat.base_relative_x = bx
                    seat.base_relative_y = by
                # Dimensions and pivot are derived from the restored seats
                self.transformer.apply_transforms(section)
            else:
                section.content_width = state.content_width
                section.content_height = state.content_height
                section.pivot_x = state.content_width / 2
                section.pivot_y = state.content_height / 2

    def get_stats(self) -> Dict[str, Any]:
        """Get session statistics."""
        return {
            "venue": self.venue.name,
            "sections": len(self.venue.sections),
            "selected": len(self.venue.selection),
            "modified_count": len(self._modified_ids),
            "undo_available": len(self._undo_stack) > 1,
            "redo_available": len(self._redo_stack) > 0,
            "dragging": self.drag.active,
        }
