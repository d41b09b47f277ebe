"""
Venue Abstraction Layer

Data model for the seating-layout editor: sections own seats and row labels,
and a Venue holds every section plus the current selection. The placement
and geometry engines only read and mutate positions, dimensions and
transform parameters on these objects; creation and deletion happen here.

Coordinate conventions:
- Section.x / Section.y are the world coordinates of the section pivot
  (its geometric centre). The top-left convention is exposed through the
  left/top/right/bottom properties and move_top_left_to().
- Seat and label relative coordinates live in the section's unrotated local
  frame. World coordinates (x, y) are derived by positioning.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import math

from ..config import LayoutConfig, DEFAULT_CONFIG


class SectionKind(Enum):
    """Section types. Only seated sections own a seat grid."""
    SEATED = "seated"
    GENERAL_ADMISSION = "ga"
    ZONE = "zone"


class RowAlignment(Enum):
    """Horizontal alignment of rows inside a section."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class RowLabelType(Enum):
    """Row label styles."""
    NONE = "none"
    NUMBERS = "numbers"
    LETTERS = "letters"


def _require_finite(name: str, value: float):
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"Invalid section {name} position")


def _require_positive(name: str, value: float):
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise ValueError(f"Invalid section {name}: must be positive number")


@dataclass(eq=False)
class Seat:
    """A single seat in a section grid."""
    row_index: int
    col_index: int
    base_relative_x: float  # canonical grid anchor (no stretch/curve)
    base_relative_y: float
    relative_x: float = 0.0  # after stretch/curve
    relative_y: float = 0.0

    # World placement (written by positioning)
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0  # radians

    seat_number: int = 0
    seat_id: str = ""
    special_needs: bool = False
    manual_number: bool = False  # kept by automatic renumbering

    def __post_init__(self):
        if self.row_index < 0 or self.col_index < 0:
            raise ValueError("Seat grid indices must be non-negative")
        if not self.seat_number:
            self.seat_number = self.col_index + 1

    def reset_to_base(self):
        """Drop any stretch/curve offset."""
        self.relative_x = self.base_relative_x
        self.relative_y = self.base_relative_y


@dataclass(eq=False)
class RowLabel:
    """Row label decoration. Derived from a row; owns no transform state."""
    row_index: int
    text: str
    side: str = "left"  # "left" or "right"
    relative_x: float = 0.0  # same local frame as seat relative positions
    relative_y: float = 0.0
    width: float = 20.0
    height: float = 20.0
    hidden: bool = False

    # World placement (written by positioning)
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0  # degrees


@dataclass(eq=False)
class Section:
    """
    A rectangular region of seats (or a GA area / zone).

    content_width/content_height always describe the padded bounding box of
    seats and labels in the unrotated local frame. Rotation is applied only
    when placing seats in world space.
    """
    section_id: str
    x: float  # pivot world position
    y: float
    content_width: float
    content_height: float
    kind: SectionKind = SectionKind.SEATED

    # Transform parameters
    rotation_degrees: float = 0.0
    curve: float = 0.0  # 0-100
    stretch_h: float = 0.0
    stretch_v: float = 0.0
    row_alignment: RowAlignment = RowAlignment.CENTER

    # Local frame bookkeeping
    base_width: float = 0.0
    base_height: float = 0.0
    pivot_x: float = 0.0
    pivot_y: float = 0.0
    layout_shift_x: float = 0.0
    layout_shift_y: float = 0.0

    # Owned collections
    seats: List[Seat] = field(default_factory=list)
    row_labels: List[RowLabel] = field(default_factory=list)

    # Row labels
    row_label_type: RowLabelType = RowLabelType.NONE
    row_label_start: Union[int, str] = 1  # int for numbers, letter for letters
    row_label_reversed: bool = False
    show_left_labels: bool = False
    show_right_labels: bool = False
    labels_hidden: bool = False
    row_label_spacing: float = 20.0

    # Seat numbering
    seat_number_start: int = 1
    seat_number_reversed: bool = False

    # GA / zone
    ga_capacity: int = 0
    points: Optional[List[float]] = None  # zone polygon [x, y, x, y, ...]

    def __post_init__(self):
        _require_finite("x", self.x)
        _require_finite("y", self.y)
        _require_positive("width", self.content_width)
        _require_positive("height", self.content_height)

        if not isinstance(self.rotation_degrees, (int, float)) or not math.isfinite(self.rotation_degrees):
            raise ValueError("Rotation must be a finite number of degrees")

        if self.kind == SectionKind.GENERAL_ADMISSION:
            if not isinstance(self.ga_capacity, int) or self.ga_capacity < 0:
                raise ValueError("GA capacity must be a non-negative integer")

        if self.points is not None and len(self.points) % 2 != 0:
            raise ValueError("Points array must contain even number of values (x, y pairs)")

        if not self.base_width:
            self.base_width = self.content_width
        if not self.base_height:
            self.base_height = self.content_height
        if not self.pivot_x and not self.pivot_y:
            self.pivot_x = self.content_width / 2
            self.pivot_y = self.content_height / 2

    @classmethod
    def from_top_left(cls, section_id: str, left: float, top: float,
                      width: float, height: float, **kwargs) -> "Section":
        """Create a section from its top-left corner."""
        _require_finite("x", left)
        _require_finite("y", top)
        return cls(
            section_id=section_id,
            x=left + width / 2,
            y=top + height / 2,
            content_width=width,
            content_height=height,
            **kwargs,
        )

    @property
    def is_general_admission(self) -> bool:
        return self.kind == SectionKind.GENERAL_ADMISSION

    @property
    def is_zone(self) -> bool:
        return self.kind == SectionKind.ZONE

    @property
    def has_seat_grid(self) -> bool:
        """True for seated sections that currently own seats."""
        return self.kind == SectionKind.SEATED and len(self.seats) > 0

    @property
    def left(self) -> float:
        return self.x - self.pivot_x

    @property
    def top(self) -> float:
        return self.y - self.pivot_y

    @property
    def right(self) -> float:
        return self.left + self.content_width

    @property
    def bottom(self) -> float:
        return self.top + self.content_height

    @property
    def center_x(self) -> float:
        return self.left + self.content_width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.content_height / 2

    @property
    def capacity(self) -> int:
        """GA capacity, or the number of seats."""
        if self.is_general_admission:
            return self.ga_capacity
        return len(self.seats)

    def move_top_left_to(self, left: float, top: float):
        """Place the section so its top-left corner sits at (left, top)."""
        self.x = left + self.pivot_x
        self.y = top + self.pivot_y

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """
        Get the world axis-aligned bounding box.

        Returns:
            (min_x, min_y, max_x, max_y) of the unrotated content box
        """
        return (self.left, self.top, self.right, self.bottom)

    def resize(self, new_width: float, new_height: float):
        """
        Resize a GA section or zone, keeping its pivot position.

        Raises:
            ValueError: For seated sections, or non-positive dimensions
        """
        if self.kind == SectionKind.SEATED:
            raise ValueError("Only GA sections can be resized directly")
        _require_positive("width", new_width)
        _require_positive("height", new_height)

        if self.points:
            scale_x = new_width / self.content_width
            scale_y = new_height / self.content_height
            for i in range(0, len(self.points), 2):
                self.points[i] *= scale_x
                self.points[i + 1] *= scale_y

        self.content_width = new_width
        self.content_height = new_height
        self.base_width = new_width
        self.base_height = new_height
        self.pivot_x = new_width / 2
        self.pivot_y = new_height / 2

    def rows(self) -> Dict[int, List[Seat]]:
        """Group seats by row index, rows in ascending index order."""
        grouped: Dict[int, List[Seat]] = {}
        for seat in sorted(self.seats, key=lambda s: (s.row_index, s.col_index)):
            grouped.setdefault(seat.row_index, []).append(seat)
        return grouped

    def get_seat(self, row_index: int, col_index: int) -> Optional[Seat]:
        """Get a seat by its grid indices."""
        for seat in self.seats:
            if seat.row_index == row_index and seat.col_index == col_index:
                return seat
        return None


@dataclass
class Venue:
    """
    Explicit layout context: all sections plus the current selection.

    Operations take the venue (or its section lists) as a parameter instead
    of reading shared module state.
    """
    name: str = "venue"
    sections: List[Section] = field(default_factory=list)
    selection: List[Section] = field(default_factory=list)

    def add_section(self, section: Section) -> Section:
        """Register a section."""
        if self.get_section(section.section_id) is not None:
            raise ValueError(f"Duplicate section id: {section.section_id}")
        self.sections.append(section)
        return section

    def remove_section(self, section: Section):
        """Delete a section and everything it owns."""
        if section in self.selection:
            self.selection.remove(section)
        if section in self.sections:
            self.sections.remove(section)
        section.seats.clear()
        section.row_labels.clear()

    def get_section(self, section_id: str) -> Optional[Section]:
        """Get a section by id."""
        for section in self.sections:
            if section.section_id == section_id:
                return section
        return None

    def select(self, *sections: Section):
        """Add sections to the selection (order of selection is kept)."""
        for section in sections:
            if section not in self.selection:
                self.selection.append(section)

    def deselect(self, section: Section):
        if section in self.selection:
            self.selection.remove(section)

    def clear_selection(self):
        self.selection = []

    def others(self, excluded: List[Section]) -> List[Section]:
        """Sections not in the excluded list."""
        return [s for s in self.sections if s not in excluded]


def calculate_seat_dimensions(raw_width: float, raw_height: float,
                              config: LayoutConfig = DEFAULT_CONFIG) -> Tuple[int, int, float, float]:
    """
    Snap a drawn rectangle to a whole number of seats and rows.

    Returns:
        (seats_per_row, rows, snapped_width, snapped_height), at least 2x2
    """
    margin = config.section_margin
    inner_width = max(0.0, raw_width - margin * 2)
    inner_height = max(0.0, raw_height - margin * 2)
    seats = max(2, int(math.floor(inner_width / config.seat_size)) + 1)
    rows = max(2, int(math.floor(inner_height / config.seat_size)) + 1)

    snapped_width = (seats - 1) * config.seat_size + margin * 2
    snapped_height = (rows - 1) * config.seat_size + margin * 2
    return (seats, rows, snapped_width, snapped_height)


def create_seated_section(section_id: str, left: float, top: float,
                          rows: int, seats_per_row: int,
                          config: LayoutConfig = DEFAULT_CONFIG,
                          **kwargs) -> Section:
    """
    Create a seated section with a regular rows x seats_per_row grid.

    Seats are spaced config.seat_size apart, inset by config.section_margin.
    Seat world positions are left for positioning to fill in.
    """
    if rows < 1 or seats_per_row < 1:
        raise ValueError("A seated section needs at least one row and one seat")

    margin = config.section_margin
    width = (seats_per_row - 1) * config.seat_size + margin * 2
    height = (rows - 1) * config.seat_size + margin * 2
    section = Section.from_top_left(section_id, left, top, width, height,
                                    kind=SectionKind.SEATED,
                                    row_label_spacing=config.row_label_spacing,
                                    **kwargs)

    for row in range(rows):
        for col in range(seats_per_row):
            rel_x = margin + col * config.seat_size
            rel_y = margin + row * config.seat_size
            section.seats.append(Seat(
                row_index=row,
                col_index=col,
                base_relative_x=rel_x,
                base_relative_y=rel_y,
                relative_x=rel_x,
                relative_y=rel_y,
                seat_number=col + 1,
                seat_id=f"{section_id}-R{row + 1}S{col + 1}",
            ))

    return section


def create_ga_section(section_id: str, left: float, top: float,
                      width: float, height: float, capacity: int = 0) -> Section:
    """Create a General Admission section (no seat grid)."""
    return Section.from_top_left(section_id, left, top, width, height,
                                 kind=SectionKind.GENERAL_ADMISSION,
                                 ga_capacity=capacity)


def create_zone(section_id: str, left: float, top: float,
                width: float, height: float,
                points: Optional[List[float]] = None) -> Section:
    """Create a zone. Its polygon is decorative; collisions use its box."""
    return Section.from_top_left(section_id, left, top, width, height,
                                 kind=SectionKind.ZONE,
                                 points=list(points) if points else None)
