"""
Axis-aligned bounding box primitives.

Boxes are (min_x, min_y, max_x, max_y) tuples, the same shape returned by
Section.bounding_box(). Overlap is strict: boxes that only touch along an
edge do not overlap, so sections may sit flush against each other.
"""

from typing import Optional, Tuple

Box = Tuple[float, float, float, float]


def inflate(box: Box, padding: float) -> Box:
    """Grow a box by padding on all four sides."""
    return (box[0] - padding, box[1] - padding, box[2] + padding, box[3] + padding)


def translate(box: Box, dx: float, dy: float) -> Box:
    """Shift a box by (dx, dy)."""
    return (box[0] + dx, box[1] + dy, box[2] + dx, box[3] + dy)


def box_from_rect(x: float, y: float, width: float, height: float) -> Box:
    """Build a box from a top-left corner and size."""
    return (x, y, x + width, y + height)


def test_overlap(box_a: Box, box_b: Box, padding: float = 0.0) -> bool:
    """
    Check whether two boxes overlap.

    Padding inflates box_a only; box_b is used as given.

    Returns:
        True on strict interval intersection on both axes
    """
    a = inflate(box_a, padding)
    return (a[2] > box_b[0] and a[0] < box_b[2] and
            a[3] > box_b[1] and a[1] < box_b[3])


# Not a pytest test despite the name
test_overlap.__test__ = False


def overlap_extents(box_a: Box, box_b: Box, padding: float = 0.0) -> Tuple[float, float]:
    """
    Signed overlap on each axis (positive means the intervals intersect).

    Padding inflates box_a only.
    """
    a = inflate(box_a, padding)
    x_overlap = min(a[2], box_b[2]) - max(a[0], box_b[0])
    y_overlap = min(a[3], box_b[3]) - max(a[1], box_b[1])
    return (x_overlap, y_overlap)


def center(box: Box) -> Tuple[float, float]:
    """Midpoint of a box."""
    return ((box[0] + box[2]) / 2, (box[1] + box[3]) / 2)


def union(box_a: Optional[Box], box_b: Box) -> Box:
    """Smallest box containing both (box_a may be None)."""
    if box_a is None:
        return box_b
    return (min(box_a[0], box_b[0]), min(box_a[1], box_b[1]),
            max(box_a[2], box_b[2]), max(box_a[3], box_b[3]))
