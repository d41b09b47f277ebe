"""Section placement: drag constraints, collision separation, alignment."""

from .collision import (
    CollisionSeparator,
    CollisionVector,
    SeparationResult,
    get_collision_vector,
    find_overlaps,
    resolve_collisions,
)
from .drag import DragSession, compute_permitted_drag
from .alignment import (
    AlignmentEngine,
    AlignmentResult,
    AlignEdge,
    DistributeAxis,
)

__all__ = [
    "CollisionSeparator",
    "CollisionVector",
    "SeparationResult",
    "get_collision_vector",
    "find_overlaps",
    "resolve_collisions",
    "DragSession",
    "compute_permitted_drag",
    "AlignmentEngine",
    "AlignmentResult",
    "AlignEdge",
    "DistributeAxis",
]
