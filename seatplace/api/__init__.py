"""
SeatPlace Editor API

Modules:
- actions: Sidebar operations (rotate, stretch, curve, align, distribute)
- session: Engines, drag lifecycle and undo/redo
"""

from .actions import EditorActions, ActionResult
from .session import EditorSession

__all__ = [
    "EditorActions",
    "ActionResult",
    "EditorSession",
]
