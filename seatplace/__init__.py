"""
SeatPlace - Collision and Layout Geometry for Seating Maps

Geometry engine of a venue seating-layout editor: seat grid transforms
(stretch, curve, rotation), section dimensions, sliding drag constraints,
collision separation, and alignment/distribution of sections.
"""

__version__ = "0.1.0"
__author__ = "SeatPlace Team"

from .config import LayoutConfig, DEFAULT_CONFIG, load_config, save_config
from .venue.abstraction import Section, Seat, RowLabel, Venue

__all__ = [
    "LayoutConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "Section",
    "Seat",
    "RowLabel",
    "Venue",
]
