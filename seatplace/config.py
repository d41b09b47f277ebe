"""
Layout Configuration

Every tunable constant of the layout engine lives in LayoutConfig. A config
can be built in code, or loaded from a YAML file:

```yaml
seat_size: 24
distribution_gap: 40
max_iterations: 20
```

Keys that are not LayoutConfig fields are rejected so that typos do not
silently fall back to defaults.
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union
import logging

import yaml

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Constants for seat grids, transforms, collisions and distribution."""
    # Seat grid creation
    seat_size: float = 24.0  # spacing between seats in new sections
    section_margin: float = 20.0  # margin around section edges
    min_section_size: float = 50.0  # minimum drawn section size

    # Seat geometry
    seat_radius: float = 10.0
    seat_gap: float = 2.0  # added to the seat diameter for the spacing floor
    default_spacing: float = 20.0  # fallback when a single row/column has no spacing

    # Dimension aggregation
    edge_padding: float = 10.0  # padding around seat/label extents
    row_label_spacing: float = 20.0  # distance between label and edge seat
    label_size: float = 20.0  # default label box width/height

    # Collision separation
    collision_padding: float = 0.0  # 0 allows touching, only overlap is blocked
    max_iterations: int = 20

    # Distribution
    distribution_gap: float = 40.0

    # Curve
    curve_divisor: float = 2000.0  # k = curve / curve_divisor
    max_curve: float = 100.0
    max_arc_angle: float = 3.3  # radians, ~190 degrees
    curve_safety_factor: float = 0.95

    # Rotation
    rotation_limit: float = 180.0

    @property
    def min_spacing(self) -> float:
        """Smallest centre-to-centre distance between neighbouring seats."""
        return 2 * self.seat_radius + self.seat_gap

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutConfig":
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown layout config keys: {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            if known[name].type in (int, "int"):
                values[name] = int(value)
            else:
                values[name] = float(value)
        return cls(**values)


DEFAULT_CONFIG = LayoutConfig()


def load_config(path: Union[str, Path]) -> LayoutConfig:
    """
    Load a LayoutConfig from a YAML file.

    An empty file yields the defaults.

    Raises:
        ValueError: If the document is not a mapping or has unknown keys
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Layout config {path} must be a mapping, got {type(data).__name__}")

    config = LayoutConfig.from_dict(data)
    logger.debug("Loaded layout config from %s (%d overrides)", path, len(data))
    return config


def save_config(config: LayoutConfig, path: Union[str, Path]) -> None:
    """Write a LayoutConfig to a YAML file."""
    path = Path(path)
    with open(path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.debug("Saved layout config to %s", path)
