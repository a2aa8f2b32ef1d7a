"""Configuration for building a noise field."""

import math
import numbers
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidDimensions

DEFAULT_COLS = 3
DEFAULT_ROWS = 3
DEFAULT_CELL_SIZE = 100.0


def _is_count(value):
    return (not isinstance(value, bool) and isinstance(value, numbers.Integral)
            and value >= 1)


@dataclass
class FieldConfig:
    """Configuration for field generation."""

    # Lattice size, in cells
    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS

    # Pixels per cell edge
    cell_size: float = DEFAULT_CELL_SIZE

    # None derives the seed from the clock
    seed: Optional[int] = None

    # Default thread count for NoiseField.evaluate_all
    workers: int = 1

    def validate(self):
        """Raise InvalidDimensions if any size is unusable."""
        for name in ("cols", "rows", "workers"):
            value = getattr(self, name)
            if not _is_count(value):
                raise InvalidDimensions(f"{name} must be an integer >= 1, got {value!r}")
        if not (not isinstance(self.cell_size, bool)
                and isinstance(self.cell_size, numbers.Real)
                and math.isfinite(self.cell_size) and self.cell_size > 0):
            raise InvalidDimensions(
                f"cell_size must be positive and finite, got {self.cell_size!r}")
        return self
