"""PerlinGrid - Deterministic 2D gradient noise over a seeded lattice."""

from .config import FieldConfig
from .errors import (InvalidDimensions, InvalidSeed, OutOfBounds,
                     OutOfDomain, PerlinGridError)
from .lattice import GradientLattice, Vector2
from .noise import NoiseField, Probe, fade, lerp

__version__ = "0.1.0"
__all__ = [
    "generate",
    "FieldConfig",
    "GradientLattice",
    "NoiseField",
    "Probe",
    "Vector2",
    "fade",
    "lerp",
    "PerlinGridError",
    "InvalidDimensions",
    "InvalidSeed",
    "OutOfBounds",
    "OutOfDomain",
]


def generate(cols=None, rows=None, cell_size=None, seed=None, **kwargs):
    """Build a noise field ready for evaluation.

    Args:
        cols: Lattice width in cells (default 3).
        rows: Lattice height in cells (default 3).
        cell_size: Pixels per cell edge (default 100).
        seed: Seed for reproducible gradients. Derived from the clock
            when omitted; read it back from ``field.lattice.seed``.
        **kwargs: Additional FieldConfig parameters.

    Returns:
        NoiseField over a freshly built GradientLattice.
    """
    if cols is not None:
        kwargs["cols"] = cols
    if rows is not None:
        kwargs["rows"] = rows
    if cell_size is not None:
        kwargs["cell_size"] = cell_size
    config = FieldConfig(seed=seed, **kwargs).validate()
    lattice = GradientLattice(config.cols, config.rows, seed=config.seed)
    return NoiseField(lattice, config.cell_size, workers=config.workers)
