"""2D gradient (Perlin) noise evaluated over a GradientLattice."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidDimensions, OutOfDomain
from .lattice import GradientLattice, Vector2

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2.0)
HALF_SQRT2 = SQRT2 / 2.0

CORNER_NAMES = ("top-left", "top-right", "bottom-left", "bottom-right")


def fade(t):
    """Perlin fade function: 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a, b, t):
    """Linear interpolation from ``a`` (t=0) to ``b`` (t=1)."""
    return a + (b - a) * t


def normalize(raw):
    """Map raw noise from [-sqrt(2)/2, sqrt(2)/2] onto [0, 1]."""
    return np.clip((raw + HALF_SQRT2) / SQRT2, 0.0, 1.0)


def _locate(coord, cell_size, cells):
    """Split pixel coordinates into cell index and fractional offset.

    Works on scalars and arrays alike. The index is capped at ``cells - 1``
    so rounding can never address a corner past the lattice edge.
    """
    coord = np.asarray(coord, dtype=np.float64)
    cell = np.minimum(np.floor(coord / cell_size).astype(np.intp), cells - 1)
    frac = (coord - cell * cell_size) / cell_size
    return cell, frac


def _interpolate(vectors, cell_x, cell_y, fx, fy):
    """Raw noise value for points given by cell index and local offset.

    This is the only evaluation routine; bulk and point queries both end
    up here. Arguments broadcast against each other like numpy arrays.
    """
    g_tl = vectors[cell_y, cell_x]
    g_tr = vectors[cell_y, cell_x + 1]
    g_bl = vectors[cell_y + 1, cell_x]
    g_br = vectors[cell_y + 1, cell_x + 1]

    # Displacements from each corner to the point, in cell units
    d_tl = g_tl[..., 0] * fx + g_tl[..., 1] * fy
    d_tr = g_tr[..., 0] * (fx - 1) + g_tr[..., 1] * fy
    d_bl = g_bl[..., 0] * fx + g_bl[..., 1] * (fy - 1)
    d_br = g_br[..., 0] * (fx - 1) + g_br[..., 1] * (fy - 1)

    u = fade(fx)
    v = fade(fy)
    top = lerp(d_tl, d_tr, u)
    bottom = lerp(d_bl, d_br, u)
    return lerp(top, bottom, v)


@dataclass(frozen=True)
class Probe:
    """Debug record for a single point query."""
    x: float
    y: float
    cell: Tuple[int, int]
    offsets: Tuple[Vector2, Vector2, Vector2, Vector2]
    gradients: Tuple[Vector2, Vector2, Vector2, Vector2]
    value: float

    def lines(self):
        """Human readable report, one entry per line."""
        out = [f"({self.x},{self.y})", f"({self.cell[0]},{self.cell[1]})"]
        for name, offset, gradient in zip(CORNER_NAMES, self.offsets,
                                          self.gradients):
            out.append(f"{name}: offset {offset.describe()}")
            out.append(f"{name}: gradient {gradient.describe()}")
        out.append(str(self.value))
        return out


class NoiseField:
    """Noise sampled over a lattice at ``cell_size`` pixels per cell.

    The field borrows the lattice and never modifies it. Pixel ``(px, py)``
    is evaluated at the point ``(px, py)``, so the pixel grid covers
    ``int(cols * cell_size)`` by ``int(rows * cell_size)`` samples and no
    pixel falls outside the last cell.
    """

    def __init__(self, lattice: GradientLattice, cell_size: float,
                 workers: int = 1):
        try:
            cell_size = float(cell_size)
        except (TypeError, ValueError):
            raise InvalidDimensions(
                f"cell_size must be a number, got {cell_size!r}") from None
        if not (math.isfinite(cell_size) and cell_size > 0):
            raise InvalidDimensions(
                f"cell_size must be positive and finite, got {cell_size}")

        self.lattice = lattice
        self.cell_size = cell_size
        self.workers = 1 if workers is None else workers
        self.width = lattice.cols * cell_size
        self.height = lattice.rows * cell_size
        self.sample_width = int(self.width)
        self.sample_height = int(self.height)
        if self.sample_width < 1 or self.sample_height < 1:
            raise InvalidDimensions(
                f"cell_size {cell_size} leaves no whole pixel to sample")

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.sample_height, self.sample_width)

    def _evaluate_rows(self, start, stop):
        lattice = self.lattice
        cell_x, fx = _locate(np.arange(self.sample_width), self.cell_size,
                             lattice.cols)
        cell_y, fy = _locate(np.arange(start, stop), self.cell_size,
                             lattice.rows)
        return _interpolate(lattice.vectors, cell_x[np.newaxis, :],
                            cell_y[:, np.newaxis], fx[np.newaxis, :],
                            fy[:, np.newaxis])

    def evaluate_all(self, workers=None, normalize_output=True):
        """Evaluate every pixel of the field.

        Args:
            workers: Number of threads to split the rows across. ``None``
                uses the field's own ``workers`` setting; 1 evaluates
                serially. The result does not depend on it.
            normalize_output: Map values onto [0, 1]. When False the raw
                interpolated dot products are returned.

        Returns:
            Array of shape (sample_height, sample_width).
        """
        if workers is None:
            workers = self.workers
        height = self.sample_height
        logger.debug("Evaluating %dx%d field (cell_size=%s, workers=%s)",
                     self.sample_width, height, self.cell_size, workers)

        if workers <= 1 or height < 2:
            raw = self._evaluate_rows(0, height)
        else:
            bands = min(int(workers), height)
            edges = np.linspace(0, height, bands + 1).astype(int)
            with ThreadPoolExecutor(max_workers=bands) as pool:
                parts = list(pool.map(self._evaluate_rows,
                                      edges[:-1], edges[1:]))
            raw = np.vstack(parts)

        if normalize_output:
            return normalize(raw)
        return raw

    def _check_domain(self, x, y):
        if not (0.0 <= x < self.width and 0.0 <= y < self.height):
            raise OutOfDomain(
                f"point ({x}, {y}) outside [0, {self.width}) x "
                f"[0, {self.height})")

    def _raw_at(self, x, y):
        cell_x, fx = _locate(x, self.cell_size, self.lattice.cols)
        cell_y, fy = _locate(y, self.cell_size, self.lattice.rows)
        raw = _interpolate(self.lattice.vectors, cell_x, cell_y, fx, fy)
        return raw, int(cell_x), int(cell_y)

    def sample(self, x: float, y: float, normalize_output=True) -> float:
        """Noise value at the continuous point ``(x, y)`` in pixels.

        Raises:
            OutOfDomain: if the point is outside the area the lattice covers.
        """
        self._check_domain(x, y)
        raw, _, _ = self._raw_at(x, y)
        if normalize_output:
            return float(normalize(raw))
        return float(raw)

    def probe(self, x: float, y: float) -> Probe:
        """Debug details for the point ``(x, y)``: owning cell, the pixel
        offsets from each of its corners, their gradients and the value."""
        self._check_domain(x, y)
        raw, cell_x, cell_y = self._raw_at(x, y)
        lattice = self.lattice
        size = self.cell_size

        corners = ((cell_x, cell_y), (cell_x + 1, cell_y),
                   (cell_x, cell_y + 1), (cell_x + 1, cell_y + 1))
        offsets = tuple(Vector2(x - cx * size, y - cy * size)
                        for cx, cy in corners)
        gradients = tuple(lattice.gradient_at(cx, cy) for cx, cy in corners)
        return Probe(x=x, y=y, cell=(cell_x, cell_y), offsets=offsets,
                     gradients=gradients, value=float(normalize(raw)))

    def __repr__(self):
        return (f"NoiseField({self.lattice!r}, cell_size={self.cell_size}, "
                f"shape={self.shape})")
