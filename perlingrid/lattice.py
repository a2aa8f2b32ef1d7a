"""Seeded lattice of unit gradient vectors."""

import logging
import math
import numbers
import time
from typing import Iterator, NamedTuple, Tuple

import numpy as np

from .errors import InvalidDimensions, InvalidSeed, OutOfBounds

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi
SEED_LIMIT = 2 ** 64


class Vector2(NamedTuple):
    """An immutable 2D vector."""
    x: float
    y: float

    def dot(self, other):
        return self.x * other[0] + self.y * other[1]

    @property
    def magnitude(self):
        return math.hypot(self.x, self.y)

    @property
    def angle(self):
        return math.atan2(self.y, self.x)

    def describe(self):
        """Debug text: components, angle in radians and magnitude."""
        return (f"Vec {{ x:{self.x}, y:{self.y}, "
                f"a:{self.angle}, m:{self.magnitude} }}")


def _check_dimension(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidDimensions(f"{name} must be >= 1, got {value}")
    return int(value)


def resolve_seed(seed=None):
    """Return ``seed`` validated as a u64, or one derived from the clock.

    The clock seed is whole seconds since the Unix epoch.
    """
    if seed is None:
        return int(time.time()) % SEED_LIMIT
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise InvalidSeed(f"seed must be an integer, got {seed!r}")
    seed = int(seed)
    if not 0 <= seed < SEED_LIMIT:
        raise InvalidSeed(f"seed must lie in [0, 2**64), got {seed}")
    return seed


def generate_gradients(cols, rows, seed):
    """Build the gradient array for a ``cols`` x ``rows`` cell lattice.

    Angles are drawn uniformly in [0, 2*pi) from a generator local to this
    call, in row-major order: y outer, x inner. Corner ``(cx, cy)`` takes
    draw number ``cy * (cols + 1) + cx``.

    Returns:
        Array of shape (rows + 1, cols + 1, 2) holding (cos, sin) pairs.
    """
    rng = np.random.default_rng(seed)
    angles = rng.uniform(0.0, TWO_PI, size=(rows + 1, cols + 1))
    return np.stack([np.cos(angles), np.sin(angles)], axis=-1)


class GradientLattice:
    """A (rows + 1) x (cols + 1) grid of unit gradient vectors.

    One vector sits on each lattice corner, so a lattice of ``cols`` by
    ``rows`` cells has one more corner than cells along each axis. The
    lattice is built once from its seed and never changes afterwards.
    """

    def __init__(self, cols: int, rows: int, seed: int = None):
        self._cols = _check_dimension("cols", cols)
        self._rows = _check_dimension("rows", rows)
        self._seed = resolve_seed(seed)
        logger.info("seed is: %d", self._seed)

        vectors = generate_gradients(self._cols, self._rows, self._seed)
        vectors.setflags(write=False)
        self._vectors = vectors
        logger.debug("Built %dx%d cell lattice (%d corners)",
                     self._cols, self._rows, self.corner_count)

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def vectors(self) -> np.ndarray:
        """Read-only array of shape (rows + 1, cols + 1, 2)."""
        return self._vectors

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows + 1, self._cols + 1)

    @property
    def corner_count(self) -> int:
        return (self._rows + 1) * (self._cols + 1)

    def gradient_at(self, cx: int, cy: int) -> Vector2:
        """Return the gradient on corner ``(cx, cy)``.

        Raises:
            OutOfBounds: if the corner lies outside [0, cols] x [0, rows]
                or either index is not an integer.
        """
        for index in (cx, cy):
            if isinstance(index, bool) or not isinstance(index, numbers.Integral):
                raise OutOfBounds(f"corner index must be an integer, got {index!r}")
        if not (0 <= cx <= self._cols and 0 <= cy <= self._rows):
            raise OutOfBounds(
                f"corner ({cx}, {cy}) outside lattice "
                f"[0, {self._cols}] x [0, {self._rows}]")
        gx, gy = self._vectors[cy, cx]
        return Vector2(float(gx), float(gy))

    def corners(self) -> Iterator[Tuple[int, int, Vector2]]:
        """Yield ``(cx, cy, gradient)`` for every corner, row-major."""
        for cy in range(self._rows + 1):
            for cx in range(self._cols + 1):
                yield cx, cy, self.gradient_at(cx, cy)

    def __eq__(self, other):
        if not isinstance(other, GradientLattice):
            return NotImplemented
        return (self._cols == other._cols and self._rows == other._rows
                and np.array_equal(self._vectors, other._vectors))

    __hash__ = None

    def __repr__(self):
        return (f"GradientLattice(cols={self._cols}, rows={self._rows}, "
                f"seed={self._seed})")
