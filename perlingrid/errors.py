"""Exceptions raised by perlingrid."""


class PerlinGridError(Exception):
    """Base class for all perlingrid errors."""


class InvalidDimensions(PerlinGridError, ValueError):
    """Grid size or cell size is zero, negative or not a usable number."""


class InvalidSeed(PerlinGridError, ValueError):
    """Seed does not fit in an unsigned 64-bit integer."""


class OutOfBounds(PerlinGridError, IndexError):
    """Corner index lies outside the lattice."""


class OutOfDomain(PerlinGridError, ValueError):
    """Sample point lies outside the region covered by the field."""
