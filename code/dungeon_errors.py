"""Exception types raised by the dungeon generator."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when generation parameters cannot produce a valid map."""


class InvariantViolation(AssertionError):
    """Raised when generation code breaks one of its own guarantees.

    These indicate bugs, not bad input: a carve outside the tile buffer, a pick
    referencing a cell that does not exist, a cycle in the spanning tree.
    """
