"""Exceptions raised by seededrandom."""

from __future__ import annotations

from typing import Any


class SeededRandomError(Exception):
    """Base class for all seededrandom errors."""

    pass


class InvalidArgument(SeededRandomError, ValueError):
    """Raised when a draw is requested with an unusable argument.

    Examples are a non-positive bound or an empty set of candidates. No
    random state is consumed before this is raised.
    """

    pass


class ConstructionFailure(SeededRandomError):
    """
    Raised when a generator of the requested type cannot be built.

    The original exception, if any, is available as ``__cause__``.

    Attributes:
        declared_type: The type that was requested.
        seed: The seed the construction was attempted with.
    """

    def __init__(self, declared_type: Any, seed: int, reason: str | None = None) -> None:
        self.declared_type = declared_type
        self.seed = seed
        name = getattr(declared_type, "__qualname__", repr(declared_type))
        message = f"Could not construct {name} with seed {seed}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
