"""
Factory registry: Maps generator types to seed factories.

The resolver builds ``SeededRandom`` subclasses by calling the class with
the seed. Types that cannot be built that way (for example wrappers that
compose a ``SeededRandom`` rather than inherit from it) register a factory::

    from seededrandom.registry import register_factory

    class Dice:
        def __init__(self, random: SeededRandom) -> None:
            self.random = random

    register_factory(Dice, lambda seed: Dice(SeededRandom(seed)))

Registered types are resolvable like any generator type.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# declared type -> factory(seed) -> instance
_factories: dict[type, Callable[[int], Any]] = {}


def register_factory(declared_type: type, factory: Callable[[int], Any]) -> None:
    """Register a factory used to build *declared_type* from a seed.

    Args:
        declared_type: The type parameters are annotated with.
        factory: Callable taking the seed and returning an instance.
    """
    _factories[declared_type] = factory
    logger.debug("Registered seed factory for %s", declared_type.__qualname__)


def unregister_factory(declared_type: type) -> None:
    """Remove the factory for *declared_type*, if one is registered."""
    _factories.pop(declared_type, None)


def get_factory(declared_type: Any) -> Callable[[int], Any] | None:
    """Look up the registered factory for *declared_type*.

    Returns:
        The factory, or ``None`` if the type has none registered.
    """
    try:
        return _factories.get(declared_type)
    except TypeError:
        # Unhashable annotations can never be registered.
        return None
