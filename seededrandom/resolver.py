"""
SeedResolver: Deterministic, per-invocation generator resolution.

A test framework asks the resolver two things for each parameter it cannot
satisfy by other means:

- :meth:`SeedResolver.supports`: is the declared type a generator type?
- :meth:`SeedResolver.resolve`: produce the generator for this slot.

Seeds are computed from the invocation's display name and the parameter's
1-based slot index::

    seed = (index << 32) + string_hash(display_name)

The slot index lands in the high bits and the name hash in the low bits, so
different slots diverge widely and different invocations (repetitions,
parametrized cases) get different seeds unless their names collide.

Each generator is cached in the invocation's own cache under
``("p", index)``, so a setup fixture and the test body asking for the same
slot share one instance.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from seededrandom._ints import to_int32, to_int64
from seededrandom.errors import ConstructionFailure
from seededrandom.generator import SeededRandom
from seededrandom.registry import get_factory

logger = logging.getLogger(__name__)

SLOT_PREFIX = "p"


def string_hash(text: str) -> int:
    """
    Hash *text* to a signed 32-bit integer.

    Polynomial hash with multiplier 31 over the UTF-16 code units of the
    string, wrapped to 32 bits. Unlike the built-in ``hash()``, the result is
    the same in every process.
    """
    h = 0
    data = text.encode("utf-16-be", "surrogatepass")
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return to_int32(h)


def compute_seed(slot_index: int, display_name: str) -> int:
    """
    Compute the seed for a 0-based slot within a named invocation.

    Returns:
        A signed 64-bit seed.
    """
    index = slot_index + 1
    return to_int64((index << 32) + string_hash(display_name))


def slot_key(index: int) -> tuple[str, int]:
    """Cache key for a 1-based slot index."""
    return (SLOT_PREFIX, index)


class SeedResolver:
    """
    Resolves generator-typed parameters for one test framework.

    The resolver itself is stateless. All per-invocation state lives in the
    cache handed to :meth:`resolve`, which the framework creates fresh for
    every invocation and shares between that invocation's setup and test
    phases.

    Example:
        resolver = SeedResolver()
        cache: dict = {}
        a = resolver.resolve(0, "test_orders[3]", cache)
        b = resolver.resolve(0, "test_orders[3]", cache)
        assert a is b
    """

    def supports(self, declared_type: Any) -> bool:
        """Return ``True`` if parameters of *declared_type* can be resolved."""
        if get_factory(declared_type) is not None:
            return True
        return isinstance(declared_type, type) and issubclass(declared_type, SeededRandom)

    def resolve(
        self,
        slot_index: int,
        display_name: str,
        cache: MutableMapping[Any, Any],
        declared_type: Any = SeededRandom,
    ) -> Any:
        """
        Return the generator for a parameter slot, creating it if needed.

        Args:
            slot_index: 0-based position of the parameter within its
                callback's parameter list.
            display_name: Name unique to the current invocation.
            cache: The invocation-scoped cache.
            declared_type: The parameter's declared type.

        Returns:
            The cached instance for the slot, or a new one built with the
            computed seed.

        Raises:
            ConstructionFailure: If *declared_type* cannot be built.
        """
        key = slot_key(slot_index + 1)
        if key in cache:
            return cache[key]

        seed = compute_seed(slot_index, display_name)
        instance = self._construct(declared_type, seed)
        cache[key] = instance
        logger.debug("Created %r for slot %d of %s", instance, slot_index + 1, display_name)
        return instance

    def _construct(self, declared_type: Any, seed: int) -> Any:
        factory = get_factory(declared_type)
        if factory is None:
            if not self.supports(declared_type):
                raise ConstructionFailure(
                    declared_type, seed, "not a SeededRandom type and no factory is registered"
                )
            factory = declared_type
        try:
            return factory(seed)
        except Exception as e:
            raise ConstructionFailure(declared_type, seed, str(e) or type(e).__name__) from e
