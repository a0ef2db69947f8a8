"""
SeededRandom: A deterministic random number generator for tests.

Instances are always constructed with a fixed seed, so every sequence of
draws can be replayed from the seed alone.

The generator is a 48-bit linear congruential generator with the constants
published for ``java.util.Random``:

- multiplier ``0x5DEECE66D``
- addend ``0xB``
- modulus ``2**48``

The seed is scrambled by XOR with the multiplier before use, and every draw
returns the high bits of the freshly advanced register. Bounded integers,
longs, doubles and gaussians follow the same published algorithms, so a
given (seed, call sequence) produces the same values as any other
implementation using those constants.

Example:
    random = SeededRandom(413)
    order_id = random.next_uuid()
    color = random.pick(Color)
    order = random.shuffle("alpha", "beta", "gamma")

Instances are not thread-safe; each one is meant to be used by one test at
a time.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from seededrandom._ints import MASK_64, to_int32, to_int64
from seededrandom.errors import InvalidArgument

T = TypeVar("T")

MULTIPLIER = 0x5DEECE66D
ADDEND = 0xB
MASK = (1 << 48) - 1

_INT31_MAX = (1 << 31) - 1
_DOUBLE_UNIT = 1.0 / (1 << 53)


def _collect(elements: Any, more: tuple[Any, ...]) -> list[Any]:
    # Several arguments are the candidates themselves. A single iterable
    # supplies them, except text, which is one candidate.
    if more:
        return [elements, *more]
    if isinstance(elements, (str, bytes)) or not isinstance(elements, Iterable):
        return [elements]
    return list(elements)


class SeededRandom:
    """
    A random number generator with some useful extensions for testing.

    Args:
        initial_seed: The seed, interpreted as a signed 64-bit integer.

    Instances are usually provided by the pytest plugin (see
    :mod:`seededrandom.plugin`) rather than constructed directly.
    """

    def __init__(self, initial_seed: int) -> None:
        self._initial_seed = to_int64(initial_seed)
        self._state = (self._initial_seed ^ MULTIPLIER) & MASK
        self._next_gaussian: float | None = None

    @property
    def initial_seed(self) -> int:
        """The seed this generator was constructed with."""
        return self._initial_seed

    # -- primitive draws ----------------------------------------------------

    def _next(self, bits: int) -> int:
        """Advance the register and return its top *bits* bits as a signed int."""
        self._state = (self._state * MULTIPLIER + ADDEND) & MASK
        return to_int32(self._state >> (48 - bits))

    def next_int(self, bound: int | None = None) -> int:
        """
        Draw an integer.

        Without *bound*, returns a uniformly distributed signed 32-bit value.
        With *bound*, returns a value in ``[0, bound)`` where every outcome is
        equally likely.

        Args:
            bound: Exclusive upper bound. Must be positive and fit in 32 bits.

        Returns:
            The drawn integer.

        Raises:
            InvalidArgument: If *bound* is not positive.
        """
        if bound is None:
            return self._next(32)
        if bound <= 0:
            raise InvalidArgument(f"bound must be positive, got {bound}")
        if bound > _INT31_MAX:
            raise InvalidArgument(f"bound must fit in 32 bits, got {bound}")

        r = self._next(31)
        m = bound - 1
        if bound & m == 0:
            # Power of two: the high bits of the register are the strongest.
            return (bound * r) >> 31

        u = r
        r = u % bound
        # Reject draws from the incomplete last bucket to avoid modulo bias.
        while u - r + m > _INT31_MAX:
            u = self._next(31)
            r = u % bound
        return r

    def next_long(self) -> int:
        """Draw a uniformly distributed signed 64-bit value."""
        high = self._next(32)
        low = self._next(32)
        return to_int64((high << 32) + low)

    def next_boolean(self) -> bool:
        return self._next(1) != 0

    def next_float(self) -> float:
        """Draw a float in ``[0.0, 1.0)`` with 24 bits of precision."""
        return self._next(24) / float(1 << 24)

    def next_double(self) -> float:
        """Draw a float in ``[0.0, 1.0)`` with 53 bits of precision."""
        return ((self._next(26) << 27) + self._next(27)) * _DOUBLE_UNIT

    def next_bytes(self, n: int) -> bytes:
        """
        Draw *n* random bytes.

        Bytes are taken four at a time from :meth:`next_int`, low byte first.

        Raises:
            InvalidArgument: If *n* is negative.
        """
        if n < 0:
            raise InvalidArgument(f"byte count must not be negative, got {n}")
        out = bytearray()
        while len(out) < n:
            rnd = self.next_int()
            for _ in range(min(n - len(out), 4)):
                out.append(rnd & 0xFF)
                rnd >>= 8
        return bytes(out)

    def next_gaussian(self) -> float:
        """
        Draw a normally distributed value (mean 0, standard deviation 1).

        Uses the polar method, which produces deviates in pairs; the second
        one is returned by the following call.
        """
        if self._next_gaussian is not None:
            value = self._next_gaussian
            self._next_gaussian = None
            return value
        while True:
            v1 = 2 * self.next_double() - 1
            v2 = 2 * self.next_double() - 1
            s = v1 * v1 + v2 * v2
            if 0 < s < 1:
                break
        multiplier = math.sqrt(-2 * math.log(s) / s)
        self._next_gaussian = v2 * multiplier
        return v1 * multiplier

    # -- derived operations -------------------------------------------------

    def next_uuid(self) -> uuid.UUID:
        """
        Generate a UUID from two 64-bit draws.

        The first draw supplies the most significant bits and the second the
        least significant bits. Version and variant bits are left as drawn.
        """
        most = self.next_long()
        least = self.next_long()
        return uuid.UUID(int=((most & MASK_64) << 64) | (least & MASK_64))

    def pick(self, candidates: Iterable[T] | T, *more: T) -> T:
        """
        Select one of the given candidates at random.

        Accepts either a single iterable (``pick(["a", "b"])``, ``pick(Color)``)
        or the candidates as separate arguments (``pick("a", "b")``). A single
        string, bytes object or non-iterable value is one candidate, so
        ``pick("abc")`` returns ``"abc"``. The input is never modified.

        Returns:
            One of the candidates.

        Raises:
            InvalidArgument: If no candidates are given.
        """
        items = _collect(candidates, more)
        if not items:
            raise InvalidArgument("cannot pick from an empty collection")
        return items[self.next_int(len(items))]

    def shuffle(self, elements: Iterable[T] | T, *more: T) -> list[T]:
        """
        Return a new list containing *elements* in random order.

        Accepts the same arguments as :meth:`pick`. The input is not
        modified. The list is shuffled with Fisher-Yates from the last index
        down to 1, drawing ``next_int(i + 1)`` for each position ``i``.
        """
        items = _collect(elements, more)
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(i + 1)
            items[i], items[j] = items[j], items[i]
        return items

    def iterator(self, elements: Iterable[T] | T, *more: T) -> Iterator[T]:
        """
        Return an iterator over *elements* in random order.

        The shuffle happens immediately, so draws are consumed at call time
        rather than while iterating.
        """
        return iter(self.shuffle(elements, *more))

    def numpy(self) -> Any:
        """
        Create a NumPy Generator seeded from the next 64-bit draw.

        Requires numpy to be installed (optional dependency).

        Returns:
            A seeded numpy.random.Generator instance.

        Raises:
            ImportError: If numpy is not installed.
        """
        try:
            import numpy as np
        except ImportError as e:
            raise ImportError(
                "numpy is required for SeededRandom.numpy(). "
                "Install it with: pip install seededrandom[numpy]"
            ) from e

        return np.random.default_rng(self.next_long() & MASK_64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._initial_seed})"

    __str__ = __repr__
