"""
Fixed-width integer helpers (internal).

Python integers are unbounded, so every value that must behave like a
signed 32-bit or 64-bit machine integer is folded back into range here.
"""

from __future__ import annotations

MASK_32 = (1 << 32) - 1
MASK_64 = (1 << 64) - 1


def to_int32(value: int) -> int:
    """Wrap *value* to a signed 32-bit integer (two's complement)."""
    value &= MASK_32
    return value - (1 << 32) if value & (1 << 31) else value


def to_int64(value: int) -> int:
    """Wrap *value* to a signed 64-bit integer (two's complement)."""
    value &= MASK_64
    return value - (1 << 64) if value & (1 << 63) else value
