"""
Deterministic xorshift generator.

A two-step xorshift over 64-bit state. It is not a statistical-quality
generator; it exists so that test matrices are reproducible across runs
and platforms.

    state = XOR64_INIT
    state, u = xor64(state)     # u in [0, 1]
"""

from __future__ import annotations

from typing import Iterator

XOR64_INIT: int = 88172645463325252

_MASK64 = (1 << 64) - 1
_TWO_64 = float(1 << 64)


def xor64(state: int) -> tuple[int, float]:
    """
    Advance the state once and draw a sample.

    Args:
        state: Current 64-bit state (nonzero, or the sequence stays at 0)

    Returns:
        (new_state, sample) where sample = new_state / 2**64. The division
        is done in FP, so states within 2**10 of 2**64 round to 1.0.
    """
    state &= _MASK64
    state ^= (state << 7) & _MASK64
    state ^= state >> 9
    return state, state / _TWO_64


class Xor64:
    """
    Stateful wrapper around xor64().

    Example:
        >>> gen = Xor64()
        >>> m = Matrix(3, 3).fill_random(gen)
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int = XOR64_INIT):
        self._state = seed & _MASK64

    @property
    def state(self) -> int:
        return self._state

    def random(self) -> float:
        """Next sample; advances the state."""
        self._state, sample = xor64(self._state)
        return sample

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        return self.random()

    def __repr__(self) -> str:
        return f"Xor64(state={self._state})"
