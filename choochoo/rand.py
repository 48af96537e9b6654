"""A linear congruential pseudo-random number generator."""

from __future__ import annotations

DEFAULT_SEED = 17648103

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_MODULUS = 2147483648


class Lcg:
    """Linear congruential generator producing values below 2**31."""

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._seed = seed & 0xFFFFFFFF
        self._state = self._seed

    def next_int(self) -> int:
        """Advance the generator and return the new value."""
        self._state = (_MULTIPLIER * self._state + _INCREMENT) % _MODULUS
        return self._state

    def seed(self) -> int:
        """The seed this generator started from."""
        return self._seed