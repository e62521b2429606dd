"""
Deterministic random source driven by a seed string.

The seed is hashed with SHA-256 so that similar human-chosen seeds decorrelate
immediately, then a linear congruential recurrence produces the draws.
"""

import hashlib
import math
import secrets


MULTIPLIER = 1664525
INCREMENT = 1013904223
MODULUS = 4294967296  # 2^32


def random_seed() -> str:
    """Fresh 32 character hex seed for runs without an explicit one."""
    return secrets.token_hex(16)


class SeededRandom:
    __slots__ = ('seed', '_state')

    def __init__(self, seed: str):
        self.seed = seed
        digest = hashlib.sha256(seed.encode('utf-8')).hexdigest()
        # Held as a float: the first multiply rounds the 60-bit hash state,
        # afterwards the state is an exact integer below 2^32.
        self._state = float(int(digest[:15], 16))

    def next(self) -> float:
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        return self._state / MODULUS

    def next_float(self, min_value: float, max_value: float) -> float:
        return min_value + self.next() * (max_value - min_value)

    def next_int(self, min_value: int, max_value: int) -> int:
        return math.floor(self.next_float(min_value, max_value))

    def __repr__(self) -> str:
        return f"SeededRandom({self.seed!r})"
