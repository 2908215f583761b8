"""
Random utilities shared by every simulation component.

All sampling goes through one SimRandom instance that is created by the
caller and passed in, so a seed reproduces a whole run.
"""

import math
import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class SimRandom:
    """Seedable random source with the sampling helpers the simulation uses."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.random_gen = random.Random(seed)

    def random(self) -> float:
        return self.random_gen.random()

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return low + int(self.random() * (high - low + 1))

    def chance(self, probability: float) -> bool:
        """Bernoulli trial. Probabilities <= 0 never fire, >= 1 always fire."""
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        return seq[self.randint(0, len(seq) - 1)]

    def sample(self, seq: Sequence[T], k: int) -> list:
        """k distinct items drawn without replacement."""
        pool = list(seq)
        picked = []
        for _ in range(min(k, len(pool))):
            picked.append(pool.pop(self.randint(0, len(pool) - 1)))
        return picked

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def spawn(self) -> "SimRandom":
        """Copy of the current stream, used for previews that must not advance this one."""
        child = SimRandom(self.seed)
        child.random_gen.setstate(self.random_gen.getstate())
        return child


def clamp(value, low, high):
    return min(max(value, low), high)


def round_half_up(value: float) -> int:
    """Round .5 upwards (toward +inf), unlike Python's banker's rounding."""
    return math.floor(value + 0.5)
