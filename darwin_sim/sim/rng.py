# darwin_sim/sim/rng.py
import random
from typing import List, MutableSequence, Sequence, TypeVar

T = TypeVar("T")

class RNG:
    """One seedable random source, handed to World, interpreter and scheduler."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def randrange(self, n: int) -> int:
        return self._rng.randrange(n)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def coin(self) -> bool:
        return self._rng.randrange(2) == 0

    def shuffle(self, seq: MutableSequence) -> None:
        self._rng.shuffle(seq)

    def permutation(self, n: int) -> List[int]:
        order = list(range(n))
        self.shuffle(order)
        return order
