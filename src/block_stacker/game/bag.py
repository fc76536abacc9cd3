from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .pieces import SHAPES, Shape


class RandomizerBag:
    """7-bag randomizer: every bag is one shuffled copy of all seven shapes.

    Two bags are kept so that up to `MAX_LOOKAHEAD` upcoming shapes can be
    previewed across a bag boundary.
    """

    MAX_LOOKAHEAD = 7

    def __init__(self, rng: Optional[random.Random] = None, shapes: Sequence[Shape] = SHAPES) -> None:
        self.rng = rng or random.Random()
        self.shapes = tuple(shapes)
        self.current: List[Shape] = []
        self.lookahead: List[Shape] = []
        self.reset()

    def reset(self) -> None:
        self.current = self._shuffled()
        self.lookahead = self._shuffled()

    def _shuffled(self) -> List[Shape]:
        bag = list(self.shapes)
        for i in range(len(bag) - 1, 0, -1):
            j = self.rng.randint(0, i)
            bag[i], bag[j] = bag[j], bag[i]
        return bag

    def produce(self) -> Shape:
        if not self.current:
            self.current = self.lookahead
            self.lookahead = self._shuffled()
        return self.current.pop(0)

    def peek(self, n: int = 1) -> Shape:
        """Return the nth upcoming shape (1-based) without consuming it."""
        if n < 1:
            raise ValueError(f"peek index must be >= 1, got {n}")
        n = min(n, self.MAX_LOOKAHEAD)
        if n <= len(self.current):
            return self.current[n - 1]
        return self.lookahead[n - len(self.current) - 1]

    def upcoming(self, count: int) -> List[Shape]:
        count = min(count, self.MAX_LOOKAHEAD)
        return [self.peek(i) for i in range(1, count + 1)]
