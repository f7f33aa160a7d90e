# darwin_sim/sim/live.py
from __future__ import annotations
from typing import List

from .world import World
from .engine import RoundStats, take_turn
from .rng import RNG
from .metrics import census


class LiveSim:
    """
    Step-by-step wrapper for the viewer: one creature turn per step(), so the
    UI can pause between turns. Same ordering rules as engine.run_round.
    """
    def __init__(self, world: World, rng: RNG):
        self.world = world
        self.rng = rng
        self.round: int = 1
        self._order: List[int] = []
        self._cursor: int = 0
        self.stats = RoundStats(round=self.round)
        self.last_round: RoundStats | None = None
        self._start_round()

    def _start_round(self):
        self._order = self.rng.permutation(len(self.world.creatures))
        self._cursor = 0
        self.stats = RoundStats(round=self.round)

    def step(self) -> bool:
        """Run the next creature's turn. Returns True when that finished a round."""
        if self._cursor < len(self._order):
            me = self.world.creatures[self._order[self._cursor]]
            self._cursor += 1
            self.stats.add(take_turn(self.world, me, self.rng))

        if self._cursor < len(self._order):
            return False

        self.last_round = self.stats
        self.round += 1
        self._start_round()
        return True

    # UI helpers
    def census(self):
        return census(self.world)
