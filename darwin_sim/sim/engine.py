# darwin_sim/sim/engine.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional
import sys

from .models import Creature, Direction
from .world import World
from .interpreter import execute_turn, TurnOutcome
from .errors import InfiniteProgramError
from .rng import RNG


@dataclass
class RoundStats:
    round: int = 0
    turns: int = 0
    moves: int = 0
    infections: int = 0
    aborted: int = 0    # turns that blew their step budget

    def add(self, outcome: Optional[TurnOutcome]) -> None:
        self.turns += 1
        if outcome is None:
            self.aborted += 1
            return
        if outcome.moved:
            self.moves += 1
        if outcome.infected:
            self.infections += 1


def populate(world: World, species_ids: Iterable[int], per_species: int) -> List[Creature]:
    """Drop `per_species` creatures of each species at random cells and headings."""
    created: List[Creature] = []
    for sid in species_ids:
        for _ in range(per_species):
            pos = world.random_position()
            direction = Direction.random(world.rng)
            created.append(world.spawn(sid, pos, direction))
    return created


def take_turn(world: World, me: Creature, rng: RNG) -> Optional[TurnOutcome]:
    """One scheduling slot. A runaway program is reported and the turn does nothing."""
    try:
        return execute_turn(world, me, rng)
    except InfiniteProgramError as e:
        print(f"[scheduler] creature {me.id} at {me.pos()}: {e}; skipping turn", file=sys.stderr)
        return None


def run_round(world: World, rng: RNG, round_no: int = 0) -> RoundStats:
    """
    Visit every creature once, in a fresh random order. Creatures infected
    earlier in the round keep their slot; the infection shows up in their turn.
    """
    stats = RoundStats(round=round_no)
    for idx in rng.permutation(len(world.creatures)):
        stats.add(take_turn(world, world.creatures[idx], rng))
    return stats


def run(world: World, rng: RNG, rounds: int,
        on_round: Callable[[RoundStats], None] | None = None) -> List[RoundStats]:
    history: List[RoundStats] = []
    for r in range(1, rounds + 1):
        stats = run_round(world, rng, round_no=r)
        history.append(stats)
        if on_round is not None:
            on_round(stats)
    return history
