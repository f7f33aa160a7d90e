# darwin_sim/sim/world.py
from __future__ import annotations
from typing import Callable, List, Optional

import numpy as np

from .errors import ConfigurationError, OutOfBoundsError
from .models import (
    Creature, CreatureChanged, CreatureCreated, CreatureMoved, CreatureTurned,
    Direction, Pos, Species,
)
from .rng import RNG

EMPTY = -1

Listener = Callable[[object], None]


class World:
    """
    Fixed width x height grid. Cells hold an index into `creatures` or EMPTY.
    Species live in an append-only table; creatures refer to them by index.
    """
    def __init__(self, width: int, height: int, rng: RNG):
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"width and height must be >0 (got {width}x{height})")
        self.width = int(width)
        self.height = int(height)
        self.rng = rng
        self.grid = np.full((self.height, self.width), EMPTY, dtype=np.int32)
        self.creatures: List[Creature] = []
        self.species: List[Species] = []
        self._listeners: List[Listener] = []

    # --- events ---
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, event) -> None:
        for fn in self._listeners:
            fn(event)

    # --- grid ---
    def in_bounds(self, pos: Pos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pos: Pos) -> Optional[Creature]:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(pos)
        idx = int(self.grid[pos[1], pos[0]])
        return None if idx == EMPTY else self.creatures[idx]

    def set(self, pos: Pos, creature: Optional[Creature]) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(pos)
        self.grid[pos[1], pos[0]] = EMPTY if creature is None else creature.id

    def random_position(self) -> Pos:
        """Uniform over all cells, occupied or not."""
        return (self.rng.randrange(self.width), self.rng.randrange(self.height))

    # --- species table ---
    def add_species(self, species: Species) -> int:
        self.species.append(species)
        return len(self.species) - 1

    def species_of(self, creature: Creature) -> Species:
        return self.species[creature.species_id]

    # --- creature mutations ---
    def spawn(self, species_id: int, pos: Pos, direction: Direction) -> Creature:
        """
        Add a creature to the roster and the grid. A cell that is already taken
        is overwritten; the earlier creature stays in the roster but is no longer
        reachable through the grid.
        """
        c = Creature(id=len(self.creatures), species_id=species_id, x=pos[0], y=pos[1], direction=direction)
        self.creatures.append(c)
        self.set(pos, c)
        self._emit(CreatureCreated(c.id, pos, direction, self.species[species_id].color))
        return c

    def move(self, creature: Creature, new_pos: Pos) -> None:
        old = creature.pos()
        self.set(old, None)
        self.set(new_pos, creature)
        creature.x, creature.y = new_pos
        self._emit(CreatureMoved(creature.id, old, new_pos))

    def turn(self, creature: Creature, direction: Direction) -> None:
        creature.direction = direction
        self._emit(CreatureTurned(creature.id, creature.pos(), direction))

    def infect(self, target: Creature, species_id: int, pc: int) -> None:
        target.species_id = species_id
        target.pc = pc
        self._emit(CreatureChanged(target.id, target.pos(), self.species[species_id].color))

    # --- snapshots ---
    def occupancy(self) -> np.ndarray:
        """(height, width) array of occupant species ids, EMPTY where free."""
        out = np.full_like(self.grid, EMPTY)
        for y, x in zip(*np.nonzero(self.grid != EMPTY)):
            out[y, x] = self.creatures[self.grid[y, x]].species_id
        return out

    def headings(self) -> np.ndarray:
        """(height, width) array of occupant direction index (N=0 .. W=3), EMPTY where free."""
        order = list(Direction)
        out = np.full_like(self.grid, EMPTY)
        for y, x in zip(*np.nonzero(self.grid != EMPTY)):
            out[y, x] = order.index(self.creatures[self.grid[y, x]].direction)
        return out
