# darwin_sim/sim/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from .errors import MalformedProgramError

Pos = Tuple[int, int]
Color = Tuple[int, int, int]


class Opcode(Enum):
    HOP = "hop"
    LEFT = "left"
    RIGHT = "right"
    INFECT = "infect"
    IFEMPTY = "ifempty"
    IFWALL = "ifwall"
    IFSAME = "ifsame"
    IFENEMY = "ifenemy"
    IFRANDOM = "ifrandom"
    GO = "go"
    LABEL = "label"

    @classmethod
    def from_token(cls, token: str) -> "Opcode":
        try:
            return cls(token)
        except ValueError:
            raise MalformedProgramError(f"unknown instruction '{token}'") from None


class Direction(Enum):
    # y grows downwards (row index), so north is -1
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def left(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) - 1) % 4]

    def right(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 1) % 4]

    @classmethod
    def random(cls, rng) -> "Direction":
        return rng.choice(_CLOCKWISE)


_CLOCKWISE = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


def adjacent(pos: Pos, direction: Direction) -> Pos:
    return (pos[0] + direction.dx, pos[1] + direction.dy)


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    label: Optional[str] = None

    def __str__(self) -> str:
        if self.opcode is Opcode.LABEL:
            return f"{self.label}:"
        return self.opcode.value if self.label is None else f"{self.opcode.value} {self.label}"


@dataclass(frozen=True)
class Program:
    instructions: Tuple[Instruction, ...]
    labels: Mapping[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.instructions)

    def step(self, address: int) -> Instruction:
        return self.instructions[address]

    def label_address(self, name: str) -> int:
        try:
            return self.labels[name]
        except KeyError:
            raise MalformedProgramError(f"undefined label '{name}'") from None

    def __str__(self) -> str:
        return "\n".join(f"{i:3d}  {ins}" for i, ins in enumerate(self.instructions))


@dataclass(frozen=True)
class Species:
    name: str
    color: Color
    program: Program


@dataclass
class Creature:
    id: int            # index into World.creatures
    species_id: int    # index into World.species; reassigned by infection
    x: int
    y: int
    direction: Direction
    pc: int = 0

    def pos(self) -> Pos:
        return (self.x, self.y)

    def ahead(self) -> Pos:
        return adjacent(self.pos(), self.direction)


# ---------------- world events (consumed by the display layer) ----------------
@dataclass(frozen=True)
class CreatureCreated:
    id: int
    position: Pos
    direction: Direction
    color: Color

@dataclass(frozen=True)
class CreatureMoved:
    id: int
    old: Pos
    new: Pos

@dataclass(frozen=True)
class CreatureTurned:
    id: int
    position: Pos
    direction: Direction

@dataclass(frozen=True)
class CreatureChanged:
    id: int
    position: Pos
    color: Color
