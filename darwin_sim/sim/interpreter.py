# darwin_sim/sim/interpreter.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .config import INTERP
from .errors import InfiniteProgramError
from .models import Creature, Opcode
from .rng import RNG
from .world import World


@dataclass
class TurnOutcome:
    opcode: Opcode      # the terminating instruction that used up the turn
    steps: int          # instructions evaluated, control flow included
    moved: bool = False
    infected: bool = False


def step_budget(program_len: int) -> int:
    return max(1, program_len) * INTERP.step_budget_factor


def execute_turn(world: World, me: Creature, rng: RNG, budget: Optional[int] = None) -> TurnOutcome:
    """
    Run `me`'s program from its pc until hop/left/right/infect is evaluated.

    pc is advanced before each instruction is evaluated, so a jump overwrites
    the provisional pc + 1. Running off the end of the program wraps to 0.
    Raises InfiniteProgramError once `budget` instructions have been evaluated
    without reaching a terminating instruction.
    """
    program = world.species_of(me).program
    if budget is None:
        budget = step_budget(len(program))

    steps = 0
    while True:
        if steps >= budget:
            raise InfiniteProgramError(world.species_of(me).name, budget, me.pc)
        steps += 1

        # infection only happens on another creature's turn, so the program
        # cannot change under us mid-turn
        if me.pc >= len(program):
            me.pc = 0
        ins = program.step(me.pc)
        me.pc += 1
        op = ins.opcode
        ahead = me.ahead()
        ahead_in = world.in_bounds(ahead)

        if op is Opcode.HOP:
            moved = False
            if ahead_in and world.get(ahead) is None:
                world.move(me, ahead)
                moved = True
            return TurnOutcome(op, steps, moved=moved)

        elif op is Opcode.LEFT:
            world.turn(me, me.direction.left())
            return TurnOutcome(op, steps)

        elif op is Opcode.RIGHT:
            world.turn(me, me.direction.right())
            return TurnOutcome(op, steps)

        elif op is Opcode.INFECT:
            target = world.get(ahead) if ahead_in else None
            if target is None:
                return TurnOutcome(op, steps)
            # reassigned even when already the same species
            pc = 0 if ins.label is None else program.label_address(ins.label)
            world.infect(target, me.species_id, pc)
            return TurnOutcome(op, steps, infected=True)

        elif op is Opcode.IFEMPTY:
            if ahead_in and world.get(ahead) is None:
                me.pc = program.label_address(ins.label)

        elif op is Opcode.IFWALL:
            if not ahead_in:
                world.turn(me, me.direction.left())
                me.pc = program.label_address(ins.label)

        elif op is Opcode.IFSAME:
            # a creature is never ahead of itself; kept for program compatibility
            if ahead_in and world.get(ahead) is me:
                world.turn(me, me.direction.right())
                me.pc = program.label_address(ins.label)

        elif op is Opcode.IFENEMY:
            if ahead_in:
                other = world.get(ahead)
                if other is not None and other.species_id != me.species_id:
                    me.pc = program.label_address(ins.label)

        elif op is Opcode.IFRANDOM:
            if rng.coin():
                me.pc = program.label_address(ins.label)

        elif op is Opcode.GO:
            me.pc = program.label_address(ins.label)

        # Opcode.LABEL: nothing to do
