# darwin_sim/sim/errors.py
from __future__ import annotations


class SimulationError(Exception):
    """Base class for everything the simulation raises on purpose."""


class MalformedProgramError(SimulationError):
    """A species program could not be read, or is not a well-formed program."""


class ConfigurationError(SimulationError):
    """Bad world dimensions, colour names or species arguments."""


class OutOfBoundsError(SimulationError):
    def __init__(self, pos):
        super().__init__(f"bad position: {pos}")
        self.pos = pos


class InfiniteProgramError(SimulationError):
    """A turn ran past its step budget without reaching hop/left/right/infect."""
    def __init__(self, species_name: str, budget: int, pc: int):
        super().__init__(
            f"species '{species_name}' evaluated {budget} instructions without ending its turn (pc={pc})"
        )
        self.species_name = species_name
        self.budget = budget
        self.pc = pc
