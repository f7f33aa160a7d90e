# darwin_sim/main.py
from __future__ import annotations
import argparse
import sys
from typing import List, Tuple

import pygame

from .sim.config import SIM, WORLD, VIEW
from .sim.rng import RNG
from .sim.models import Color, Species
from .sim.world import World
from .sim.program import load_species
from .sim.engine import populate, run
from .sim.errors import ConfigurationError, MalformedProgramError, SimulationError
from .sim.metrics import summarize_round, format_summary, census_rows, new_session_id, append_csv
from .ui.recorder import Recorder
from .ui.app import attach_renderer, run_ui

def resolve_color(name: str) -> Color:
    """Colour name ('red', 'darkgreen') or hex ('#30a0ff') -> RGB tuple."""
    try:
        c = pygame.Color(name.strip())
    except ValueError:
        raise ConfigurationError(f"unknown colour '{name}'") from None
    return (c.r, c.g, c.b)

def parse_species_arg(arg: str) -> Tuple[str, Color]:
    """'path/to/Rover.txt:red' -> (path, rgb). The colour is after the last ':'."""
    path, sep, color = arg.rpartition(":")
    if not sep or not path or not color:
        raise ConfigurationError(f"expected PATH:COLOR, got '{arg}'")
    return path, resolve_color(color)

def prompt_species() -> List[Species]:
    """Ask for species files and colours until an empty filename is given."""
    out: List[Species] = []
    while True:
        path = input("Enter the species filename: ").strip()
        if not path:
            return out
        color = input("Enter color of species: ").strip()
        try:
            out.append(load_species(path, resolve_color(color)))
        except (MalformedProgramError, ConfigurationError) as e:
            print(f"[darwin] {e}; try again", file=sys.stderr)

def build_world(species: List[Species], per_species: int, width: int, height: int, rng: RNG) -> World:
    world = World(width, height, rng)
    ids = [world.add_species(sp) for sp in species]
    populate(world, ids, per_species)
    return world

def run_cli(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Darwin: species programs competing on a grid")
    parser.add_argument("--species", action="append", default=[], metavar="PATH:COLOR",
                        help="species program file and display colour (repeatable); prompts if omitted")
    parser.add_argument("--rounds", type=int, default=SIM.rounds)
    parser.add_argument("--seed", type=int, default=SIM.seed)
    parser.add_argument("--width", type=int, default=WORLD.width)
    parser.add_argument("--height", type=int, default=WORLD.height)
    parser.add_argument("--per-species", type=int, default=SIM.creatures_per_species)
    parser.add_argument("--csv", type=str, default=SIM.track_csv)
    parser.add_argument("--record", type=str, default=SIM.record_path,
                        help="save per-round grid snapshots to this .npz file")
    parser.add_argument("--show-programs", action="store_true", help="print each parsed program and exit")
    parser.add_argument("--ui", action="store_true", help="launch the live viewer")
    parser.add_argument("--pause-ms", type=int, default=None, help="viewer delay between creature turns")
    args = parser.parse_args(argv)

    try:
        if args.species:
            species = [load_species(*parse_species_arg(s)) for s in args.species]
        else:
            species = prompt_species()
        if not species:
            raise ConfigurationError("no species given")

        if args.show_programs:
            for sp in species:
                print(f"# {sp.name} {sp.color}\n{sp.program}\n")
            return 0

        rng = RNG(args.seed)
        recorder = Recorder(enabled=bool(args.record))
        session_id = new_session_id()

        if args.ui:
            if args.pause_ms is not None:
                VIEW.pause_ms = max(0, args.pause_ms)
            world = World(args.width, args.height, rng)
            renderer = attach_renderer(world)
            populate(world, [world.add_species(sp) for sp in species], args.per_species)
            run_ui(world, rng, renderer, recorder=recorder, csv_path=args.csv, session_id=session_id)
        else:
            world = build_world(species, args.per_species, args.width, args.height, rng)

            def on_round(stats):
                row = summarize_round(stats, world)
                print(format_summary(row))
                if args.csv:
                    append_csv(args.csv, census_rows(stats, world, session_id))
                recorder.maybe_capture(world, stats.round)

            run(world, rng, args.rounds, on_round=on_round)

        if args.record:
            recorder.save_npz(world, args.record)
    except SimulationError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    return 0

def main():
    sys.exit(run_cli())

if __name__ == "__main__":
    main()
