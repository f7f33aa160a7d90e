# darwin_sim/sim/metrics.py
from __future__ import annotations
from typing import Dict, List
import os
import csv
import uuid

from .world import World
from .engine import RoundStats

def species_labels(world: World) -> List[str]:
    """Species names, suffixed with their table index where two share a name."""
    names = [sp.name for sp in world.species]
    return [n if names.count(n) == 1 else f"{n}#{i}" for i, n in enumerate(names)]

def census(world: World) -> Dict[str, int]:
    labels = species_labels(world)
    counts = [0] * len(labels)
    for c in world.creatures:
        counts[c.species_id] += 1
    return dict(zip(labels, counts))

def summarize_round(stats: RoundStats, world: World) -> Dict[str, object]:
    """Round totals, with the per-species census nested under `counts`."""
    return dict(
        round=stats.round, n=len(world.creatures),
        infections=stats.infections, moves=stats.moves, aborted=stats.aborted,
        counts=census(world),
    )

CSV_FIELDS = ["session_id", "round", "species", "count", "infections", "moves", "aborted"]

def new_session_id() -> str:
    return uuid.uuid4().hex[:8]

def census_rows(stats: RoundStats, world: World, session_id: str) -> List[Dict[str, object]]:
    """Long-format rows (one per species) so runs with different species share a CSV."""
    return [
        dict(session_id=session_id, round=stats.round, species=name, count=count,
             infections=stats.infections, moves=stats.moves, aborted=stats.aborted)
        for name, count in census(world).items()
    ]


def format_summary(row: Dict[str, object]) -> str:
    counts = " ".join(f"{k}={v}" for k, v in row["counts"].items())
    return (
        f"Round {row['round']:4d} | N={row['n']:3d} "
        f"infect={row['infections']:3d} moves={row['moves']:3d} aborted={row['aborted']:2d} | {counts}"
    )

def append_csv(path: str, rows: List[Dict[str, object]]) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    write_header = not os.path.exists(path)
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        if write_header:
            w.writeheader()
        w.writerows(rows)
