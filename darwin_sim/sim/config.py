# darwin_sim/sim/config.py
from dataclasses import dataclass

# ------------------------------------------------------------
# WORLD / GRID SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=False)  # mutable so the CLI can override dimensions
class WorldConfig:
    width: int = 15
    height: int = 15

# ------------------------------------------------------------
# INTERPRETER
# ------------------------------------------------------------
@dataclass(frozen=True)
class InterpreterConfig:
    # a turn may evaluate at most len(program) * factor instructions
    step_budget_factor: int = 4

# ------------------------------------------------------------
# HEADLESS / DRIVER SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=False)
class SimConfig:
    seed: int = 42
    creatures_per_species: int = 10
    rounds: int = 200
    track_csv: str | None = "runs/rounds.csv"
    record_path: str | None = None

# ------------------------------------------------------------
# LIVE VIEWER
# ------------------------------------------------------------
@dataclass(frozen=False)  # mutable so the UI can tweak pacing at runtime
class ViewConfig:
    cell_px: int = 40
    pause_ms: int = 100     # delay between creature turns
    turns_per_frame: int = 1
    fps: int = 60

# ------------------------------------------------------------
# EXPORT SINGLETONS
# ------------------------------------------------------------
WORLD = WorldConfig()
INTERP = InterpreterConfig()
SIM = SimConfig()
VIEW = ViewConfig()
