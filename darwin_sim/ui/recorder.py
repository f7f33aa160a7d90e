# darwin_sim/ui/recorder.py
from __future__ import annotations
import os, time
from typing import Optional
import numpy as np

from ..sim.world import World

class Recorder:
    """
    Capture a grid snapshot every `stride_rounds` rounds (NPZ).
    Stores: occupant species id and heading per cell, round number, and the
    species table (names + colours) so playback can colour cells.
    """
    def __init__(self, enabled=False, stride_rounds=1):
        self.enabled = enabled
        self.stride_rounds = max(1, int(stride_rounds))
        self.occupancy_list = []
        self.heading_list = []
        self.round_list = []

    def toggle(self): self.enabled = not self.enabled; print(f"[recorder] {'ON' if self.enabled else 'OFF'}")
    def clear(self):
        self.occupancy_list.clear(); self.heading_list.clear(); self.round_list.clear()
        print("[recorder] cleared")

    def __len__(self):
        return len(self.round_list)

    def maybe_capture(self, world: World, round_no: int):
        if not self.enabled: return
        if (round_no % self.stride_rounds) != 0: return
        self.occupancy_list.append(world.occupancy())
        self.heading_list.append(world.headings())
        self.round_list.append(round_no)

    def save_npz(self, world: World, out_path: Optional[str]=None):
        if not self.round_list:
            print("[recorder] nothing to save"); return None

        if out_path is None:
            os.makedirs("recordings", exist_ok=True)
            stamp = time.strftime("%Y%m%d_%H%M%S")
            out_path = os.path.join("recordings", f"darwin_run_{stamp}.npz")
        else:
            parent = os.path.dirname(out_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        np.savez_compressed(
            out_path,
            width=np.int32(world.width),
            height=np.int32(world.height),
            occupancy=np.stack(self.occupancy_list).astype(np.int16),
            direction=np.stack(self.heading_list).astype(np.int8),
            round=np.array(self.round_list, np.int32),
            species_names=np.array([sp.name for sp in world.species]),
            species_colors=np.array([tuple(sp.color) for sp in world.species], np.uint8).reshape(-1, 3),
        )
        print(f"[recorder] saved: {out_path} (T={len(self.round_list)})")
        return out_path
