# darwin_sim/ui/renderer.py
from __future__ import annotations
import pygame
from typing import Dict, Tuple

from ..sim.models import (
    CreatureChanged, CreatureCreated, CreatureMoved, CreatureTurned, Direction, Pos,
)

# ---------- Colors / Theme ----------
BG_COLOR     = (14,16,20)
GRID_COLOR   = (35,40,48)
BORDER_COLOR = (70,75,85)
TICK_COLOR   = (240,240,240)
TEXT_COLOR   = (220,220,220)

# ---------- Layout knobs ----------
HUD_HEIGHT   = 48
HUD_PAD_X    = 12
HUD_PAD_Y    = 8

Cell = Tuple[Tuple[int, int, int], Direction]


class Renderer:
    """
    Draws the grid from its own cell cache. The cache is only ever updated
    from world events (pass `on_event` to World.subscribe), so the renderer
    never reads simulation internals.
    """
    def __init__(self, screen, grid_w: int, grid_h: int, cell_px: int, font_name="Menlo"):
        self.screen = screen
        self.grid_w = grid_w
        self.grid_h = grid_h
        self.cell_px = cell_px
        self.cells: Dict[Pos, Cell] = {}
        self.font = None
        if screen is not None:
            self.font = pygame.font.SysFont(font_name, 14)

    # ---------- event intake ----------
    def on_event(self, ev) -> None:
        if isinstance(ev, CreatureCreated):
            self.cells[ev.position] = (tuple(ev.color), ev.direction)
        elif isinstance(ev, CreatureMoved):
            cell = self.cells.pop(ev.old, None)
            if cell is not None:
                self.cells[ev.new] = cell
        elif isinstance(ev, CreatureTurned):
            color = self.cells.get(ev.position, ((180,180,180), ev.direction))[0]
            self.cells[ev.position] = (color, ev.direction)
        elif isinstance(ev, CreatureChanged):
            direction = self.cells.get(ev.position, (None, Direction.NORTH))[1]
            self.cells[ev.position] = (tuple(ev.color), direction)

    # ---------- coordinate helpers ----------
    def cell_rect(self, pos: Pos) -> pygame.Rect:
        x, y = pos
        return pygame.Rect(x * self.cell_px, HUD_HEIGHT + y * self.cell_px, self.cell_px, self.cell_px)

    def window_size(self) -> Tuple[int, int]:
        return self.grid_w * self.cell_px, HUD_HEIGHT + self.grid_h * self.cell_px

    # ---------- drawing ----------
    def _draw_grid(self):
        w, h = self.window_size()
        for k in range(self.grid_w + 1):
            x = k * self.cell_px
            pygame.draw.line(self.screen, GRID_COLOR, (x, HUD_HEIGHT), (x, h), 1)
        for k in range(self.grid_h + 1):
            y = HUD_HEIGHT + k * self.cell_px
            pygame.draw.line(self.screen, GRID_COLOR, (0, y), (w, y), 1)
        pygame.draw.rect(self.screen, BORDER_COLOR, pygame.Rect(0, HUD_HEIGHT, w, h - HUD_HEIGHT), 2)

    def _draw_creature(self, pos: Pos, color, direction: Direction):
        r = self.cell_rect(pos).inflate(-4, -4)
        pygame.draw.rect(self.screen, color, r, border_radius=max(2, r.w // 4))
        # facing tick from the centre towards the edge the creature faces
        cx, cy = r.center
        half = r.w // 2
        tip = (cx + direction.dx * half, cy + direction.dy * half)
        pygame.draw.line(self.screen, TICK_COLOR, (cx, cy), tip, 2)

    def draw_world(self):
        self._draw_grid()
        for pos, (color, direction) in self.cells.items():
            self._draw_creature(pos, color, direction)

    def draw_hud(self, live, turns_per_frame: int, paused: bool, recording: bool):
        counts = "  ".join(f"{k}:{v}" for k, v in live.census().items())
        line1 = (f"Round {live.round}  turns/frame={turns_per_frame}"
                 f"{'  [PAUSED]' if paused else ''}{'  [REC]' if recording else ''}")
        self.screen.blit(self.font.render(line1, True, TEXT_COLOR), (HUD_PAD_X, HUD_PAD_Y))
        self.screen.blit(self.font.render(counts, True, TEXT_COLOR), (HUD_PAD_X, HUD_PAD_Y + 18))
