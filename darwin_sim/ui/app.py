# darwin_sim/ui/app.py
from __future__ import annotations
import pygame
from .renderer import Renderer, BG_COLOR
from .recorder import Recorder
from ..sim.live import LiveSim
from ..sim.world import World
from ..sim.rng import RNG
from ..sim.config import VIEW
from ..sim.metrics import census_rows, new_session_id, append_csv


def attach_renderer(world: World) -> Renderer:
    """Subscribe a renderer before creatures are spawned so it sees every CreatureCreated."""
    renderer = Renderer(None, world.width, world.height, VIEW.cell_px)
    world.subscribe(renderer.on_event)
    return renderer


def run_ui(world: World, rng: RNG, renderer: Renderer,
           recorder: Recorder | None = None, csv_path: str | None = None,
           session_id: str | None = None):
    pygame.init()
    pygame.display.set_caption("Darwin: " + ", ".join(sp.name for sp in world.species))
    screen = pygame.display.set_mode(renderer.window_size())
    renderer.screen = screen
    renderer.font = pygame.font.SysFont("Menlo", 14)
    clock = pygame.time.Clock()

    recorder = recorder or Recorder(enabled=False)
    session_id = session_id or new_session_id()
    live = LiveSim(world, rng)
    paused = False
    turns_per_frame = VIEW.turns_per_frame
    last_turn_ms = 0
    running = True

    while running:
        clock.tick(VIEW.fps)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE: running = False
                elif e.key == pygame.K_SPACE: paused = not paused
                elif e.key == pygame.K_LEFTBRACKET:
                    turns_per_frame = max(1, turns_per_frame - 1)
                elif e.key == pygame.K_RIGHTBRACKET:
                    turns_per_frame = min(len(world.creatures) or 1, turns_per_frame + 1)
                elif e.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    VIEW.pause_ms = max(0, VIEW.pause_ms - 20)
                elif e.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    VIEW.pause_ms = min(2000, VIEW.pause_ms + 20)
                elif e.key == pygame.K_v: recorder.toggle()
                elif e.key == pygame.K_c: recorder.clear()
                elif e.key == pygame.K_s: recorder.save_npz(world)

        now = pygame.time.get_ticks()
        if not paused and now - last_turn_ms >= VIEW.pause_ms:
            last_turn_ms = now
            for _ in range(turns_per_frame):
                if live.step():
                    stats = live.last_round
                    recorder.maybe_capture(world, stats.round)
                    if csv_path:
                        append_csv(csv_path, census_rows(stats, world, session_id))

        screen.fill(BG_COLOR)
        renderer.draw_hud(live, turns_per_frame, paused, recorder.enabled)
        renderer.draw_world()
        pygame.display.flip()

    pygame.quit()
    return live
