"""
scenes/death_scene.py — End of a life

Shown once the organism dies.  Enter starts a new life, Escape quits.
"""

from __future__ import annotations
import pygame

from core.app import App
from core.scene import Scene
from components.chronicle import KEY
from ui.helpers import draw_overlay

_CAUSES = {
    "starvation": "starved to death",
    "disease": "was consumed by disease",
    "mental_collapse": "lost its mind",
}


class DeathScene(Scene):
    draws_below = True

    def __init__(self, sim):
        self.sim = sim

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_RETURN:
            self.sim.reset()
            app.pop_scene()
        elif event.key == pygame.K_ESCAPE:
            app.running = False

    def draw(self, surface: pygame.Surface, app: App):
        draw_overlay(surface, 210)
        w, h = surface.get_size()
        org = self.sim.organism
        cause = _CAUSES.get(org.death_cause or "", "died")
        cx = w // 2 - 200
        y = h // 2 - 90
        app.draw_text(surface, f"Your organism {cause}.", cx, y, (255, 110, 110),
                      font=app.font_lg)
        y += 34
        app.draw_text(surface, f"Reached level {self.sim.progression.level} "
                      f"on day {org.calendar.day}.", cx, y, (220, 220, 220))
        y += 30
        for entry in self.sim.chronicle.recent(KEY, 5):
            app.draw_text(surface, entry["msg"][:60], cx, y, (150, 150, 150),
                          font=app.font_sm)
            y += 16
        y += 20
        app.draw_text(surface, "[Enter] begin a new life    [Esc] quit", cx, y,
                      (120, 255, 160))
