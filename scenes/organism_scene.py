"""
scenes/organism_scene.py — Main HUD

Shows the organism's vitals, attributes, food, evolution progress,
active events and the chronicle feeds, and maps keys to commands:

  H hunt   R rest   D dormancy   E explore   X exercise
  T think  I interact   M make tool   S socialize
  Space    gather evolution points
  V        evolve
  P        pause / resume time
  1 2 3    move to sea / land / sky
  F1       developer console
"""

from __future__ import annotations
import pygame

from core.app import App
from core.constants import (
    HUNT, REST, DORMANCY, EXPLORE, EXERCISE, THINK, INTERACT, TOOL, SOCIAL,
    ACTIVITIES, AREAS, MAX_EVOLUTION_LEVEL, VITAL_MAX,
)
from core.fmt import format_number
from core.scene import Scene
from components.chronicle import DAILY, KEY
from ui.helpers import (
    draw_bar, draw_stat_row, draw_activity_row, draw_title_bar, food_label,
    KEY_ROW_H,
)

_BG = (14, 22, 30)
_HEADER = (0, 220, 200)
_TEXT = (200, 200, 200)
_DIM = (100, 100, 110)

_KEYMAP = {
    pygame.K_h: HUNT,
    pygame.K_r: REST,
    pygame.K_d: DORMANCY,
    pygame.K_e: EXPLORE,
    pygame.K_x: EXERCISE,
    pygame.K_t: THINK,
    pygame.K_i: INTERACT,
    pygame.K_m: TOOL,
    pygame.K_s: SOCIAL,
}
_KEY_LABEL = {HUNT: "H", REST: "R", DORMANCY: "D", EXPLORE: "E", EXERCISE: "X",
              THINK: "T", INTERACT: "I", TOOL: "M", SOCIAL: "S"}


class OrganismScene(Scene):
    def __init__(self, sim):
        self.sim = sim
        self._dead = False
        sim.bus.subscribe("OrganismDied", self._on_died)

    # ── lifecycle ────────────────────────────────────────────────────

    def on_enter(self, app: App):
        self._dead = not self.sim.alive

    def on_exit(self, app: App):
        self.sim.save()

    def _on_died(self, event):
        self._dead = True

    # ── input ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type != pygame.KEYDOWN:
            return
        sim = self.sim
        if event.key == pygame.K_F1:
            from scenes.console_scene import ConsoleScene
            app.push_scene(ConsoleScene(sim))
            return
        if event.key in _KEYMAP:
            sim.perform(_KEYMAP[event.key])
        elif event.key == pygame.K_SPACE:
            sim.gather()
        elif event.key == pygame.K_v:
            sim.evolve()
        elif event.key == pygame.K_p:
            sim.set_time_paused(not sim.organism.time_paused)
        elif event.key in (pygame.K_1, pygame.K_2, pygame.K_3):
            sim.set_area(AREAS[event.key - pygame.K_1])

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        self.sim.update(dt)
        if self._dead:
            from scenes.death_scene import DeathScene
            self._dead = False
            app.push_scene(DeathScene(self.sim))

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill(_BG)
        sim = self.sim
        org = sim.organism
        prog = sim.progression
        w = surface.get_width()

        cal = org.calendar
        paused = "  [PAUSED]" if org.time_paused else ""
        draw_title_bar(surface, app, 0, 0, w,
                       f"{cal.stamp()} ({cal.time_of_day()})  "
                       f"area: {sim.engine.current_area}{paused}")

        # ── Vitals / attributes ──
        x, y = 16, 44
        app.draw_text(surface, "VITALS", x, y, _HEADER)
        y += 20
        draw_stat_row(surface, app, x, y, label="Hunger", value=org.hunger,
                      maximum=VITAL_MAX, color=(230, 150, 60))
        y += 18
        draw_stat_row(surface, app, x, y, label="Disease", value=org.disease,
                      maximum=VITAL_MAX, color=(170, 90, 200))
        y += 18
        if org.mental_unlocked:
            draw_stat_row(surface, app, x, y, label="Mental", value=org.mental_health,
                          maximum=VITAL_MAX, color=(90, 170, 250))
        else:
            app.draw_text(surface, "Mental      (not yet aware)", x, y, _DIM,
                          font=app.font_sm)
        y += 24
        app.draw_text(surface, "ATTRIBUTES", x, y, _HEADER)
        y += 20
        for attr in ("strength", "speed", "intelligence"):
            draw_stat_row(surface, app, x, y, label=attr.capitalize(),
                          value=getattr(org, attr), maximum=org.max_attribute,
                          color=(120, 220, 120))
            y += 18
        y += 6
        app.draw_text(surface, f"Food  {food_label(org.food_storage, org.max_food_storage)}",
                      x, y, _TEXT, font=app.font_sm)
        draw_bar(surface, x + 230, y + 1, 120, org.food_storage_percent() / 100.0,
                 (200, 200, 90))

        # ── Evolution ──
        y += 30
        app.draw_text(surface, f"EVOLUTION  level {prog.level}", x, y, _HEADER)
        y += 20
        if prog.level >= MAX_EVOLUTION_LEVEL:
            app.draw_text(surface, "Maximum level reached", x, y, _TEXT, font=app.font_sm)
        else:
            app.draw_text(surface, f"{format_number(prog.points)} / "
                          f"{format_number(prog.required)} pts", x, y, _TEXT,
                          font=app.font_sm)
            draw_bar(surface, x + 230, y + 1, 120, prog.progress_percent() / 100.0,
                     (90, 220, 220))
            if prog.can_evolve():
                app.draw_text(surface, "[V] evolve!", x + 360, y, (255, 255, 120),
                              font=app.font_sm)

        # ── Activities ──
        y += 30
        app.draw_text(surface, "ACTIVITIES   [Space] gather", x, y, _HEADER)
        y += 20
        for activity in ACTIVITIES:
            if not prog.is_unlocked(activity):
                continue
            draw_activity_row(surface, app, x, y, key=_KEY_LABEL[activity],
                              name=activity,
                              cooldown=org.cooldowns[activity],
                              max_cooldown=org.max_cooldowns[activity],
                              ready=sim.activities.can_perform(activity))
            y += KEY_ROW_H
        app.draw_text(surface, f"state: {org.activity_state}   gcd: {org.global_cooldown}",
                      x, y + 4, _DIM, font=app.font_sm)

        # ── Events / chronicle ──
        rx, ry = w // 2 + 10, 44
        app.draw_text(surface, "ACTIVE EVENTS", rx, ry, _HEADER)
        ry += 20
        actives = sim.engine.get_active_events()
        if not actives and not sim.engine.afflictions:
            app.draw_text(surface, "calm waters", rx, ry, _DIM, font=app.font_sm)
            ry += 16
        for active in actives:
            app.draw_text(surface, f"{active.name} ({active.remaining})", rx, ry,
                          (255, 200, 120), font=app.font_sm)
            ry += 16
        for kind, aff in sim.engine.afflictions.items():
            app.draw_text(surface, f"{kind} x{aff.severity:.1f} ({aff.remaining})",
                          rx, ry, (255, 120, 120), font=app.font_sm)
            ry += 16

        for title, feed in (("KEY EVENTS", KEY), ("DAILY LOG", DAILY)):
            ry += 14
            app.draw_text(surface, title, rx, ry, _HEADER)
            ry += 20
            for entry in reversed(sim.chronicle.recent(feed)):
                app.draw_text(surface, f"{entry['stamp'][-5:]} {entry['msg'][:52]}",
                              rx, ry, _TEXT, font=app.font_sm)
                ry += 14
