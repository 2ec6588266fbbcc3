"""
scenes/console_scene.py — Developer console (F1)

Overlay with a one-line command prompt on top of the running game.
Commands go through ``DebugConsole.execute``::

  hunger 80        disease 0       mental 50      food 500
  str 25           spd 25          int 50
  level 51         points 1e6
  event Whale song area land       clear          cooldowns
  pause            resume

Controls:
  Enter      = run the typed command
  Up         = recall the previous command
  F4         = reload data/tuning.toml
  Escape/F1  = close
"""

from __future__ import annotations
import pygame

from core import tuning
from core.app import App
from core.scene import Scene
from ui.helpers import draw_overlay, draw_title_bar

_TEXT = (200, 200, 200)
_DIM = (110, 110, 110)
_PROMPT = (120, 255, 160)


class ConsoleScene(Scene):
    draws_below = True
    ticks_below = True

    def __init__(self, sim):
        self.sim = sim
        self.line = ""
        self.history: list[str] = []
        self.output: list[str] = []

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_ESCAPE, pygame.K_F1):
            app.pop_scene()
            return
        if event.key == pygame.K_F4:
            tuning.reload()
            self._say("tuning reloaded")
            return
        if event.key == pygame.K_RETURN:
            self._run()
            return
        if event.key == pygame.K_UP and self.history:
            self.line = self.history[-1]
            return
        if event.key == pygame.K_BACKSPACE:
            self.line = self.line[:-1]
            return
        if event.unicode and event.unicode.isprintable():
            self.line += event.unicode

    def _run(self):
        line = self.line.strip()
        self.line = ""
        if not line:
            return
        self.history.append(line)
        ok = self.sim.console.execute(line)
        self._say(f"{'ok' if ok else 'refused'}: {line}")

    def _say(self, msg: str):
        self.output.append(msg)
        del self.output[:-12]

    def draw(self, surface: pygame.Surface, app: App):
        draw_overlay(surface, 170)
        w, h = surface.get_size()
        px, py, pw = 40, 60, w - 80
        draw_title_bar(surface, app, px, py, pw, "Developer Console")
        y = py + 40

        info = self.sim.debug_info()
        app.draw_text(surface, f"t={info['t_ms']}ms  level={info['level']}  "
                      f"points={info['points']}  tasks={info['pending_tasks']}",
                      px + 12, y, _DIM, font=app.font_sm)
        y += 16
        app.draw_text(surface, str(info["organism"]), px + 12, y, _DIM, font=app.font_sm)
        y += 16
        app.draw_text(surface, str(info["events"]), px + 12, y, _DIM, font=app.font_sm)
        y += 24

        for msg in self.output:
            app.draw_text(surface, msg, px + 12, y, _TEXT, font=app.font_sm)
            y += 14

        app.draw_text(surface, f"> {self.line}_", px + 12, h - 60, _PROMPT)
