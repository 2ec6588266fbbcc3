"""
core/app.py — Pygame window, frame pump and scene stack

The app knows nothing about organisms.  It owns the window, turns wall
clock into per-frame ``dt`` and hands input to whichever scene is on
top.  The simulation lives inside the scenes.

    app = App(title="Primordial", width=960, height=640)
    app.push_scene(OrganismScene(sim))
    app.run()
"""

from __future__ import annotations
import pygame

from core.scene import Scene
from core.tuning import get as _tun


class App:
    def __init__(self, title: str = "Primordial", width: int = 960, height: int = 640):
        pygame.init()
        self.title = title
        self.size = (width, height)
        # Everything draws at the design size and is stretched on flip
        self.canvas = pygame.Surface(self.size)
        self.screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)
        pygame.display.set_caption(title)
        # Held keys repeat so the console prompt can hold Backspace
        pygame.key.set_repeat(int(_tun("app", "key_delay_ms", 350)),
                              int(_tun("app", "key_interval_ms", 40)))

        self.clock = pygame.time.Clock()
        self.fps = int(_tun("app", "fps", 60))
        self.dt = 0.0
        self.frames = 0
        self.running = True
        self.fullscreen = False

        self._stack: list[Scene] = []

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    # ── Scene stack ──────────────────────────────────────────────────

    @property
    def scene(self) -> Scene | None:
        return self._stack[-1] if self._stack else None

    @property
    def below(self) -> Scene | None:
        """The scene directly under the top one, if any."""
        return self._stack[-2] if len(self._stack) > 1 else None

    def push_scene(self, scene: Scene):
        if self.scene:
            self.scene.on_exit(self)
        self._stack.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if not self._stack:
            return
        self._stack.pop().on_exit(self)
        if self.scene:
            self.scene.on_enter(self)

    # ── Frame ────────────────────────────────────────────────────────

    def _frame_dt(self) -> float:
        """Seconds since the last frame.

        Capped so a stalled window (dragging, a debugger breakpoint)
        comes back as one ordinary frame instead of a long burst.
        """
        elapsed = self.clock.tick(self.fps) / 1000.0
        return min(elapsed, float(_tun("app", "max_frame_s", 0.25)))

    def _pump_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                self.toggle_fullscreen()
            elif event.type == pygame.VIDEORESIZE:
                if not self.fullscreen:
                    self.screen = pygame.display.set_mode(
                        (event.w, event.h), pygame.RESIZABLE)
            elif self.scene:
                self.scene.handle_event(event, self)

    def _update(self):
        top, under = self.scene, self.below
        if top is None:
            return
        if under is not None and top.ticks_below:
            under.update(self.dt, self)
        top.update(self.dt, self)

    def _draw(self):
        # update() may have pushed or popped, so re-read the stack
        top, under = self.scene, self.below
        if top is None:
            return
        if under is not None and top.draws_below:
            under.draw(self.canvas, self)
        top.draw(self.canvas, self)
        pygame.transform.scale(self.canvas, self.screen.get_size(), self.screen)
        pygame.display.flip()

    def run(self):
        while self.running:
            self.dt = self._frame_dt()
            self._pump_events()
            self._update()
            self._draw()
            self.frames += 1
        self.shutdown()

    def shutdown(self):
        """Let every scene persist, top first, then close pygame."""
        while self._stack:
            self._stack.pop().on_exit(self)
        print(f"[APP] Closed after {self.frames} frames")
        pygame.quit()

    def toggle_fullscreen(self):
        """F11."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(self.size, pygame.RESIZABLE)

    # ── Text ─────────────────────────────────────────────────────────

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None) -> pygame.Rect:
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (x, y))
