"""
core/scene.py — Scene interface

Every screen is a Scene and the app holds a stack of them.  Only the
top scene gets input.  An overlay may set ``draws_below`` to render on
top of the scene under it, and ``ticks_below`` to keep that scene's
simulation running while the overlay is open.

    class MyScene(Scene):
        def update(self, dt, app):
            self.sim.update(dt)

        def draw(self, surface, app):
            app.draw_text(surface, "hello", 10, 10)
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    draws_below = False
    ticks_below = False

    def on_enter(self, app: App):
        """Called when this scene becomes active (pushed or revealed)."""
        pass

    def on_exit(self, app: App):
        """Called when this scene is removed or covered."""
        pass

    def handle_event(self, event: pygame.event.Event, app: App):
        """Process a single pygame event."""
        pass

    def update(self, dt: float, app: App):
        """Advance by dt seconds."""
        pass

    def draw(self, surface: pygame.Surface, app: App):
        """Draw to the screen surface."""
        pass
