"""ui.helpers — Shared drawing utilities for the HUD and overlays."""

from __future__ import annotations
import pygame

from core.fmt import format_number


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_title_bar(
    surface: pygame.Surface, app,
    x: int, y: int, w: int, text: str,
) -> None:
    """Draw a 30 px title bar at the top of a panel."""
    pygame.draw.rect(surface, (40, 60, 75), (x, y, w, 30))
    app.draw_text(surface, text, x + 12, y + 7,
                  (200, 230, 255), font=app.font_lg)


# ── bars ───────────────────────────────────────────────────────────

BAR_H = 12


def draw_bar(
    surface: pygame.Surface,
    x: int, y: int, w: int,
    frac: float,
    color: tuple,
    *,
    bg: tuple = (40, 40, 48),
    h: int = BAR_H,
) -> pygame.Rect:
    """Horizontal progress bar filled to *frac* (clamped to 0..1)."""
    frac = max(0.0, min(1.0, frac))
    rect = pygame.Rect(x, y, w, h)
    pygame.draw.rect(surface, bg, rect)
    if frac > 0:
        pygame.draw.rect(surface, color, (x, y, int(w * frac), h))
    pygame.draw.rect(surface, (80, 80, 90), rect, 1)
    return rect


def draw_stat_row(
    surface: pygame.Surface,
    app,
    x: int, y: int,
    *,
    label: str,
    value: float,
    maximum: float,
    color: tuple,
    bar_w: int = 160,
) -> None:
    """``label  [#####-----]  value`` on one line."""
    app.draw_text(surface, label, x, y, (200, 200, 200), font=app.font_sm)
    frac = value / maximum if maximum > 0 else 0.0
    draw_bar(surface, x + 110, y + 1, bar_w, frac, color)
    app.draw_text(surface, f"{value:.1f}", x + 120 + bar_w, y,
                  (220, 220, 220), font=app.font_sm)


# ── activity keys ──────────────────────────────────────────────────

KEY_ROW_H = 20


def draw_activity_row(
    surface: pygame.Surface,
    app,
    x: int, y: int,
    *,
    key: str,
    name: str,
    cooldown: int,
    max_cooldown: int,
    ready: bool,
) -> pygame.Rect:
    """One activity line with its key, name and cooldown bar."""
    color = (120, 255, 160) if ready else (110, 110, 110)
    app.draw_text(surface, f"[{key}] {name}", x, y, color, font=app.font_sm)
    frac = 1.0 - (cooldown / max_cooldown) if max_cooldown and cooldown else 1.0
    return draw_bar(surface, x + 150, y + 2, 80, frac,
                    (80, 160, 255) if cooldown else (60, 120, 80), h=8)


def food_label(food: float, max_food: float) -> str:
    return f"{format_number(food)} / {format_number(max_food)}"
