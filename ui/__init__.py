"""ui — Drawing helpers shared by the HUD and the overlays."""

from ui.helpers import (
    draw_overlay, draw_title_bar, draw_bar, draw_stat_row, draw_activity_row,
    food_label,
)

__all__ = [
    "draw_overlay", "draw_title_bar", "draw_bar", "draw_stat_row",
    "draw_activity_row", "food_label",
]
