"""simulation/console.py — Developer console commands.

Every setter accepts raw input (numbers or strings typed into the
console), refuses anything that is not a finite number and clamps the
rest through the organism's own bounds::

    sim.console.set_hunger("80")
    sim.console.set_level(21)
    sim.console.trigger_event("Whale song")
    sim.console.execute("food 500")       # text form used by the UI
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING

from components.chronicle import KEY
from core.constants import MAX_EVOLUTION_LEVEL, VITAL_MAX

if TYPE_CHECKING:
    from simulation.world_sim import Simulation

# Setting one of these can cross an unlock threshold
ATTRIBUTES = ("strength", "speed", "intelligence")


def parse_number(value) -> float | None:
    """Finite float from *value*, or None."""
    if isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


class DebugConsole:
    """Direct state overrides for testing and tuning."""

    def __init__(self, sim: "Simulation"):
        self.sim = sim

    # ── Attributes ───────────────────────────────────────────────────

    def _set_attr(self, attr: str, value, hi: float) -> bool:
        num = parse_number(value)
        if num is None:
            self._reject(attr, value)
            return False
        setattr(self.sim.organism, attr, min(max(num, 0.0), hi))
        if attr in ATTRIBUTES:
            self.sim.progression.refresh_unlocks()
        self._done(f"{attr} set to {getattr(self.sim.organism, attr):.2f}")
        return True

    def set_strength(self, value) -> bool:
        return self._set_attr("strength", value, self.sim.organism.max_attribute)

    def set_speed(self, value) -> bool:
        return self._set_attr("speed", value, self.sim.organism.max_attribute)

    def set_intelligence(self, value) -> bool:
        return self._set_attr("intelligence", value, self.sim.organism.max_attribute)

    # ── Vitals / resources ───────────────────────────────────────────

    def set_hunger(self, value) -> bool:
        return self._set_attr("hunger", value, VITAL_MAX)

    def set_disease(self, value) -> bool:
        return self._set_attr("disease", value, VITAL_MAX)

    def set_mental_health(self, value) -> bool:
        if not self.sim.organism.mental_unlocked:
            self._reject("mental_health", value, "locked until the first thought")
            return False
        return self._set_attr("mental_health", value, VITAL_MAX)

    def set_food_storage(self, value) -> bool:
        org = self.sim.organism
        return self._set_attr("food_storage", value, org.max_food_storage)

    # ── Progression ──────────────────────────────────────────────────

    def set_level(self, value) -> bool:
        num = parse_number(value)
        if num is None or num != int(num) or not 0 <= num <= MAX_EVOLUTION_LEVEL:
            self._reject("level", value)
            return False
        ok = self.sim.progression.set_level(int(num))
        if ok:
            print(f"[CONSOLE] level set to {int(num)}")
        self.sim.bus.drain()
        return ok

    def set_points(self, value) -> bool:
        num = parse_number(value)
        if num is None or num < 0:
            self._reject("points", value)
            return False
        self.sim.progression.set_points(num)
        self._done(f"evolution points set to {num:.1f}")
        return True

    # ── Cooldowns / events / time ────────────────────────────────────

    def reset_cooldowns(self) -> None:
        self.sim.organism.reset_cooldowns()
        self._done("all cooldowns reset")

    def trigger_event(self, name: str) -> bool:
        ok = self.sim.engine.trigger_event_by_name(str(name))
        if ok:
            print(f"[CONSOLE] triggered event '{name}'")
        else:
            print(f"[CONSOLE] cannot trigger '{name}' (unknown, ineligible, active or at cap)")
        self.sim.bus.drain()
        return ok

    def set_area(self, area: str) -> bool:
        ok = self.sim.set_area(str(area))
        if not ok:
            print(f"[CONSOLE] unknown area '{area}'")
        return ok

    def clear_events(self) -> None:
        self.sim.engine.clear_all_events()
        self._done("active events cleared")

    def set_time_paused(self, paused: bool) -> None:
        self.sim.set_time_paused(paused)

    # ── Text commands ────────────────────────────────────────────────

    COMMANDS = {
        "str": "set_strength", "strength": "set_strength",
        "spd": "set_speed", "speed": "set_speed",
        "int": "set_intelligence", "intelligence": "set_intelligence",
        "hunger": "set_hunger", "disease": "set_disease",
        "mental": "set_mental_health", "food": "set_food_storage",
        "level": "set_level", "points": "set_points",
        "event": "trigger_event", "area": "set_area",
    }

    def execute(self, line: str) -> bool:
        """Run one typed command, e.g. ``hunger 50`` or ``event Whale song``."""
        parts = line.strip().split(None, 1)
        if not parts:
            return False
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""
        if cmd == "cooldowns":
            self.reset_cooldowns()
            return True
        if cmd == "clear":
            self.clear_events()
            return True
        if cmd in ("pause", "resume"):
            self.set_time_paused(cmd == "pause")
            return True
        method = self.COMMANDS.get(cmd)
        if method is None:
            print(f"[CONSOLE] unknown command '{cmd}'")
            return False
        return getattr(self, method)(arg)

    # ── Internals ────────────────────────────────────────────────────

    def _done(self, msg: str) -> None:
        print(f"[CONSOLE] {msg}")
        self.sim.chronicle.record(KEY, f"Console: {msg}",
                                  stamp=self.sim.organism.calendar.stamp())
        self.sim.bus.drain()

    def _reject(self, what: str, value, why: str = "not a number") -> None:
        print(f"[CONSOLE] refused {what}={value!r}: {why}")
