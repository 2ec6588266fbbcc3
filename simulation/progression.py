"""simulation/progression.py — Evolution points, levels and unlocks.

Points trickle in every fast tick (scaled by the organism's health) and
in bursts when the player gathers.  Once points cover the requirement
for the next level the player may ``evolve()``; evolving spends the
points, feeds the attributes, raises the attribute ceiling and the
food storage soft-cap, and may unlock new activities.

    prog = ProgressionTracker(org, rng, bus, chronicle)
    prog.tick_growth()          # fast tick
    prog.gather()               # player click
    if prog.can_evolve():
        prog.evolve()

Unlocks are sticky: once an activity appears it never disappears,
even if the attribute that unlocked it later drops.
"""

from __future__ import annotations

from core.constants import (
    BASE_ACTIVITIES, EXPLORE, EXERCISE, THINK, INTERACT, TOOL, SOCIAL,
    ACTIVITIES, MAX_EVOLUTION_LEVEL,
)
from core.events import (
    EventBus, EvolutionReady, LevelUp, ActivityUnlocked, ThoughtMilestone,
)
from core.fmt import format_number
from core.tuning import get as _tun
from components.chronicle import Chronicle, DAILY, KEY

LATE_GAME_ACTIVITIES = (INTERACT, TOOL, SOCIAL)


class ProgressionTracker:
    """Evolution level, points, thought milestone and activity unlocks."""

    def __init__(self, organism, rng, bus: EventBus | None = None,
                 chronicle: Chronicle | None = None):
        self.organism = organism
        self.rng = rng
        self.bus = bus
        self.chronicle = chronicle
        self.reset()

    def reset(self) -> None:
        self.level: int = 0
        self.points: float = 0.0
        self.has_thought: bool = False
        self.evolution_ready_notified: bool = False
        self.unlocked: set[str] = set(BASE_ACTIVITIES)

    # ── Requirements ─────────────────────────────────────────────────

    def required_points(self, level: int) -> float:
        """Points needed to *reach* ``level`` from the one below it."""
        if level <= 0:
            return 0.0
        base = float(_tun("progression", "base_points", 100.0))
        growth = float(_tun("progression", "growth", 1.5))
        bonus = 1.0 + self.organism.attribute_sum() * float(
            _tun("progression", "attribute_factor", 0.1))
        return base * growth ** (level - 1) * bonus

    @property
    def required(self) -> float:
        """Requirement for the next level."""
        return self.required_points(self.level + 1)

    def can_evolve(self) -> bool:
        return self.level < MAX_EVOLUTION_LEVEL and self.points >= self.required

    def progress_percent(self) -> float:
        if self.level >= MAX_EVOLUTION_LEVEL:
            return 100.0
        req = self.required
        return 100.0 if req <= 0 else min(100.0, self.points / req * 100.0)

    def requirements_table(self, levels=None) -> list[tuple[int, float]]:
        """``[(level, points), ...]``; defaults to 1-20 and 91-100."""
        if levels is None:
            levels = list(range(1, 21)) + list(range(91, MAX_EVOLUTION_LEVEL + 1))
        return [(lv, self.required_points(lv)) for lv in levels]

    # ── Growth ───────────────────────────────────────────────────────

    def growth_multiplier(self) -> float:
        lv = self.level
        if lv <= 10:
            return 1.0
        if lv <= 30:
            return 0.8
        if lv <= 60:
            return 0.6
        if lv <= 80:
            return 0.4
        return 0.2

    def natural_growth(self) -> float:
        """Points earned per fast tick.  Zero while paused."""
        if self.organism.time_paused:
            return 0.0
        health = self.organism.health_multiplier()
        if self.level == 0:
            return float(_tun("progression", "newborn_growth", 0.1)) * health
        return self.level ** 1.2 * 0.1 * health * self.growth_multiplier()

    def click_growth(self) -> float:
        if self.level == 0:
            return float(_tun("progression", "newborn_click", 1.0)) \
                * self.organism.health_multiplier()
        return self.natural_growth() * float(_tun("progression", "click_mult", 15.0))

    def tick_growth(self) -> float:
        """Fast tick: add natural growth.  Returns the amount added."""
        if self.organism.time_paused or not self.organism.alive:
            return 0.0
        growth = self.natural_growth()
        if growth > 0:
            self.add_points(growth)
        return growth

    def gather(self) -> float:
        """Player click: burst of points.  Returns the amount added."""
        if not self.organism.alive:
            return 0.0
        points = self.click_growth()
        self.add_points(points)
        self._log(DAILY, f"Gathered {format_number(points)} evolution points")
        return points

    def add_points(self, points: float) -> None:
        self.points = max(0.0, self.points + float(points))
        self.check_evolution()

    def check_evolution(self) -> bool:
        """Emit the evolution-ready notice once per threshold crossing."""
        if self.can_evolve():
            if not self.evolution_ready_notified:
                self.evolution_ready_notified = True
                self._log(KEY, f"Ready to evolve to level {self.level + 1}")
                self._emit(EvolutionReady(level=self.level + 1, required=self.required))
            return True
        self.evolution_ready_notified = False
        return False

    # ── Level changes ────────────────────────────────────────────────

    def evolve(self) -> bool:
        if not self.can_evolve():
            return False
        self.points -= self.required
        self.level += 1
        org = self.organism
        org.update_max_food_storage(self.level)
        org.raise_attribute_ceiling(
            _tun("progression", "attribute_ceiling_per_level", 2.0))
        org.add_attributes_on_evolution(self.rng)

        self._log(KEY, f"Evolved to level {self.level}")
        print(f"[EVOLVE] level {self.level} (points left {self.points:.1f})")
        if self.level == MAX_EVOLUTION_LEVEL:
            self._log(KEY, "Reached the highest evolution level!")
        self._emit(LevelUp(level=self.level))
        self.refresh_unlocks()
        self.evolution_ready_notified = False
        self.check_evolution()
        return True

    def set_level(self, level: int) -> bool:
        """Console override: jump to *level* with zero points."""
        if isinstance(level, bool) or not isinstance(level, int):
            return False
        if not 0 <= level <= MAX_EVOLUTION_LEVEL:
            return False
        self.level = level
        self.points = 0.0
        self.evolution_ready_notified = False
        self.organism.update_max_food_storage(level)
        self._log(KEY, f"Evolution level set to {level} from the console")
        self._emit(LevelUp(level=level))
        self.refresh_unlocks()
        return True

    def set_points(self, points: float) -> None:
        self.points = max(0.0, float(points))
        self.check_evolution()

    # ── Unlocks ──────────────────────────────────────────────────────

    def unlock_condition(self, activity: str) -> bool:
        org = self.organism
        if activity in BASE_ACTIVITIES:
            return True
        if activity == EXPLORE:
            return self.level >= int(_tun("progression.unlocks", "explore_level", 6))
        if activity == EXERCISE:
            return org.strength >= float(_tun("progression.unlocks", "exercise_strength", 20.0))
        if activity == THINK:
            return org.intelligence >= float(_tun("progression.unlocks", "think_intelligence", 45.0))
        if activity in LATE_GAME_ACTIVITIES:
            return (self.level >= int(_tun("progression.unlocks", "late_game_level", 51))
                    and self.has_thought)
        return False

    def refresh_unlocks(self) -> list[str]:
        """Unlock anything whose condition now holds.  Returns new ones."""
        new = []
        for activity in ACTIVITIES:
            if activity not in self.unlocked and self.unlock_condition(activity):
                self.unlocked.add(activity)
                new.append(activity)
                self._log(KEY, f"New ability: {activity}")
                self._emit(ActivityUnlocked(activity=activity))
        return new

    def is_unlocked(self, activity: str) -> bool:
        return activity in self.unlocked

    def on_think(self) -> bool:
        """First thought: one-way milestone.  Returns True the first time."""
        if self.has_thought:
            return False
        self.has_thought = True
        self.organism.unlock_mental_health()
        self._log(KEY, "Your first thought! Mental health now matters")
        self._emit(ThoughtMilestone())
        self.refresh_unlocks()
        return True

    # ── Snapshot / restore ───────────────────────────────────────────

    def get_state_data(self) -> dict:
        return {
            "level": self.level,
            "points": self.points,
            "has_thought": self.has_thought,
            "unlocked": sorted(self.unlocked),
            "evolution_ready_notified": self.evolution_ready_notified,
        }

    def load_saved_data(self, data) -> None:
        self.reset()
        if not isinstance(data, dict):
            return
        level = data.get("level")
        if isinstance(level, int) and not isinstance(level, bool) \
                and 0 <= level <= MAX_EVOLUTION_LEVEL:
            self.level = level
        points = data.get("points")
        if isinstance(points, (int, float)) and not isinstance(points, bool) \
                and points == points and points >= 0:
            self.points = float(points)
        self.has_thought = data.get("has_thought") is True
        self.evolution_ready_notified = data.get("evolution_ready_notified") is True
        unlocked = data.get("unlocked")
        if isinstance(unlocked, list):
            self.unlocked |= {a for a in unlocked if a in ACTIVITIES}
        if self.has_thought:
            self.organism.mental_unlocked = True

    # ── Internals ────────────────────────────────────────────────────

    def _log(self, feed: str, msg: str) -> None:
        if self.chronicle is not None:
            self.chronicle.record(feed, msg, stamp=self.organism.calendar.stamp())

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.emit(event)
