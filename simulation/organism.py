"""simulation/organism.py — The organism's mutable state.

Owns attributes, vitals, food, cooldowns, the activity state machine
and the calendar.  Every numeric field clamps on write, so no caller
can push a vital out of bounds::

    org = OrganismState()
    org.hunger += 250          # → 100.0
    org.apply_hunger_tick()    # fast tick (100 ms)
    org.apply_natural_decay(level=3, rng=rng)   # slow tick (2 s)

The organism has no notion of wall-clock time; the scheduler calls
the tick methods and the simulation decides what a death means.
"""

from __future__ import annotations
import math

from core.constants import (
    ACTIVITIES, ACTIVITY_STATES, GLOBAL_COOLDOWN_EXEMPT, HELD_STATES,
    IDLE, RESTING, DORMANT, REST, DORMANCY,
    VITAL_MAX, DEATH_STARVATION, DEATH_DISEASE, DEATH_MENTAL,
)
from core.tuning import get as _tun, section as _tun_section
from components.calendar import GameCalendar

DEFAULT_MAX_COOLDOWNS = {
    "hunt": 10, "rest": 5, "dormancy": 8, "explore": 7, "exercise": 8,
    "think": 12, "interact": 15, "tool": 20, "social": 10,
}


def clamp(value, lo: float, hi: float) -> float:
    """Clamp *value* into [lo, hi].  NaN and non-numbers collapse to *lo*."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return lo
    if math.isnan(v):
        return lo
    return max(lo, min(hi, v))


def _num(data: dict, key: str, default: float) -> float:
    """Read a finite number from *data*, falling back to *default*."""
    v = data.get(key, default)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return default
    if math.isnan(v) or math.isinf(v):
        return default
    return float(v)


class OrganismState:
    """Attributes, vitals, resources, cooldowns and activity state."""

    def __init__(self):
        self.reset()

    # ── Construction / reset ─────────────────────────────────────────

    def reset(self) -> None:
        """Back to a newborn organism."""
        self.max_attribute = float(_tun("organism", "max_attribute", 180.0))
        self._strength = 0.0
        self._speed = 0.0
        self._intelligence = 0.0
        init_attr = float(_tun("organism", "initial_attribute", 1.0))
        self.strength = init_attr
        self.speed = init_attr
        self.intelligence = init_attr

        self._hunger = 0.0
        self._disease = 0.0
        self._mental_health = 0.0
        self.mental_unlocked = False

        self._food_storage = 0.0
        self.food_storage = float(_tun("organism", "initial_food", 20.0))
        self.max_food_storage = self.calculate_max_food_storage(0)

        self.max_cooldowns: dict[str, int] = dict(DEFAULT_MAX_COOLDOWNS)
        for name, ticks in _tun_section("organism.cooldowns").items():
            if name in self.max_cooldowns:
                self.max_cooldowns[name] = int(ticks)
        self.cooldowns: dict[str, int] = {a: 0 for a in ACTIVITIES}
        self.global_cooldown = 0
        self.global_cooldown_duration = int(
            _tun("organism.cooldowns", "global", 1))

        self._activity_state = IDLE
        self.time_paused = False
        self.calendar = GameCalendar()
        self.death_check_counter = 0
        self.alive = True
        self.death_cause: str | None = None

    # ── Clamped fields ───────────────────────────────────────────────

    @property
    def strength(self) -> float:
        return self._strength

    @strength.setter
    def strength(self, value) -> None:
        self._strength = clamp(value, 0.0, self.max_attribute)

    @property
    def speed(self) -> float:
        return self._speed

    @speed.setter
    def speed(self, value) -> None:
        self._speed = clamp(value, 0.0, self.max_attribute)

    @property
    def intelligence(self) -> float:
        return self._intelligence

    @intelligence.setter
    def intelligence(self, value) -> None:
        self._intelligence = clamp(value, 0.0, self.max_attribute)

    @property
    def hunger(self) -> float:
        return self._hunger

    @hunger.setter
    def hunger(self, value) -> None:
        self._hunger = clamp(value, 0.0, VITAL_MAX)

    @property
    def disease(self) -> float:
        return self._disease

    @disease.setter
    def disease(self, value) -> None:
        self._disease = clamp(value, 0.0, VITAL_MAX)

    @property
    def mental_health(self) -> float:
        return self._mental_health

    @mental_health.setter
    def mental_health(self, value) -> None:
        # Fixed at 0 until the thought milestone unlocks it
        if not self.mental_unlocked:
            return
        self._mental_health = clamp(value, 0.0, VITAL_MAX)

    @property
    def food_storage(self) -> float:
        return self._food_storage

    @food_storage.setter
    def food_storage(self, value) -> None:
        self._food_storage = clamp(value, 0.0, math.inf)

    @property
    def activity_state(self) -> str:
        return self._activity_state

    @activity_state.setter
    def activity_state(self, value: str) -> None:
        if value not in ACTIVITY_STATES:
            raise ValueError(f"unknown activity state {value!r}")
        self._activity_state = value

    # ── Derived values ───────────────────────────────────────────────

    @staticmethod
    def calculate_max_food_storage(level: int) -> float:
        base = float(_tun("organism.food", "storage_base", 1000.0))
        growth = float(_tun("organism.food", "storage_growth", 1.5))
        return base * growth ** level

    def update_max_food_storage(self, level: int) -> None:
        self.max_food_storage = self.calculate_max_food_storage(level)

    def food_storage_percent(self) -> float:
        if self.max_food_storage <= 0:
            return 100.0
        return min(100.0, self.food_storage / self.max_food_storage * 100.0)

    def health_multiplier(self) -> float:
        """Overall condition in [0, 1], scales evolution-point growth."""
        hunger_part = (VITAL_MAX - self.hunger) / VITAL_MAX * 0.5
        mental_part = self.mental_health / VITAL_MAX * 0.3
        disease_part = (1.0 - self.disease / VITAL_MAX) * 0.2
        return max(0.0, hunger_part + mental_part + disease_part)

    def attributes(self) -> dict[str, float]:
        return {
            "strength": self.strength,
            "speed": self.speed,
            "intelligence": self.intelligence,
        }

    def attribute_sum(self) -> float:
        return self.strength + self.speed + self.intelligence

    def any_cooldown_active(self) -> bool:
        return any(v > 0 for v in self.cooldowns.values())

    # ── Activity gating ──────────────────────────────────────────────

    def can_start_activity(self, activity: str) -> bool:
        """Idle, own cooldown clear, and the global cooldown clear.

        Rest and dormancy ignore the global cooldown.  A resting
        organism may drop straight into dormancy once hunger is
        critical (emergency escape).
        """
        if activity not in self.cooldowns:
            return False
        if self.activity_state != IDLE:
            emergency = float(_tun("organism.dormancy", "emergency_hunger", 65.0))
            if not (self.activity_state == RESTING and activity == DORMANCY
                    and self.hunger >= emergency):
                return False
        if self.cooldowns[activity] > 0:
            return False
        if self.global_cooldown > 0 and activity not in GLOBAL_COOLDOWN_EXEMPT:
            return False
        return True

    def refusal_reason(self, activity: str) -> str:
        """Short description of what blocks *activity* (for the log)."""
        if activity not in self.cooldowns:
            return f"unknown activity '{activity}'"
        if self.activity_state != IDLE and not self.can_start_activity(activity):
            return f"busy ({self.activity_state})"
        if self.cooldowns[activity] > 0:
            return f"cooling down ({self.cooldowns[activity]} left)"
        if self.global_cooldown > 0 and activity not in GLOBAL_COOLDOWN_EXEMPT:
            return "global cooldown"
        return ""

    def start_cooldown(self, activity: str, use_global: bool = False) -> None:
        self.cooldowns[activity] = self.max_cooldowns.get(activity, 0)
        if use_global:
            self.global_cooldown = self.global_cooldown_duration

    def reset_cooldowns(self) -> None:
        for name in self.cooldowns:
            self.cooldowns[name] = 0
        self.global_cooldown = 0
        if self.activity_state in HELD_STATES:
            self.activity_state = IDLE

    # ── Ticks ────────────────────────────────────────────────────────

    def apply_hunger_tick(self) -> bool:
        """Fast tick.  Returns True when hunger has reached the limit."""
        if self.time_paused or not self.alive:
            return False
        if self.food_storage <= 0:
            if self.activity_state == RESTING:
                rise = _tun("organism.hunger", "starving_resting", 0.04)
            elif self.activity_state == DORMANT:
                rise = _tun("organism.hunger", "starving_dormant", 0.01)
            else:
                rise = _tun("organism.hunger", "starving", 0.1)
            self.hunger = self.hunger + rise
            return self.hunger >= VITAL_MAX
        if self.hunger > 0:
            self.hunger = self.hunger - _tun("organism.hunger", "recovery", 0.5)
        return False

    def apply_natural_decay(self, level: int, rng) -> None:
        """Slow tick: eat from storage, drift mental health and disease."""
        if self.time_paused or not self.alive:
            return

        if self.food_storage > 0:
            consumed = (_tun("organism.decay", "food_base", 0.5)
                        + level * _tun("organism.decay", "food_per_level", 0.1))
            if self.activity_state == RESTING:
                consumed *= _tun("organism.decay", "resting_mult", 0.5)
            elif self.activity_state == DORMANT:
                consumed *= _tun("organism.decay", "dormant_mult", 0.2)
            self.food_storage = self.food_storage - consumed
            if self.hunger > 0:
                self.hunger = self.hunger - _tun("organism.decay", "hunger_relief", 1.0)

        if self.mental_unlocked:
            if rng.chance(_tun("organism.decay", "mental_gain_chance", 0.3)):
                self.mental_health += _tun("organism.decay", "mental_gain", 0.2)
            else:
                self.mental_health -= _tun("organism.decay", "mental_loss", 0.1)

        if self.disease > 0 and rng.chance(_tun("organism.decay", "disease_recover_chance", 0.1)):
            self.disease -= _tun("organism.decay", "disease_recover", 0.5)
        elif rng.chance(_tun("organism.decay", "disease_worsen_chance", 0.05)):
            self.disease += _tun("organism.decay", "disease_worsen", 0.2)

    def tick_cooldowns(self) -> str | None:
        """Slow tick: count down cooldowns.

        Returns the previous activity state when a held state (resting,
        dormant) ended this tick, else None.
        """
        if self.time_paused or not self.alive:
            return None
        previous = self.activity_state

        if self.global_cooldown > 0:
            self.global_cooldown -= 1

        any_active = False
        for name, left in self.cooldowns.items():
            if left <= 0:
                continue
            any_active = True
            self.cooldowns[name] = left - 1
            if self.cooldowns[name] == 0:
                if ((name == REST and self.activity_state == RESTING)
                        or (name == DORMANCY and self.activity_state == DORMANT)):
                    self.activity_state = IDLE

        # Safety net: a held state never outlives every cooldown
        if not any_active and self.activity_state in HELD_STATES:
            self.activity_state = IDLE

        if self.activity_state != previous:
            return previous
        return None

    def advance_calendar(self, minutes: int) -> None:
        if self.time_paused or not self.alive:
            return
        self.calendar.advance(minutes)

    def check_death(self, level: int) -> str | None:
        """Return the cause of death, or None while the organism survives."""
        if self.time_paused or not self.alive:
            return None
        self.death_check_counter += 1
        if self.hunger >= VITAL_MAX:
            return DEATH_STARVATION
        if self.disease >= VITAL_MAX:
            return DEATH_DISEASE
        mental_level = int(_tun("organism.death", "mental_level", 50))
        if level > mental_level and self.mental_unlocked and self.mental_health <= 0:
            return DEATH_MENTAL
        return None

    # ── Progression hooks ────────────────────────────────────────────

    def unlock_mental_health(self) -> None:
        if self.mental_unlocked:
            return
        self.mental_unlocked = True
        self.mental_health = _tun("organism", "initial_mental_health", 50.0)

    def raise_attribute_ceiling(self, amount: float) -> None:
        self.max_attribute += max(0.0, float(amount))

    def add_attributes_on_evolution(self, rng) -> dict[str, float]:
        lo = _tun("progression", "evolve_attr_min", 0.1)
        span = _tun("progression", "evolve_attr_span", 0.2)
        gains = {}
        for attr in ("strength", "speed", "intelligence"):
            before = getattr(self, attr)
            setattr(self, attr, before + lo + rng.random() * span)
            gains[attr] = getattr(self, attr) - before
        return gains

    # ── Snapshot / restore ───────────────────────────────────────────

    def get_state_data(self) -> dict:
        return {
            "strength": self.strength,
            "speed": self.speed,
            "intelligence": self.intelligence,
            "max_attribute": self.max_attribute,
            "hunger": self.hunger,
            "mental_health": self.mental_health,
            "mental_unlocked": self.mental_unlocked,
            "disease": self.disease,
            "food_storage": self.food_storage,
            "max_food_storage": self.max_food_storage,
            "cooldowns": dict(self.cooldowns),
            "max_cooldowns": dict(self.max_cooldowns),
            "global_cooldown": self.global_cooldown,
            "global_cooldown_duration": self.global_cooldown_duration,
            "activity_state": self.activity_state,
            "time_paused": self.time_paused,
            "game_time": self.calendar.to_dict(),
            "death_check_counter": self.death_check_counter,
        }

    def load_saved_data(self, data) -> None:
        """Restore from a snapshot.  Bad or missing fields keep defaults."""
        self.reset()
        if not isinstance(data, dict):
            return

        self.max_attribute = max(1.0, _num(data, "max_attribute", self.max_attribute))
        self.strength = _num(data, "strength", self.strength)
        self.speed = _num(data, "speed", self.speed)
        self.intelligence = _num(data, "intelligence", self.intelligence)
        self.hunger = _num(data, "hunger", 0.0)
        self.disease = _num(data, "disease", 0.0)
        self.mental_unlocked = data.get("mental_unlocked") is True
        self.mental_health = _num(data, "mental_health", 0.0)
        self.food_storage = _num(data, "food_storage", self.food_storage)
        self.max_food_storage = _num(data, "max_food_storage", self.max_food_storage)

        saved_max = data.get("max_cooldowns")
        if isinstance(saved_max, dict):
            for name in self.max_cooldowns:
                self.max_cooldowns[name] = max(0, int(_num(saved_max, name, self.max_cooldowns[name])))
        saved_cd = data.get("cooldowns")
        if isinstance(saved_cd, dict):
            for name in self.cooldowns:
                self.cooldowns[name] = max(0, int(_num(saved_cd, name, 0)))
        self.global_cooldown = max(0, int(_num(data, "global_cooldown", 0)))
        self.global_cooldown_duration = max(0, int(_num(
            data, "global_cooldown_duration", self.global_cooldown_duration)))

        state = data.get("activity_state", IDLE)
        # The owner re-arms the idle return for a restored timed state
        self._activity_state = state if state in ACTIVITY_STATES else IDLE
        self.time_paused = data.get("time_paused") is True

        gt = data.get("game_time")
        if isinstance(gt, dict):
            self.calendar.day = max(1, int(_num(gt, "day", 1)))
            self.calendar.hour = int(clamp(_num(gt, "hour", 0), 0, 23))
            self.calendar.minute = int(clamp(_num(gt, "minute", 0), 0, 59))
        self.death_check_counter = max(0, int(_num(data, "death_check_counter", 0)))

    def debug_info(self) -> dict:
        return {
            "state": self.activity_state,
            "hunger": round(self.hunger, 2),
            "disease": round(self.disease, 2),
            "mental": round(self.mental_health, 2),
            "food": round(self.food_storage, 2),
            "gcd": self.global_cooldown,
            "paused": self.time_paused,
        }
