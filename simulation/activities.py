"""simulation/activities.py — Player commands and their outcomes.

Each command checks its preconditions (alive, unlocked, idle, cooldowns)
and either refuses without touching any state or starts the activity
cooldown, switches the activity state and rolls the outcome.

Hunting, exploring and the late-game activities are *timed*: the state
flips back to idle a moment later through the ``defer`` hook (the
scheduler's ``call_later``).  Rest and dormancy are *held* until their
own cooldown runs out.  A timed state never returns to idle while time
is paused; the return waits for ``resume_idle_returns()``.

    resolver = ActivityResolver(org, prog, engine, rng, bus, chronicle,
                                defer=scheduler.call_later)
    result = resolver.hunt()
    if not result.accepted:
        ...
"""

from __future__ import annotations
from typing import Callable

from core.constants import (
    HUNT, REST, DORMANCY, EXPLORE, EXERCISE, THINK, INTERACT, TOOL, SOCIAL,
    STATE_FOR_ACTIVITY, IDLE, HELD_STATES,
)
from core.events import EventBus, ActivityRefused, ActivityResolved, StateChanged
from core.fmt import format_number
from core.tuning import get as _tun
from components.catalog import ActivityResult
from components.chronicle import Chronicle, DAILY, KEY

PITY_HUNGER = 85.0


def hunt_failure_chance(level: int, hunger: float, strength: float,
                        speed: float, intelligence: float) -> float:
    """Probability that a hunt comes back empty.

    Better with level and attributes, floored at 20 %.  Past 85 hunger
    the pity bonus lowers it further, down to 5 %.
    """
    base = 0.6 - level * 0.01
    fail = max(0.2, base - (strength + speed + intelligence) * 0.005)
    if hunger >= PITY_HUNGER:
        fail = max(0.05, fail - (hunger - PITY_HUNGER) * 0.03)
    return fail


def explore_find_chance(hunger: float) -> float:
    chance = 0.4
    if hunger >= PITY_HUNGER:
        chance = min(0.9, chance + (hunger - PITY_HUNGER) * 0.02)
    return chance


class ActivityResolver:
    """Runs the nine player activities against the organism."""

    def __init__(self, organism, progression, engine, rng,
                 bus: EventBus | None = None,
                 chronicle: Chronicle | None = None,
                 defer: Callable[[int, Callable[[], None]], object] | None = None):
        self.organism = organism
        self.progression = progression
        self.engine = engine
        self.rng = rng
        self.bus = bus
        self.chronicle = chronicle
        self.defer = defer
        # Timed states whose idle return came due while paused
        self.paused_returns: list[str] = []

    # ── Shared plumbing ──────────────────────────────────────────────

    def can_perform(self, activity: str) -> bool:
        return (self.organism.alive
                and self.progression.is_unlocked(activity)
                and self.organism.can_start_activity(activity))

    def _refuse(self, activity: str) -> ActivityResult:
        org = self.organism
        if not org.alive:
            reason = "the organism is dead"
        elif not self.progression.is_unlocked(activity):
            reason = "not unlocked yet"
        else:
            reason = org.refusal_reason(activity) or f"state {org.activity_state}"
        msg = f"Cannot {activity}: {reason}"
        print(f"[ACT] refused {activity}: {reason}")
        self._log(DAILY, msg)
        self._emit(ActivityRefused(activity=activity, reason=reason))
        return ActivityResult(activity=activity, accepted=False, message=msg)

    def _begin(self, activity: str, use_global: bool = False) -> None:
        org = self.organism
        previous = org.activity_state
        org.start_cooldown(activity, use_global=use_global)
        org.activity_state = STATE_FOR_ACTIVITY[activity]
        if previous != org.activity_state:
            self._emit(StateChanged(previous=previous, current=org.activity_state))

    def _finish(self, result: ActivityResult, timed: bool) -> ActivityResult:
        self._log(DAILY, result.message)
        self._emit(ActivityResolved(activity=result.activity, success=result.success,
                                    food=result.food, message=result.message))
        self.progression.refresh_unlocks()
        if timed:
            self._schedule_idle(STATE_FOR_ACTIVITY[result.activity])
        return result

    def _schedule_idle(self, state: str) -> None:
        def back_to_idle():
            org = self.organism
            if not org.alive or org.activity_state != state:
                return
            if org.time_paused:
                self.paused_returns.append(state)
                return
            org.activity_state = IDLE
            self._emit(StateChanged(previous=state, current=IDLE))

        delay = int(_tun("activities", "idle_return_ms", 100))
        if self.defer is None:
            back_to_idle()
        else:
            self.defer(delay, back_to_idle)

    def rearm_idle_return(self) -> bool:
        """Schedule the idle return for a timed state restored from a snapshot."""
        state = self.organism.activity_state
        if state == IDLE or state in HELD_STATES:
            return False
        self._schedule_idle(state)
        return True

    def resume_idle_returns(self) -> int:
        pending, self.paused_returns = self.paused_returns, []
        for state in pending:
            self._schedule_idle(state)
        return len(pending)

    def _gain(self, attr: str, amount: float) -> float:
        """Raise an attribute, returning what actually landed after clamping."""
        before = getattr(self.organism, attr)
        setattr(self.organism, attr, before + amount)
        return getattr(self.organism, attr) - before

    def _drain(self, attr: str, amount: float) -> None:
        floor = float(_tun("activities", "attribute_floor", 0.1))
        setattr(self.organism, attr, max(floor, getattr(self.organism, attr) - amount))

    # ── Activities ───────────────────────────────────────────────────

    def hunt(self) -> ActivityResult:
        if not self.can_perform(HUNT):
            return self._refuse(HUNT)
        org, rng = self.organism, self.rng
        self._begin(HUNT, use_global=True)
        level = self.progression.level
        result = ActivityResult(activity=HUNT)

        fail = hunt_failure_chance(level, org.hunger, org.strength,
                                   org.speed, org.intelligence)
        if rng.chance(fail):
            if rng.chance(0.2):
                self.engine.trigger_injury(0.3 + rng.random())
            if rng.chance(0.15):
                self.engine.trigger_poison(0.2 + rng.random())
            org.hunger += 5
            org.mental_health -= 5
            result.message = "Hunt failed, no food found"
        else:
            food = 5 + rng.random() * 5 + level * 0.5 + (org.strength + org.speed) * 0.1
            if org.hunger >= PITY_HUNGER:
                food += (org.hunger - PITY_HUNGER) * 0.5
            org.food_storage += food
            result.gains["strength"] = self._gain("strength", 0.02 + rng.random() * 0.03)
            result.gains["speed"] = self._gain("speed", 0.02 + rng.random() * 0.03)
            result.gains["intelligence"] = self._gain("intelligence", 0.01 + rng.random() * 0.02)
            org.mental_health += 8
            if rng.chance(0.2):
                org.disease += 2
            result.success = True
            result.food = food
            result.message = (
                f"Hunt succeeded: +{format_number(food)} food, "
                f"str +{result.gains['strength']:.2f}, spd +{result.gains['speed']:.2f}, "
                f"int +{result.gains['intelligence']:.2f}")
        return self._finish(result, timed=True)

    def rest(self) -> ActivityResult:
        if not self.can_perform(REST):
            return self._refuse(REST)
        org, rng = self.organism, self.rng
        self._begin(REST)
        org.hunger += 2
        if rng.chance(0.2):
            self._drain("strength", 0.02)
        if rng.chance(0.2):
            self._drain("speed", 0.02)
        org.mental_health += 5 + rng.random() * 5
        if rng.chance(0.5):
            org.disease -= 3
        result = ActivityResult(activity=REST, success=True,
                                message="Rested a while, feeling calmer")
        return self._finish(result, timed=False)

    def dormancy(self) -> ActivityResult:
        if not self.can_perform(DORMANCY):
            return self._refuse(DORMANCY)
        org, rng = self.organism, self.rng
        self._begin(DORMANCY)
        org.hunger += 1
        if rng.chance(0.3):
            self._drain("strength", 0.05)
        if rng.chance(0.3):
            self._drain("speed", 0.05)
        if rng.chance(0.6):
            org.mental_health += 8
        else:
            org.mental_health -= 3
        if rng.chance(0.7):
            org.disease -= 5
        result = ActivityResult(activity=DORMANCY, success=True,
                                message="Went dormant, disease eases but the body weakens")
        return self._finish(result, timed=False)

    def explore(self) -> ActivityResult:
        if not self.can_perform(EXPLORE):
            return self._refuse(EXPLORE)
        org, rng = self.organism, self.rng
        self._begin(EXPLORE)
        level = self.progression.level
        result = ActivityResult(activity=EXPLORE)
        org.hunger += 8

        parts = []
        if rng.chance(explore_find_chance(org.hunger)):
            food = 3 + rng.random() * 4 + level * 0.3
            if org.hunger >= PITY_HUNGER:
                food += (org.hunger - PITY_HUNGER) * 0.3
            org.food_storage += food
            org.mental_health += 5
            result.success = True
            result.food = food
            parts.append(f"found {format_number(food)} food")
        if rng.chance(0.5):
            result.gains["strength"] = self._gain("strength", 0.03)
            parts.append("strength improved")
        if rng.chance(0.5):
            result.gains["speed"] = self._gain("speed", 0.03)
            parts.append("speed improved")
        if rng.chance(0.3):
            result.gains["intelligence"] = self._gain("intelligence", 0.03)
            parts.append("intelligence improved")
        if rng.chance(0.08):
            self.engine.trigger_injury(0.2 + rng.random())
        if rng.chance(0.04):
            self.engine.trigger_poison(0.1 + rng.random())

        result.message = "Explored: " + (", ".join(parts) if parts else "nothing of note")
        return self._finish(result, timed=True)

    def exercise(self) -> ActivityResult:
        if not self.can_perform(EXERCISE):
            return self._refuse(EXERCISE)
        org, rng = self.organism, self.rng
        self._begin(EXERCISE, use_global=True)
        org.hunger += 10
        result = ActivityResult(activity=EXERCISE, success=True)
        if rng.chance(0.7):
            result.gains["strength"] = self._gain("strength", 0.01 + rng.random() * 0.02)
        if rng.chance(0.6):
            result.gains["speed"] = self._gain("speed", 0.01 + rng.random() * 0.02)
        gains = ", ".join(f"{k} +{v:.3f}" for k, v in result.gains.items())
        result.message = "Exercised" + (f": {gains}" if gains else "")
        return self._finish(result, timed=True)

    def think(self) -> ActivityResult:
        if not self.can_perform(THINK):
            return self._refuse(THINK)
        org, rng = self.organism, self.rng
        self._begin(THINK)
        org.hunger += 5
        gain = self._gain("intelligence", 0.05 + rng.random() * 0.05)
        result = ActivityResult(activity=THINK, success=True,
                                gains={"intelligence": gain},
                                message=f"Thought deeply, intelligence +{gain:.3f}")
        self.progression.on_think()
        return self._finish(result, timed=True)

    def interact(self) -> ActivityResult:
        if not self.can_perform(INTERACT):
            return self._refuse(INTERACT)
        org, rng = self.organism, self.rng
        self._begin(INTERACT)
        org.hunger += 8
        result = ActivityResult(activity=INTERACT, success=True)

        roll = rng.random()
        if roll < 0.4:
            msg = "Cooperated with another species"
            if rng.chance(0.6):
                food = 3 + rng.random() * 5
                org.food_storage += food
                result.food = food
                msg += f", gained {format_number(food)} food"
            else:
                gain = self._gain("intelligence", 0.02 + rng.random() * 0.03)
                result.gains["intelligence"] = gain
                msg += f", intelligence +{gain:.3f}"
            org.mental_health += 5
        elif roll < 0.7:
            msg = "Competed with another species"
            org.hunger += 5
            if rng.chance(0.5):
                gain = self._gain("strength", 0.02 + rng.random() * 0.03)
                result.gains["strength"] = gain
                msg += f", strength +{gain:.3f}"
            else:
                gain = self._gain("speed", 0.02 + rng.random() * 0.03)
                result.gains["speed"] = gain
                msg += f", speed +{gain:.3f}"
            org.mental_health -= 3
        else:
            msg = "Killed another creature"
            food = 8 + rng.random() * 10
            org.food_storage += food
            result.food = food
            msg += f", gained {format_number(food)} food"
            org.mental_health -= 10
            if rng.chance(0.3):
                self.engine.trigger_injury(0.5 + rng.random())
                msg += " but got hurt"

        result.message = msg
        self._log(KEY, f"Species interaction: {msg}")
        return self._finish(result, timed=True)

    def make_tool(self) -> ActivityResult:
        if not self.can_perform(TOOL):
            return self._refuse(TOOL)
        org, rng = self.organism, self.rng
        self._begin(TOOL)
        org.hunger += 12
        result = ActivityResult(activity=TOOL)
        chance = org.intelligence * 0.01 + org.strength * 0.005
        if rng.chance(chance):
            gain = self._gain("intelligence", 0.03 + rng.random() * 0.04)
            org.mental_health += 8
            result.success = True
            result.gains["intelligence"] = gain
            result.message = f"Made a tool, intelligence +{gain:.3f}"
            self._log(KEY, "Crafted a tool!")
        else:
            org.mental_health -= 5
            result.message = "Tried to make a tool but failed"
        return self._finish(result, timed=True)

    def socialize(self) -> ActivityResult:
        if not self.can_perform(SOCIAL):
            return self._refuse(SOCIAL)
        org, rng = self.organism, self.rng
        self._begin(SOCIAL)
        org.hunger += 6
        result = ActivityResult(activity=SOCIAL)
        chance = org.intelligence * 0.008 + org.mental_health * 0.005
        if rng.chance(chance):
            gain = 5 + rng.random() * 10
            org.mental_health += gain
            result.success = True
            result.message = f"Made a friend, mental health +{gain:.1f}"
            if rng.chance(0.4):
                food = 2 + rng.random() * 4
                org.food_storage += food
                result.food = food
                result.message += f", gained {format_number(food)} food"
            self._log(KEY, "Formed a social bond!")
        else:
            org.mental_health -= 8
            result.message = "Tried to make friends but was rejected"
        return self._finish(result, timed=True)

    def perform(self, activity: str) -> ActivityResult:
        """Dispatch by activity name (console / key bindings)."""
        handler = {
            HUNT: self.hunt, REST: self.rest, DORMANCY: self.dormancy,
            EXPLORE: self.explore, EXERCISE: self.exercise, THINK: self.think,
            INTERACT: self.interact, TOOL: self.make_tool, SOCIAL: self.socialize,
        }.get(activity)
        if handler is None:
            return self._refuse(activity)
        return handler()

    # ── Internals ────────────────────────────────────────────────────

    def _log(self, feed: str, msg: str) -> None:
        if self.chronicle is not None and msg:
            self.chronicle.record(feed, msg, stamp=self.organism.calendar.stamp())

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.emit(event)
