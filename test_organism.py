"""test_organism.py — OrganismState bounds, ticks, gating and snapshots.

Tests:
1. Newborn defaults and clamped fields
2. Fast-tick hunger and slow-tick decay
3. Cooldown gating (global cooldown, emergency dormancy)
4. Death checks
5. Snapshot round-trip and defensive restore
6. Calendar and chronicle helpers

Run: python test_organism.py      (or: pytest test_organism.py)
"""
from __future__ import annotations
import json, math, sys, traceback

from core import tuning
from core.constants import (
    HUNT, REST, DORMANCY, EXPLORE, IDLE, HUNTING, RESTING, DORMANT,
    DEATH_STARVATION, DEATH_DISEASE, DEATH_MENTAL,
)
from core.rng import RandomSource
from components.calendar import GameCalendar
from components.chronicle import Chronicle, DAILY, KEY
from simulation.organism import OrganismState, clamp

tuning.clear()

passed = 0
failed = 0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


class ScriptedRandom(RandomSource):
    """Replays *values*, then returns *default* forever."""

    def __init__(self, values=(), default: float = 0.99):
        super().__init__(0)
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.values.pop(0) if self.values else self.default


def close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


# ════════════════════════════════════════════════════════════════════════
#  TEST 1 — Newborn defaults and clamped fields
# ════════════════════════════════════════════════════════════════════════

def test_newborn_defaults():
    org = OrganismState()
    assert org.strength == 1.0 and org.speed == 1.0 and org.intelligence == 1.0
    assert org.hunger == 0.0 and org.disease == 0.0 and org.mental_health == 0.0
    assert org.food_storage == 20.0
    assert org.max_food_storage == 1000.0
    assert org.max_attribute == 180.0
    assert org.activity_state == IDLE
    assert org.alive and org.death_cause is None
    assert org.calendar.stamp() == "Day 1 00:00"
    ok("Newborn starts with 1/1/1 attributes, 20 food, idle")


def test_fields_clamp_on_write():
    org = OrganismState()
    org.hunger += 250
    assert org.hunger == 100.0
    org.hunger = -5
    assert org.hunger == 0.0
    org.disease = float("nan")
    assert org.disease == 0.0
    org.strength = 1e9
    assert org.strength == org.max_attribute
    org.speed = -3
    assert org.speed == 0.0
    org.food_storage = -10
    assert org.food_storage == 0.0
    org.intelligence = "clever"
    assert org.intelligence == 0.0
    ok("Vitals, attributes and food clamp on every write")

    assert clamp(5, 0, 3) == 3 and clamp(None, 1, 3) == 1
    ok("clamp() collapses junk to the lower bound")


def test_mental_health_locked_until_thought():
    org = OrganismState()
    org.mental_health = 80
    assert org.mental_health == 0.0
    org.unlock_mental_health()
    assert org.mental_unlocked and org.mental_health == 50.0
    org.mental_health = 150
    assert org.mental_health == 100.0
    org.unlock_mental_health()
    assert org.mental_health == 100.0
    ok("Mental health ignores writes until unlocked, then starts at 50")


def test_activity_state_rejects_unknown():
    org = OrganismState()
    try:
        org.activity_state = "flying"
    except ValueError:
        ok("Unknown activity state raises ValueError")
    else:
        raise AssertionError("activity_state accepted 'flying'")
    assert org.activity_state == IDLE


def test_max_food_storage_grows_with_level():
    assert OrganismState.calculate_max_food_storage(0) == 1000.0
    assert OrganismState.calculate_max_food_storage(2) == 2250.0
    org = OrganismState()
    org.update_max_food_storage(1)
    assert org.max_food_storage == 1500.0
    org.food_storage = 750
    assert org.food_storage_percent() == 50.0
    ok("Food soft-cap is 1000 × 1.5^level")


# ════════════════════════════════════════════════════════════════════════
#  TEST 2 — Ticks
# ════════════════════════════════════════════════════════════════════════

def test_hunger_tick_rates():
    org = OrganismState()
    org.food_storage = 0
    assert org.apply_hunger_tick() is False
    assert close(org.hunger, 0.1)
    ok("Starving idle organism gains 0.1 hunger per fast tick")

    org.hunger = 0
    org.activity_state = RESTING
    org.apply_hunger_tick()
    assert close(org.hunger, 0.04)
    org.hunger = 0
    org.activity_state = DORMANT
    org.apply_hunger_tick()
    assert close(org.hunger, 0.01)
    ok("Resting and dormancy slow starvation down")

    org.activity_state = IDLE
    org.food_storage = 10
    org.hunger = 10
    org.apply_hunger_tick()
    assert close(org.hunger, 9.5)
    ok("With food in storage hunger recovers 0.5 per tick")

    org.food_storage = 0
    org.hunger = 99.95
    assert org.apply_hunger_tick() is True
    assert org.hunger == 100.0
    ok("Reaching 100 hunger reports starvation")


def test_natural_decay():
    org = OrganismState()
    org.hunger = 5
    rng = ScriptedRandom([0.99])
    org.apply_natural_decay(0, rng)
    assert close(org.food_storage, 19.5)
    assert close(org.hunger, 4.0)
    assert rng.calls == 1
    ok("Slow tick eats 0.5 food at level 0 and relieves hunger")

    org = OrganismState()
    org.activity_state = RESTING
    org.apply_natural_decay(10, ScriptedRandom([0.99]))
    assert close(org.food_storage, 20 - 0.75)
    ok("Resting halves food consumption")

    org = OrganismState()
    org.disease = 10
    org.apply_natural_decay(0, ScriptedRandom([0.05]))
    assert close(org.disease, 9.5)
    org = OrganismState()
    org.apply_natural_decay(0, ScriptedRandom([0.01]))
    assert close(org.disease, 0.2)
    ok("Disease recovers or worsens on its rolls")

    org = OrganismState()
    org.unlock_mental_health()
    rng = ScriptedRandom([0.1, 0.99])
    org.apply_natural_decay(0, rng)
    assert close(org.mental_health, 50.2)
    assert rng.calls == 2
    ok("Mental health drifts only once unlocked")


def test_paused_organism_does_not_change():
    org = OrganismState()
    org.food_storage = 0
    org.hunger = 99.99
    org.disease = 100
    org.start_cooldown(HUNT, use_global=True)
    org.time_paused = True
    before = org.get_state_data()
    rng = ScriptedRandom([0.0] * 10)
    assert org.apply_hunger_tick() is False
    org.apply_natural_decay(5, rng)
    assert org.tick_cooldowns() is None
    assert org.check_death(5) is None
    org.advance_calendar(24)
    assert org.get_state_data() == before
    assert rng.calls == 0
    ok("Every tick is a no-op while time is paused")


# ════════════════════════════════════════════════════════════════════════
#  TEST 3 — Cooldown gating
# ════════════════════════════════════════════════════════════════════════

def test_cooldown_gating():
    org = OrganismState()
    org.start_cooldown(HUNT, use_global=True)
    assert org.cooldowns[HUNT] == 10
    assert org.global_cooldown == 1
    assert not org.can_start_activity(HUNT)
    assert not org.can_start_activity(EXPLORE)
    assert org.can_start_activity(REST)
    assert org.can_start_activity(DORMANCY)
    assert "cooling down" in org.refusal_reason(HUNT)
    assert org.refusal_reason(EXPLORE) == "global cooldown"
    ok("Global cooldown blocks all but rest and dormancy")

    assert not org.can_start_activity("fly")
    ok("Unknown activities are never startable")


def test_emergency_dormancy():
    org = OrganismState()
    org.activity_state = RESTING
    org.cooldowns[REST] = 5
    org.hunger = 50
    assert not org.can_start_activity(DORMANCY)
    org.hunger = 65
    assert org.can_start_activity(DORMANCY)
    assert not org.can_start_activity(HUNT)
    ok("Resting organism may drop into dormancy at 65 hunger")


def test_tick_cooldowns_releases_held_states():
    org = OrganismState()
    org.activity_state = RESTING
    org.cooldowns[REST] = 1
    org.global_cooldown = 1
    assert org.tick_cooldowns() == RESTING
    assert org.activity_state == IDLE
    assert org.global_cooldown == 0
    ok("Rest ends when its cooldown runs out")

    org.activity_state = DORMANT
    assert org.tick_cooldowns() == DORMANT
    assert org.activity_state == IDLE
    ok("A held state never outlives every cooldown")

    org.activity_state = HUNTING
    org.cooldowns[HUNT] = 3
    assert org.tick_cooldowns() is None
    assert org.activity_state == HUNTING and org.cooldowns[HUNT] == 2
    ok("Timed states are left for the idle-return callback")


def test_reset_cooldowns():
    org = OrganismState()
    org.activity_state = DORMANT
    org.start_cooldown(DORMANCY, use_global=True)
    org.reset_cooldowns()
    assert not org.any_cooldown_active()
    assert org.global_cooldown == 0
    assert org.activity_state == IDLE
    ok("reset_cooldowns clears everything and wakes the organism")


# ════════════════════════════════════════════════════════════════════════
#  TEST 4 — Death checks
# ════════════════════════════════════════════════════════════════════════

def test_check_death():
    org = OrganismState()
    assert org.check_death(0) is None
    assert org.death_check_counter == 1
    org.hunger = 100
    assert org.check_death(0) == DEATH_STARVATION
    org.hunger = 0
    org.disease = 100
    assert org.check_death(0) == DEATH_DISEASE
    ok("Starvation and disease kill at 100")

    org = OrganismState()
    org.unlock_mental_health()
    org.mental_health = 0
    assert org.check_death(50) is None
    assert org.check_death(51) == DEATH_MENTAL
    ok("Mental collapse only counts above level 50")


# ════════════════════════════════════════════════════════════════════════
#  TEST 5 — Snapshot / restore
# ════════════════════════════════════════════════════════════════════════

def test_state_round_trip():
    org = OrganismState()
    org.strength = 12.5
    org.speed = 3.25
    org.hunger = 42
    org.disease = 7
    org.unlock_mental_health()
    org.mental_health = 33
    org.food_storage = 123.5
    org.update_max_food_storage(3)
    org.max_attribute = 186
    org.start_cooldown(REST)
    org.activity_state = RESTING
    org.calendar.advance(24 * 61)
    data = json.loads(json.dumps(org.get_state_data()))

    other = OrganismState()
    other.load_saved_data(data)
    assert other.get_state_data() == org.get_state_data()
    ok("Snapshot survives a JSON round-trip unchanged")


def test_restore_keeps_activity_state():
    org = OrganismState()
    org.activity_state = HUNTING
    other = OrganismState()
    other.load_saved_data(org.get_state_data())
    assert other.activity_state == HUNTING
    ok("A timed activity restores as saved")

    other.load_saved_data({"activity_state": "flying"})
    assert other.activity_state == IDLE
    ok("An unknown activity state restores as idle")


def test_restore_rejects_bad_fields():
    org = OrganismState()
    org.load_saved_data({
        "hunger": "lots",
        "strength": float("nan"),
        "disease": 500,
        "food_storage": True,
        "activity_state": "flying",
        "cooldowns": {"hunt": -4, "rest": "x"},
        "game_time": {"day": 0, "hour": 99, "minute": -1},
    })
    assert org.hunger == 0.0
    assert org.strength == 1.0
    assert org.disease == 100.0
    assert org.food_storage == 20.0
    assert org.activity_state == IDLE
    assert org.cooldowns[HUNT] == 0 and org.cooldowns[REST] == 0
    assert org.calendar.day == 1 and org.calendar.hour == 23 and org.calendar.minute == 0
    ok("Bad values fall back to defaults or clamp")

    org.load_saved_data(None)
    assert org.get_state_data() == OrganismState().get_state_data()
    ok("Non-dict snapshot restores a newborn")


# ════════════════════════════════════════════════════════════════════════
#  TEST 6 — Calendar and chronicle
# ════════════════════════════════════════════════════════════════════════

def test_calendar():
    cal = GameCalendar()
    cal.advance(24 * 60)
    assert cal.stamp() == "Day 2 00:00"
    cal.advance(6 * 60 + 24)
    assert cal.stamp() == "Day 2 06:24"
    assert cal.time_of_day() == "morning"
    cal.hour = 13
    assert cal.time_of_day() == "afternoon"
    cal.hour = 20
    assert cal.time_of_day() == "evening"
    cal.hour = 2
    assert cal.time_of_day() == "night"
    ok("Calendar rolls over days and names the time of day")


def test_chronicle_is_bounded():
    chron = Chronicle(max_entries=3)
    for i in range(5):
        chron.record(DAILY, f"entry {i}", stamp="Day 1 00:00")
    chron.record(KEY, "milestone")
    assert [e["msg"] for e in chron.recent(DAILY)] == ["entry 2", "entry 3", "entry 4"]
    assert chron.last_message(KEY) == "milestone"
    ok("Chronicle keeps the newest entries per feed")


if __name__ == "__main__":
    SECTIONS = [
        ("Newborn defaults", test_newborn_defaults),
        ("Clamped fields", test_fields_clamp_on_write),
        ("Mental health lock", test_mental_health_locked_until_thought),
        ("Activity state validation", test_activity_state_rejects_unknown),
        ("Food storage cap", test_max_food_storage_grows_with_level),
        ("Hunger tick", test_hunger_tick_rates),
        ("Natural decay", test_natural_decay),
        ("Pause", test_paused_organism_does_not_change),
        ("Cooldown gating", test_cooldown_gating),
        ("Emergency dormancy", test_emergency_dormancy),
        ("Cooldown tick", test_tick_cooldowns_releases_held_states),
        ("Cooldown reset", test_reset_cooldowns),
        ("Death checks", test_check_death),
        ("Snapshot round-trip", test_state_round_trip),
        ("Activity state restore", test_restore_keeps_activity_state),
        ("Defensive restore", test_restore_rejects_bad_fields),
        ("Calendar", test_calendar),
        ("Chronicle", test_chronicle_is_bounded),
    ]
    for title, fn in SECTIONS:
        print(f"\n=== {title} ===")
        try:
            fn()
        except AssertionError:
            fail(title, traceback.format_exc())
        except Exception:
            failed += 1
            print(f"  [CRASH] {title}")
            traceback.print_exc()

    print(f"\n{'═' * 50}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'═' * 50}")
    sys.exit(1 if failed else 0)
