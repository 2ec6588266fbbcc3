"""test_progression.py — Evolution points, levelling and activity unlocks.

Run: python test_progression.py      (or: pytest test_progression.py)
"""
from __future__ import annotations
import json, math, sys, traceback

from core import tuning
from core.constants import (
    HUNT, REST, DORMANCY, EXPLORE, EXERCISE, THINK, INTERACT, TOOL, SOCIAL,
    MAX_EVOLUTION_LEVEL,
)
from core.events import EventBus
from core.rng import RandomSource
from components.chronicle import Chronicle
from simulation.organism import OrganismState
from simulation.progression import ProgressionTracker

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


def make(values=()):
    rng = ScriptedRandom(values)
    bus = EventBus()
    org = OrganismState()
    prog = ProgressionTracker(org, rng, bus, Chronicle())
    seen: list = []
    for kind in ("EvolutionReady", "LevelUp", "ActivityUnlocked", "ThoughtMilestone"):
        bus.subscribe(kind, seen.append)
    return prog, org, bus, seen


def kinds(seen) -> list[str]:
    return [type(e).__name__ for e in seen]


# ════════════════════════════════════════════════════════════════════════
#  Requirements
# ════════════════════════════════════════════════════════════════════════

def test_requirements():
    prog, org, bus, seen = make()
    assert close(prog.required, 130.0)
    assert prog.required_points(0) == 0.0
    assert close(prog.required_points(3), 100 * 1.5 ** 2 * 1.3)
    org.strength = 11
    assert close(prog.required_points(1), 100 * (1 + 13 * 0.1))
    ok("Requirement is 100 × 1.5^(level-1) × (1 + 0.1 × attribute sum)")

    table = prog.requirements_table()
    assert len(table) == 30 and table[0][0] == 1 and table[-1][0] == MAX_EVOLUTION_LEVEL
    ok("Requirement table covers levels 1-20 and 91-100")


# ════════════════════════════════════════════════════════════════════════
#  Growth
# ════════════════════════════════════════════════════════════════════════

def test_natural_growth():
    prog, org, bus, seen = make()
    assert close(org.health_multiplier(), 0.7)
    assert close(prog.tick_growth(), 0.07)
    assert close(prog.points, 0.07)
    ok("Newborn earns 0.1 × health per fast tick")

    org.time_paused = True
    assert prog.tick_growth() == 0.0
    assert close(prog.points, 0.07)
    ok("No growth while paused")


def test_growth_multiplier_tiers():
    prog, org, bus, seen = make()
    expected = {1: 1.0, 10: 1.0, 11: 0.8, 30: 0.8, 31: 0.6, 60: 0.6,
                61: 0.4, 80: 0.4, 81: 0.2, 100: 0.2}
    for level, mult in expected.items():
        prog.level = level
        assert prog.growth_multiplier() == mult, level
    prog.level = 10
    assert close(prog.natural_growth(), 10 ** 1.2 * 0.1 * 0.7)
    ok("Growth slows down through the level tiers")


def test_gather():
    prog, org, bus, seen = make()
    assert close(prog.gather(), 0.7)
    prog.level = 2
    assert close(prog.click_growth(), prog.natural_growth() * 15)
    org.alive = False
    assert prog.gather() == 0.0
    ok("Gathering gives a burst of points while alive")


def test_evolution_ready_once_per_crossing():
    prog, org, bus, seen = make()
    prog.set_points(200)
    prog.add_points(1)
    bus.drain()
    assert kinds(seen) == ["EvolutionReady"]
    assert seen[0].level == 1
    prog.set_points(0)
    assert prog.evolution_ready_notified is False
    prog.set_points(200)
    bus.drain()
    assert kinds(seen) == ["EvolutionReady", "EvolutionReady"]
    ok("Ready notice fires once per threshold crossing")


# ════════════════════════════════════════════════════════════════════════
#  Evolving
# ════════════════════════════════════════════════════════════════════════

def test_evolve():
    prog, org, bus, seen = make(values=[0.5, 0.5, 0.5])
    assert not prog.evolve()
    prog.set_points(200)
    assert prog.evolve()
    assert prog.level == 1
    assert close(prog.points, 70.0)
    assert org.max_food_storage == 1500.0
    assert org.max_attribute == 182.0
    assert close(org.strength, 1.2) and close(org.speed, 1.2) and close(org.intelligence, 1.2)
    bus.drain()
    assert "LevelUp" in kinds(seen)
    ok("Evolving spends points, grows storage, ceiling and attributes")


def test_set_level_bounds():
    prog, org, bus, seen = make()
    assert not prog.set_level(101)
    assert not prog.set_level(-1)
    assert not prog.set_level(True)
    assert not prog.set_level(2.5)
    assert prog.level == 0
    assert prog.set_level(6)
    assert prog.points == 0.0
    assert prog.is_unlocked(EXPLORE)
    assert org.max_food_storage == 1000.0 * 1.5 ** 6
    ok("Level override accepts integers 0-100 only")

    prog.set_level(MAX_EVOLUTION_LEVEL)
    prog.set_points(1e300)
    assert not prog.can_evolve() and not prog.evolve()
    assert prog.progress_percent() == 100.0
    ok("Level 100 is the ceiling")


# ════════════════════════════════════════════════════════════════════════
#  Unlocks
# ════════════════════════════════════════════════════════════════════════

def test_base_unlocks():
    prog, org, bus, seen = make()
    assert prog.unlocked == {HUNT, REST, DORMANCY}
    assert prog.refresh_unlocks() == []
    ok("Hunt, rest and dormancy are available from birth")


def test_attribute_unlocks_are_sticky():
    prog, org, bus, seen = make()
    org.strength = 20
    assert prog.refresh_unlocks() == [EXERCISE]
    org.strength = 5
    prog.refresh_unlocks()
    assert prog.is_unlocked(EXERCISE)
    ok("Exercise unlocks at 20 strength and stays unlocked")

    org.intelligence = 44.9
    prog.refresh_unlocks()
    assert not prog.is_unlocked(THINK)
    org.intelligence = 45
    prog.refresh_unlocks()
    assert prog.is_unlocked(THINK)
    bus.drain()
    assert [e.activity for e in seen if type(e).__name__ == "ActivityUnlocked"] == [EXERCISE, THINK]
    ok("Think unlocks at 45 intelligence")


def test_late_game_needs_thought():
    prog, org, bus, seen = make()
    prog.set_level(51)
    for activity in (INTERACT, TOOL, SOCIAL):
        assert not prog.is_unlocked(activity)
    assert prog.on_think() is True
    for activity in (INTERACT, TOOL, SOCIAL):
        assert prog.is_unlocked(activity)
    assert org.mental_unlocked and org.mental_health == 50.0
    assert prog.on_think() is False
    bus.drain()
    assert kinds(seen).count("ThoughtMilestone") == 1
    ok("Level 51 plus the first thought unlocks the late-game activities")


# ════════════════════════════════════════════════════════════════════════
#  Snapshot
# ════════════════════════════════════════════════════════════════════════

def test_state_round_trip():
    prog, org, bus, seen = make()
    prog.set_level(12)
    prog.set_points(33.5)
    prog.on_think()
    data = json.loads(json.dumps(prog.get_state_data()))

    other, other_org, *_ = make()
    other.load_saved_data(data)
    assert other.get_state_data() == prog.get_state_data()
    assert other_org.mental_unlocked
    ok("Level, points, thought and unlocks survive a round-trip")

    other.load_saved_data({"level": 500, "points": -3, "unlocked": ["fly", EXPLORE]})
    assert other.level == 0 and other.points == 0.0
    assert other.unlocked == {HUNT, REST, DORMANCY, EXPLORE}
    ok("Out-of-range values and unknown unlocks are ignored")


if __name__ == "__main__":
    SECTIONS = [
        ("Requirements", test_requirements),
        ("Natural growth", test_natural_growth),
        ("Growth tiers", test_growth_multiplier_tiers),
        ("Gather", test_gather),
        ("Evolution ready", test_evolution_ready_once_per_crossing),
        ("Evolve", test_evolve),
        ("Level override", test_set_level_bounds),
        ("Base unlocks", test_base_unlocks),
        ("Attribute unlocks", test_attribute_unlocks_are_sticky),
        ("Late-game unlocks", test_late_game_needs_thought),
        ("Snapshot round-trip", test_state_round_trip),
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
