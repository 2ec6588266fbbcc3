"""simulation/event_engine.py — Random environmental events and afflictions.

Every slow tick the engine:

  1. applies and counts down afflictions (injury / poison / suffocation)
  2. applies and counts down active catalog events
  3. decrements the between-events cooldown
  4. rolls for a random suffocation
  5. maybe triggers a new catalog event for the current area

Effects scale with the event's level (x1 / x1.5 / x2) and again by
x1.5 when epic.  Mental-health deltas only land from level 51 once
the organism has had its first thought.

    engine = EventEngine(org, progression, catalog, rng, bus, chronicle)
    engine.update()                       # once per slow tick
    engine.trigger_event_by_name("Whale song")
"""

from __future__ import annotations
from typing import Callable

from core.constants import AREAS, SEA, COMMON, RARE, EPIC, INJURY, POISON, SUFFOCATION
from core.events import (
    EventBus, EventActivated, EventRecovered, AfflictionStarted,
    AfflictionCleared, AreaChanged,
)
from core.tuning import get as _tun
from components.catalog import EventTemplate, ActiveEvent, Affliction
from components.chronicle import Chronicle, DAILY, KEY
from simulation.catalog import EventCatalog

LEVEL_MULTIPLIERS = {1: 1.0, 2: 1.5, 3: 2.0}
AREA_NAMES = {"sea": "Ocean", "land": "Land", "sky": "Sky"}


class EventEngine:
    """Owns the active-event table, the event cooldown and afflictions."""

    def __init__(self, organism, progression, catalog: EventCatalog, rng,
                 bus: EventBus | None = None,
                 chronicle: Chronicle | None = None,
                 clock: Callable[[], float] | None = None):
        self.organism = organism
        self.progression = progression
        self.catalog = catalog
        self.rng = rng
        self.bus = bus
        self.chronicle = chronicle
        self._clock = clock or (lambda: 0.0)

        self.current_area: str = str(_tun("events", "default_area", SEA))
        self.event_cooldown: int = 0
        self.active_events: dict[str, ActiveEvent] = {}
        self.afflictions: dict[str, Affliction] = {}

    # ── Tuning shortcuts ─────────────────────────────────────────────

    @staticmethod
    def probability(rarity: str) -> float:
        defaults = {COMMON: 0.06, RARE: 0.025, EPIC: 0.008}
        return float(_tun("events.probabilities", rarity, defaults.get(rarity, 0.0)))

    @staticmethod
    def max_active() -> int:
        return int(_tun("events", "max_active", 2))

    # ── Eligibility ──────────────────────────────────────────────────

    def can_trigger_event(self, event: EventTemplate) -> bool:
        """Level gate for one template."""
        level = self.progression.level
        if event.level == 1:
            return True
        if event.level == 2:
            return level >= int(_tun("events.gates", "level2_min_level", 21))
        if event.level == 3:
            min_attr = float(_tun("events.gates", "level3_min_attribute", 15.0))
            return (level >= int(_tun("events.gates", "level3_min_level", 51))
                    and self.organism.strength >= min_attr
                    and self.organism.speed >= min_attr)
        return False

    def mental_effects_enabled(self) -> bool:
        return (self.progression.level >= int(_tun("events.gates", "mental_min_level", 51))
                and self.progression.has_thought)

    # ── Per-tick update ──────────────────────────────────────────────

    def update(self) -> None:
        """One slow tick.  Does nothing while paused or dead."""
        org = self.organism
        if org.time_paused or not org.alive:
            return
        self.update_afflictions()
        self.update_active_events()
        if self.event_cooldown > 0:
            self.event_cooldown -= 1
        self.maybe_suffocate()
        self.trigger_random_event()

    def update_active_events(self) -> None:
        for name in list(self.active_events):
            active = self.active_events[name]
            if active.remaining <= 0:
                continue
            active.remaining -= 1
            self.apply_event_effects(active.template)
            if active.remaining <= 0:
                del self.active_events[name]
                self._log(DAILY, f"{name} has passed")
                self._emit(EventRecovered(name=name))

    def trigger_random_event(self) -> EventTemplate | None:
        if self.event_cooldown > 0 or len(self.active_events) >= self.max_active():
            return None

        level = self.progression.level
        chance = self.probability(COMMON)
        if level < 10:
            chance *= 0.4
        elif level < 30:
            chance *= 0.7
        elif level > 50:
            chance *= 0.9

        if self.rng.random() >= chance:
            return None

        candidates = [
            e for e in self.catalog.by_area(self.current_area)
            if e.name not in self.active_events and self.can_trigger_event(e)
        ]
        if not candidates:
            return None

        chosen = self.select_event_by_rarity(candidates)
        self.activate_event(chosen)
        self.event_cooldown = int(_tun("events", "min_cooldown", 15))
        return chosen

    def select_event_by_rarity(self, candidates: list[EventTemplate]) -> EventTemplate:
        """One roll picks the tier: epic, then rare, then common, then any."""
        roll = self.rng.random()
        if roll < self.probability(EPIC):
            epics = [e for e in candidates if e.rarity == EPIC]
            if epics:
                return self.rng.choice(epics)
        if roll < self.probability(RARE):
            rares = [e for e in candidates if e.rarity == RARE]
            if rares:
                return self.rng.choice(rares)
        commons = [e for e in candidates if e.rarity == COMMON]
        if commons:
            return self.rng.choice(commons)
        return self.rng.choice(candidates)

    # ── Activation / effects ─────────────────────────────────────────

    def activate_event(self, event: EventTemplate, manual: bool = False) -> ActiveEvent:
        duration = event.duration or (3 + int(self.rng.random() * 4))
        active = ActiveEvent(template=event, remaining=duration,
                             started_at=self._clock())
        self.active_events[event.name] = active

        food_lost = 0.0
        if event.rarity == EPIC:
            base = int(_tun("events.epic", "food_loss_min", 20))
            span = int(_tun("events.epic", "food_loss_span", 15))
            food_lost = float(base + int(self.rng.random() * span))
            before = self.organism.food_storage
            self.organism.food_storage = before - food_lost
            food_lost = before - self.organism.food_storage
            self._log(KEY, f"Epic disaster destroyed {food_lost:.0f} food")

        self.apply_event_effects(event)

        effect = self.effect_text(event)
        self._log(DAILY, f"{event.description} {effect}, lasts {duration} cycles".strip())
        prefix = ""
        if event.rarity == EPIC:
            prefix = "Epic disaster: "
        elif event.level == 3:
            prefix = "Major event: "
        elif event.rarity == RARE:
            prefix = "Rare event: "
        self._log(KEY, f"{prefix}{event.name} {effect}".strip())
        print(f"[EVENT] {event.name} ({event.area} L{event.level} {event.rarity}) "
              f"for {duration} cycles")
        self._emit(EventActivated(name=event.name, area=event.area,
                                  rarity=event.rarity, duration=duration,
                                  food_lost=food_lost, manual=manual))
        return active

    @staticmethod
    def effect_multiplier(event: EventTemplate) -> float:
        mult = LEVEL_MULTIPLIERS.get(event.level, 1.0)
        if event.rarity == EPIC:
            mult *= 1.5
        return mult

    def apply_event_effects(self, event: EventTemplate) -> None:
        org = self.organism
        mult = self.effect_multiplier(event)
        if event.hunger:
            org.hunger += event.hunger * mult
        if event.disease:
            org.disease += event.disease * mult
        if event.mental_health and self.mental_effects_enabled():
            org.mental_health += event.mental_health * mult

    def effect_text(self, event: EventTemplate) -> str:
        """``(hunger +3.0, disease -1.5)`` style summary, or empty."""
        mult = self.effect_multiplier(event)
        parts = []
        if event.hunger:
            parts.append(f"hunger {event.hunger * mult:+.1f}")
        if event.disease:
            parts.append(f"disease {event.disease * mult:+.1f}")
        if event.mental_health and self.mental_effects_enabled():
            parts.append(f"mental {event.mental_health * mult:+.1f}")
        return f"({', '.join(parts)})" if parts else ""

    # ── Manual control ───────────────────────────────────────────────

    def trigger_event_by_name(self, name: str) -> bool:
        """Force an event regardless of odds and cooldown.

        Still refuses unknown, ineligible or already-active events and
        respects the active-event cap.
        """
        event = self.catalog.get(name)
        if event is None or not self.can_trigger_event(event):
            return False
        if name in self.active_events or len(self.active_events) >= self.max_active():
            return False
        self.activate_event(event, manual=True)
        return True

    def set_current_area(self, area: str) -> bool:
        if area not in AREAS:
            return False
        self.current_area = area
        self._log(KEY, f"Moved to the {AREA_NAMES.get(area, area)} environment")
        self._emit(AreaChanged(area=area))
        return True

    def get_current_area(self) -> str:
        return self.current_area

    def get_events_by_area(self, area: str) -> list[EventTemplate]:
        return [e for e in self.catalog.by_area(area) if self.can_trigger_event(e)]

    def get_events_by_level(self, level: int) -> list[EventTemplate]:
        return [e for e in self.catalog.by_level(level) if self.can_trigger_event(e)]

    def get_available_events(self) -> list[EventTemplate]:
        return [e for e in self.catalog.all() if self.can_trigger_event(e)]

    def get_all_events(self) -> list[EventTemplate]:
        return self.catalog.all()

    def get_active_events(self) -> list[ActiveEvent]:
        return list(self.active_events.values())

    def clear_all_events(self) -> None:
        self.active_events.clear()
        self._log(DAILY, "All event effects cleared")

    # ── Afflictions ──────────────────────────────────────────────────

    def trigger_injury(self, severity: float = 1.0) -> Affliction:
        duration = 5 + self.rng.randint(0, 9)
        return self._afflict(INJURY, duration, severity, "Injured!")

    def trigger_poison(self, severity: float = 1.0) -> Affliction:
        duration = 3 + self.rng.randint(0, 6)
        return self._afflict(POISON, duration, severity, "Poisoned!")

    def trigger_suffocation(self) -> Affliction:
        duration = 2 + self.rng.randint(0, 4)
        return self._afflict(SUFFOCATION, duration, 1.0, "Suffocating!")

    def _afflict(self, kind: str, duration: int, severity: float, label: str) -> Affliction:
        aff = Affliction(kind=kind, remaining=duration, severity=float(severity))
        self.afflictions[kind] = aff
        self._log(DAILY, f"{label} Lasts {duration} cycles")
        self._emit(AfflictionStarted(kind=kind, severity=aff.severity, duration=duration))
        return aff

    def maybe_suffocate(self) -> None:
        if SUFFOCATION in self.afflictions:
            return
        base = float(_tun("events.afflictions", "suffocation_chance", 0.005))
        chance = base * (1.0 - self.progression.level / 200.0)
        if self.rng.chance(chance):
            self.trigger_suffocation()

    def update_afflictions(self) -> None:
        org = self.organism
        for kind in list(self.afflictions):
            aff = self.afflictions[kind]
            sev = aff.severity
            if kind == INJURY:
                org.hunger += 0.8 * sev
                org.mental_health -= 0.5 * sev
            elif kind == POISON:
                org.disease += 1.0 * sev
                org.hunger += 0.3 * sev
            elif kind == SUFFOCATION:
                org.mental_health -= 1.0 * sev
                org.hunger += 0.5 * sev
            aff.remaining -= 1
            if aff.remaining <= 0:
                del self.afflictions[kind]
                self._log(DAILY, f"Recovered from {kind}")
                self._emit(AfflictionCleared(kind=kind))

    # ── Snapshot / restore ───────────────────────────────────────────

    def get_state_data(self) -> dict:
        return {
            "current_area": self.current_area,
            "event_cooldown": self.event_cooldown,
            "active_events": [a.to_dict() for a in self.active_events.values()],
            "afflictions": [a.to_dict() for a in self.afflictions.values()],
        }

    def load_saved_data(self, data) -> None:
        self.current_area = str(_tun("events", "default_area", SEA))
        self.event_cooldown = 0
        self.active_events.clear()
        self.afflictions.clear()
        if not isinstance(data, dict):
            return

        area = data.get("current_area")
        if area in AREAS:
            self.current_area = area
        cd = data.get("event_cooldown")
        if isinstance(cd, int) and not isinstance(cd, bool):
            self.event_cooldown = max(0, cd)

        for raw in data.get("active_events", []) or []:
            if not isinstance(raw, dict):
                continue
            tpl = self.catalog.get(raw.get("name", ""))
            remaining = raw.get("remaining")
            if tpl is None or not isinstance(remaining, int) or remaining <= 0:
                continue
            if len(self.active_events) >= self.max_active():
                break
            started = raw.get("started_at", 0.0)
            self.active_events[tpl.name] = ActiveEvent(
                template=tpl, remaining=remaining,
                started_at=float(started) if isinstance(started, (int, float)) else 0.0)

        for raw in data.get("afflictions", []) or []:
            if not isinstance(raw, dict):
                continue
            kind = raw.get("kind")
            remaining = raw.get("remaining")
            severity = raw.get("severity", 1.0)
            if kind not in (INJURY, POISON, SUFFOCATION):
                continue
            if not isinstance(remaining, int) or remaining <= 0:
                continue
            if not isinstance(severity, (int, float)):
                severity = 1.0
            self.afflictions[kind] = Affliction(kind=kind, remaining=remaining,
                                                severity=float(severity))

    # ── Internals ────────────────────────────────────────────────────

    def _log(self, feed: str, msg: str) -> None:
        if self.chronicle is not None:
            self.chronicle.record(feed, msg, stamp=self.organism.calendar.stamp())

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.emit(event)

    def debug_info(self) -> dict:
        return {
            "area": self.current_area,
            "cooldown": self.event_cooldown,
            "active": {n: a.remaining for n, a in self.active_events.items()},
            "afflictions": {k: a.remaining for k, a in self.afflictions.items()},
        }
