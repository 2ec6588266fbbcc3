"""core/events.py — Lightweight notification bus.

Decouples the simulation (which *signals* that something happened)
from the presentation layer and the chronicle (which *react* to it)::

    from core.events import EventBus, LevelUp
    bus.emit(LevelUp(level=7))

Consumers subscribe with a callable::

    bus.subscribe("LevelUp", my_handler)

And the simulation drains once per tick and after every command::

    bus.drain()          # calls all handlers for pending notifications

Design rules:
  - Notifications are plain dataclasses, no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued notifications in FIFO order.
  - Handlers may emit new notifications; those run in the same drain.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
from collections import defaultdict
import traceback


# ═══════════════════════════════════════════════════════════════════
#  Notification definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ActivityRefused:
    """A command was rejected by its preconditions."""
    activity: str
    reason: str = ""


@dataclass
class ActivityResolved:
    """An activity ran and its outcome was applied."""
    activity: str
    success: bool = True
    food: float = 0.0
    message: str = ""


@dataclass
class StateChanged:
    """The organism's activity state moved (e.g. hunting → idle)."""
    previous: str
    current: str


@dataclass
class EventActivated:
    """A catalog event became active."""
    name: str
    area: str = ""
    rarity: str = ""
    duration: int = 0
    food_lost: float = 0.0
    manual: bool = False


@dataclass
class EventRecovered:
    """An active event ran out."""
    name: str


@dataclass
class AfflictionStarted:
    kind: str
    severity: float = 1.0
    duration: int = 0


@dataclass
class AfflictionCleared:
    kind: str


@dataclass
class EvolutionReady:
    """Points reached the requirement for the next level."""
    level: int
    required: float


@dataclass
class LevelUp:
    level: int


@dataclass
class ActivityUnlocked:
    activity: str


@dataclass
class ThoughtMilestone:
    """The organism had its first thought (one-way)."""


@dataclass
class AreaChanged:
    area: str


@dataclass
class OrganismDied:
    cause: str
    level: int = 0
    day: int = 1


# ═══════════════════════════════════════════════════════════════════
#  Notification Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget notification bus owned by the simulation."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue a notification for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* for *event_type* (the class name)."""
        self._subs[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        handlers = self._subs.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def drain(self) -> int:
        """Process all queued notifications.  Returns number processed."""
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                self._stats[name] += 1
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending notifications."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Cumulative notification counts by type."""
        return dict(self._stats)

    def pending_count(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
