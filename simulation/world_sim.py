"""simulation/world_sim.py — Composition root for one organism's life.

Builds every subsystem, wires them together with explicit references
(no globals) and exposes the player commands plus a single
``update(dt)`` for the frame loop.

Usage in a scene::

    # In on_enter():
    self.sim = Simulation(rng=RandomSource(), saves=SaveAdapter())
    self.sim.load_from_save()

    # In update():
    self.sim.update(dt)

    # On a key press:
    self.sim.hunt()

Tick plan (one scheduler, integer milliseconds):
  fast      100 ms   hunger check → evolution-point growth
  calendar  1 s      +24 game-minutes, periodic autosave
  slow      2 s      natural decay → cooldowns → events → death check
"""

from __future__ import annotations

from core.constants import DEATH_STARVATION, GAME_MINUTES_PER_CALENDAR_TICK
from core.events import EventBus, OrganismDied, StateChanged
from core.rng import RandomSource
from core.save import SaveAdapter
from core.tuning import get as _tun
from components.catalog import ActivityResult
from components.chronicle import Chronicle, DAILY, KEY
from simulation.activities import ActivityResolver
from simulation.catalog import EventCatalog
from simulation.console import DebugConsole
from simulation.event_engine import EventEngine
from simulation.organism import OrganismState
from simulation.progression import ProgressionTracker
from simulation.scheduler import TickScheduler

FAST_PRIORITY = 0
CALENDAR_PRIORITY = 1
SLOW_PRIORITY = 2

DEATH_MESSAGES = {
    "starvation": "Died of starvation",
    "disease": "Succumbed to disease",
    "mental_collapse": "Mind collapsed",
}


class Simulation:
    """Owns the organism and every system that acts on it."""

    def __init__(self, rng: RandomSource | None = None,
                 catalog: EventCatalog | None = None,
                 saves: SaveAdapter | None = None,
                 bus: EventBus | None = None,
                 chronicle: Chronicle | None = None,
                 autostart: bool = True) -> None:
        self.rng = rng if rng is not None else RandomSource()
        self.bus = bus if bus is not None else EventBus()
        self.chronicle = chronicle if chronicle is not None else Chronicle()
        self.catalog = catalog if catalog is not None else EventCatalog.from_dir()
        self.saves = saves

        self.organism = OrganismState()
        self.progression = ProgressionTracker(self.organism, self.rng,
                                              self.bus, self.chronicle)
        self.scheduler = TickScheduler()
        self.engine = EventEngine(self.organism, self.progression, self.catalog,
                                  self.rng, self.bus, self.chronicle,
                                  clock=self.elapsed)
        self.activities = ActivityResolver(self.organism, self.progression,
                                           self.engine, self.rng, self.bus,
                                           self.chronicle,
                                           defer=self._defer)
        self.console = DebugConsole(self)
        self.calendar_ticks = 0
        self._started = False

        if autostart:
            self.start()

    # ── Setup ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Register the periodic ticks.  Safe to call once per life."""
        if self._started:
            return
        sched = self.scheduler
        sched.every("fast", int(_tun("scheduler", "fast_ms", 100)),
                    self._fast_tick, priority=FAST_PRIORITY)
        sched.every("calendar", int(_tun("scheduler", "calendar_ms", 1000)),
                    self._calendar_tick, priority=CALENDAR_PRIORITY)
        sched.every("slow", int(_tun("scheduler", "slow_ms", 2000)),
                    self._slow_tick, priority=SLOW_PRIORITY)
        self._started = True
        print(f"[SIM] Started: {len(self.catalog)} events in catalog, "
              f"area {self.engine.current_area}")

    def reset(self) -> None:
        """Begin a brand-new life (after death or from the console)."""
        self.scheduler.halt()
        self.scheduler = TickScheduler()
        self.organism.reset()
        self.progression.reset()
        self.engine.load_saved_data(None)
        self.chronicle.clear()
        self.bus.clear()
        self.activities.paused_returns.clear()
        self.calendar_ticks = 0
        self._started = False
        self.start()
        self._log(KEY, "A new life begins")

    def _defer(self, delay_ms: int, fn) -> None:
        self.scheduler.call_later(delay_ms, fn)

    def elapsed(self) -> float:
        """Simulation seconds since this life started."""
        return self.scheduler.now_ms / 1000.0

    # ── Frame update ─────────────────────────────────────────────────

    def update(self, dt: float) -> int:
        """Advance the clock by *dt* seconds and flush notifications."""
        count = self.scheduler.advance(dt)
        self.bus.drain()
        return count

    def advance_ms(self, ms: int) -> int:
        count = self.scheduler.advance_ms(ms)
        self.bus.drain()
        return count

    # ── Ticks ────────────────────────────────────────────────────────

    def _fast_tick(self) -> None:
        org = self.organism
        if org.time_paused or not org.alive:
            return
        if org.apply_hunger_tick():
            self._die(DEATH_STARVATION)
            return
        self.progression.tick_growth()

    def _calendar_tick(self) -> None:
        org = self.organism
        if org.time_paused or not org.alive:
            return
        org.advance_calendar(GAME_MINUTES_PER_CALENDAR_TICK)
        self.calendar_ticks += 1
        every = int(_tun("save", "autosave_every", 10))
        if self.saves is not None and every > 0 and self.calendar_ticks % every == 0:
            self.save()

    def _slow_tick(self) -> None:
        org = self.organism
        if org.time_paused or not org.alive:
            return
        level = self.progression.level
        org.apply_natural_decay(level, self.rng)
        previous = org.tick_cooldowns()
        if previous is not None:
            self.bus.emit(StateChanged(previous=previous, current=org.activity_state))
        self.engine.update()
        self.progression.refresh_unlocks()
        cause = org.check_death(level)
        if cause is not None:
            self._die(cause)

    def _die(self, cause: str) -> None:
        """Terminal transition.  Runs once per life."""
        org = self.organism
        if not org.alive:
            return
        org.alive = False
        org.death_cause = cause
        self.scheduler.halt()
        if self.saves is not None:
            self.saves.clear()
        self._log(KEY, DEATH_MESSAGES.get(cause, f"Died ({cause})"))
        print(f"[SIM] Organism died: {cause} at level {self.progression.level}, "
              f"day {org.calendar.day}")
        self.bus.emit(OrganismDied(cause=cause, level=self.progression.level,
                                   day=org.calendar.day))

    # ── Player commands ──────────────────────────────────────────────

    def _command(self, result):
        self.bus.drain()
        return result

    def hunt(self) -> ActivityResult:
        return self._command(self.activities.hunt())

    def rest(self) -> ActivityResult:
        return self._command(self.activities.rest())

    def dormancy(self) -> ActivityResult:
        return self._command(self.activities.dormancy())

    def explore(self) -> ActivityResult:
        return self._command(self.activities.explore())

    def exercise(self) -> ActivityResult:
        return self._command(self.activities.exercise())

    def think(self) -> ActivityResult:
        return self._command(self.activities.think())

    def interact(self) -> ActivityResult:
        return self._command(self.activities.interact())

    def make_tool(self) -> ActivityResult:
        return self._command(self.activities.make_tool())

    def socialize(self) -> ActivityResult:
        return self._command(self.activities.socialize())

    def perform(self, activity: str) -> ActivityResult:
        return self._command(self.activities.perform(activity))

    def gather(self) -> float:
        return self._command(self.progression.gather())

    def evolve(self) -> bool:
        if not self.organism.alive:
            return False
        ok = self.progression.evolve()
        if not ok:
            self._log(DAILY, "Not enough evolution points to evolve yet")
        return self._command(ok)

    def set_time_paused(self, paused: bool) -> None:
        paused = bool(paused)
        if self.organism.time_paused == paused:
            return
        self.organism.time_paused = paused
        if not paused:
            self.activities.resume_idle_returns()
        self._log(KEY, "Time paused" if paused else "Time resumed")
        self.bus.drain()

    def set_area(self, area: str) -> bool:
        return self._command(self.engine.set_current_area(area))

    # ── Snapshot / restore ───────────────────────────────────────────

    def get_state_data(self) -> dict:
        return {
            "organism": self.organism.get_state_data(),
            "progression": self.progression.get_state_data(),
            "events": self.engine.get_state_data(),
        }

    def load_saved_data(self, data) -> None:
        """Restore a snapshot.  Anything unusable falls back to defaults."""
        if not isinstance(data, dict):
            self.organism.reset()
            self.progression.reset()
            self.engine.load_saved_data(None)
            return
        self.organism.load_saved_data(data.get("organism"))
        self.progression.load_saved_data(data.get("progression"))
        self.engine.load_saved_data(data.get("events"))
        self.progression.refresh_unlocks()
        self.activities.paused_returns.clear()
        self.activities.rearm_idle_return()
        self.bus.drain()

    def save(self) -> bool:
        if self.saves is None or not self.organism.alive:
            return False
        return self.saves.save(self.get_state_data())

    def load_from_save(self) -> bool:
        """Restore from the save slot if it holds a usable snapshot."""
        if self.saves is None:
            return False
        data = self.saves.load()
        if data is None:
            return False
        self.load_saved_data(data)
        self._log(KEY, "Life restored from save")
        print(f"[SAVE] Restored level {self.progression.level}, "
              f"day {self.organism.calendar.day}")
        return True

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def alive(self) -> bool:
        return self.organism.alive

    def available_activities(self) -> list[str]:
        return sorted(self.progression.unlocked)

    def _log(self, feed: str, msg: str) -> None:
        self.chronicle.record(feed, msg, stamp=self.organism.calendar.stamp())

    def debug_info(self) -> dict:
        return {
            "t_ms": self.scheduler.now_ms,
            "level": self.progression.level,
            "points": round(self.progression.points, 2),
            "organism": self.organism.debug_info(),
            "events": self.engine.debug_info(),
            "pending_tasks": self.scheduler.pending_count(),
            "tasks_run": self.scheduler.tasks_run,
        }
