"""simulation/scheduler.py — Single clock for every periodic tick.

All timed work (the 100 ms hunger/growth tick, the 1 s calendar tick,
the 2 s decay/event tick, the short idle-return after an activity)
is posted to one priority queue ordered by simulation time::

    sched = TickScheduler()
    sched.every("fast", 100, on_fast, priority=0)
    sched.every("slow", 2000, on_slow, priority=2)
    sched.call_later(100, back_to_idle)
    ...
    sched.advance(dt)          # dt in seconds, from the frame loop

Times are integer milliseconds so repeated 0.1 s steps never drift.
Tasks due at the same instant run by priority, then posting order.
``halt()`` cancels everything for good (death / reset).
"""

from __future__ import annotations
import heapq
from dataclasses import dataclass, field
from typing import Callable

ONE_SHOT_PRIORITY = 100


@dataclass(order=True)
class ScheduledTask:
    """A single entry in the scheduler priority queue.

    Ordered by ``(time, priority, _seq)`` so the heap gives earliest
    first, then the lower priority number, then insertion order.
    """
    time: int
    priority: int
    # heapq tiebreaker (insertion order), avoids comparing callbacks
    _seq: int = field(compare=True, repr=False)
    name: str = field(compare=False, default="")
    callback: Callable[[], None] | None = field(compare=False, default=None)
    interval: int = field(compare=False, default=0)     # 0 → one-shot
    cancelled: bool = field(compare=False, default=False)


class TickScheduler:
    """Priority-queue scheduler driven by ``advance(dt)``."""

    def __init__(self) -> None:
        self._queue: list[ScheduledTask] = []
        self._seq: int = 0
        self._carry: float = 0.0          # sub-millisecond remainder
        self.now_ms: int = 0
        self.halted: bool = False
        # Stats
        self.tasks_run: int = 0

    # ── Posting ──────────────────────────────────────────────────────

    def _push(self, time: int, priority: int, name: str,
              callback: Callable[[], None], interval: int) -> ScheduledTask:
        self._seq += 1
        task = ScheduledTask(time=time, priority=priority, _seq=self._seq,
                             name=name, callback=callback, interval=interval)
        heapq.heappush(self._queue, task)
        return task

    def every(self, name: str, interval_ms: int, callback: Callable[[], None],
              priority: int = 0) -> ScheduledTask | None:
        """Run *callback* every *interval_ms*, first one interval from now.

        Registering a name that already exists replaces the old task.
        """
        if self.halted:
            return None
        interval_ms = int(interval_ms)
        if interval_ms <= 0:
            raise ValueError(f"interval for '{name}' must be positive")
        self.cancel(name)
        return self._push(self.now_ms + interval_ms, priority, name,
                          callback, interval_ms)

    def call_later(self, delay_ms: int, callback: Callable[[], None],
                   name: str = "", priority: int = ONE_SHOT_PRIORITY
                   ) -> ScheduledTask | None:
        """Run *callback* once, *delay_ms* from now."""
        if self.halted:
            return None
        return self._push(self.now_ms + max(0, int(delay_ms)), priority,
                          name, callback, 0)

    # ── Cancellation ─────────────────────────────────────────────────

    def cancel(self, name: str) -> int:
        """Cancel every pending task called *name*.  Returns count."""
        count = 0
        for task in self._queue:
            if task.name == name and not task.cancelled:
                task.cancelled = True
                count += 1
        return count

    def halt(self) -> None:
        """Cancel everything and refuse new work."""
        for task in self._queue:
            task.cancelled = True
        self._queue.clear()
        self.halted = True

    # ── Advance ──────────────────────────────────────────────────────

    def advance(self, dt: float) -> int:
        """Move the clock forward *dt* seconds.  Returns tasks run."""
        if self.halted or dt <= 0:
            return 0
        total = self._carry + dt * 1000.0
        step = int(total)
        self._carry = total - step
        return self.advance_ms(step)

    def advance_ms(self, ms: int) -> int:
        """Move the clock forward *ms* milliseconds, running due tasks."""
        if self.halted:
            return 0
        target = self.now_ms + max(0, int(ms))
        count = 0

        while self._queue and not self.halted:
            if self._queue[0].cancelled:
                heapq.heappop(self._queue)
                continue
            if self._queue[0].time > target:
                break

            task = heapq.heappop(self._queue)
            self.now_ms = task.time
            if task.callback is not None:
                task.callback()
                count += 1

            if task.interval and not task.cancelled and not self.halted:
                self._push(task.time + task.interval, task.priority,
                           task.name, task.callback, task.interval)

        if not self.halted:
            self.now_ms = target
        self.tasks_run += count
        return count

    # ── Queries ──────────────────────────────────────────────────────

    def peek_time(self) -> float:
        """Time of the next live task, or inf if empty."""
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        if self._queue:
            return self._queue[0].time
        return float("inf")

    def pending_count(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled)

    def has_pending(self, name: str) -> bool:
        return any(t.name == name and not t.cancelled for t in self._queue)

    def debug_dump(self) -> list[str]:
        """Human-readable list of pending tasks (soonest first)."""
        live = sorted(t for t in self._queue if not t.cancelled)
        return [
            f"t={t.time}ms p={t.priority} {t.name or '<once>'}"
            + (f" every {t.interval}ms" if t.interval else "")
            for t in live
        ]
