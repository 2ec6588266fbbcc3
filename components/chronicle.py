"""components.chronicle — In-game activity log.

A ring-buffer that records what the organism did (``daily`` feed) and
what happened to it (``key`` feed), stamped with the in-game calendar.
Read by the HUD scene.

Usage:
    chron.record("daily", "Hunt succeeded, found 7 food", stamp="Day 3 14:24")

Each entry is a dict:
    {"stamp": str, "feed": str, "msg": str}
"""

from __future__ import annotations
from dataclasses import dataclass, field

DAILY = "daily"
KEY = "key"


@dataclass
class Chronicle:
    """Two bounded feeds, newest last."""

    daily: list[dict] = field(default_factory=list)
    key: list[dict] = field(default_factory=list)
    max_entries: int = 10

    def record(self, feed: str, msg: str, *, stamp: str = "") -> None:
        entries = self.key if feed == KEY else self.daily
        entries.append({"stamp": stamp, "feed": feed, "msg": msg})
        if len(entries) > self.max_entries:
            del entries[:-self.max_entries]

    def clear(self):
        self.daily.clear()
        self.key.clear()

    def recent(self, feed: str = DAILY, n: int = 10) -> list[dict]:
        """Return the *n* most recent entries of *feed* (newest last)."""
        entries = self.key if feed == KEY else self.daily
        return entries[-n:]

    def last_message(self, feed: str = DAILY) -> str:
        entries = self.key if feed == KEY else self.daily
        return entries[-1]["msg"] if entries else ""
