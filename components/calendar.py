"""components.calendar — In-game calendar (not per-entity)."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class GameCalendar:
    """Day / hour / minute of the organism's life.

    Advanced by the calendar tick; one real minute is one game day.
    """
    day: int = 1
    hour: int = 0
    minute: int = 0

    def advance(self, minutes: int) -> None:
        total = self.hour * 60 + self.minute + int(minutes)
        days, rest = divmod(total, 24 * 60)
        self.day += days
        self.hour, self.minute = divmod(rest, 60)

    def time_of_day(self) -> str:
        if 5 <= self.hour < 12:
            return "morning"
        if 12 <= self.hour < 18:
            return "afternoon"
        if 18 <= self.hour < 22:
            return "evening"
        return "night"

    def stamp(self) -> str:
        return f"Day {self.day} {self.hour:02d}:{self.minute:02d}"

    def to_dict(self) -> dict:
        return {"day": self.day, "hour": self.hour, "minute": self.minute}
