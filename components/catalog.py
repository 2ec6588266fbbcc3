"""components.catalog — Event templates, live events and afflictions."""

from __future__ import annotations
from dataclasses import dataclass, field

from core.constants import COMMON, SEA


@dataclass(frozen=True)
class EventTemplate:
    """One immutable environmental event from the catalog.

    ``hunger`` / ``disease`` / ``mental_health`` are per-tick deltas
    before the level and rarity multipliers are applied.
    """
    name: str
    area: str = SEA
    level: int = 1
    hunger: float = 0.0
    disease: float = 0.0
    mental_health: float = 0.0
    duration: int = 0            # 0 → randomised on activation
    description: str = ""
    rarity: str = COMMON

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "area": self.area,
            "level": self.level,
            "hunger": self.hunger,
            "disease": self.disease,
            "mental_health": self.mental_health,
            "duration": self.duration,
            "description": self.description,
            "rarity": self.rarity,
        }


@dataclass
class ActiveEvent:
    """A catalog event that is currently applying its effects."""
    template: EventTemplate
    remaining: int
    started_at: float = 0.0

    @property
    def name(self) -> str:
        return self.template.name

    def to_dict(self) -> dict:
        return {
            "name": self.template.name,
            "remaining": self.remaining,
            "started_at": self.started_at,
        }


@dataclass
class Affliction:
    """Injury / poison / suffocation status with its own countdown."""
    kind: str
    remaining: int
    severity: float = 1.0

    def to_dict(self) -> dict:
        return {"kind": self.kind, "remaining": self.remaining,
                "severity": self.severity}


@dataclass
class ActivityResult:
    """What a player command did, returned to the caller (UI / console)."""
    activity: str
    accepted: bool = True
    success: bool = False
    food: float = 0.0
    gains: dict[str, float] = field(default_factory=dict)
    message: str = ""
