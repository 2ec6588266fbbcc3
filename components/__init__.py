"""components — Plain dataclasses shared by the simulation and the UI.

Submodules
----------
catalog    EventTemplate, ActiveEvent, Affliction, ActivityResult
calendar   GameCalendar
chronicle  Chronicle

All public names are re-exported here so code can do
``from components import EventTemplate``.
"""

# ── Events ───────────────────────────────────────────────────────────
from components.catalog import EventTemplate, ActiveEvent, Affliction, ActivityResult

# ── Time ─────────────────────────────────────────────────────────────
from components.calendar import GameCalendar

# ── Logs ─────────────────────────────────────────────────────────────
from components.chronicle import Chronicle

__all__ = [
    "EventTemplate", "ActiveEvent", "Affliction", "ActivityResult",
    "GameCalendar",
    "Chronicle",
]
