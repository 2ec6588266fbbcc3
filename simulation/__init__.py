"""simulation — Rules for one organism's life.

Everything here is headless: no pygame imports, so the whole life can be
driven from tests by advancing the scheduler.

Submodules
----------
organism       OrganismState — vitals, attributes, food, cooldowns
scheduler      TickScheduler — integer-ms priority queue of ticks
catalog        EventCatalog — event templates loaded from data/events/*.toml
event_engine   EventEngine — random events, areas and afflictions
progression    ProgressionTracker — evolution points, levels, unlocks
activities     ActivityResolver — the nine player activities
console        DebugConsole — developer overrides
world_sim      Simulation — composition root and player commands
"""
