"""simulation/catalog.py — Environmental event catalog.

Templates live in ``data/events/<area>.toml`` as ``[[event]]`` tables::

    [[event]]
    name = "Plankton swarm"
    level = 1
    hunger = 3
    duration = 3
    rarity = "common"
    description = "..."

Usage:
    catalog = EventCatalog.from_dir("data/events")
    catalog.by_area("sea")          # → [EventTemplate, ...]
    catalog.get("Plankton swarm")   # → EventTemplate | None
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

from core.constants import AREAS, RARITIES, COMMON, SEA
from components.catalog import EventTemplate

FALLBACK_EVENT = EventTemplate(
    name="Basic threat",
    area=SEA,
    level=1,
    hunger=2.0,
    disease=1.0,
    mental_health=-1.0,
    duration=3,
    description="The water turns hostile for a while.",
    rarity=COMMON,
)


def default_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "events"


def template_from_dict(raw: dict, area: str) -> EventTemplate | None:
    """Build a template from one TOML row.  Returns None when invalid."""
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    area = raw.get("area", area)
    rarity = raw.get("rarity", COMMON)
    try:
        level = int(raw.get("level", 1))
        tpl = EventTemplate(
            name=name.strip(),
            area=area,
            level=level,
            hunger=float(raw.get("hunger", 0.0)),
            disease=float(raw.get("disease", 0.0)),
            mental_health=float(raw.get("mental_health", 0.0)),
            duration=max(0, int(raw.get("duration", 0))),
            description=str(raw.get("description", "")),
            rarity=rarity,
        )
    except (TypeError, ValueError):
        return None
    if tpl.area not in AREAS or tpl.rarity not in RARITIES or tpl.level not in (1, 2, 3):
        return None
    return tpl


class EventCatalog:
    """Immutable-after-load set of event templates, keyed by unique name."""

    def __init__(self, templates: list[EventTemplate] | None = None):
        self._by_name: dict[str, EventTemplate] = {}
        for tpl in templates or []:
            self.add(tpl)

    # ── public API ──────────────────────────────────────────────────

    def add(self, tpl: EventTemplate) -> bool:
        """Register *tpl*.  Duplicate names keep the first one."""
        if tpl.name in self._by_name:
            print(f"[CATALOG] duplicate event '{tpl.name}' ignored")
            return False
        self._by_name[tpl.name] = tpl
        return True

    def get(self, name: str) -> EventTemplate | None:
        return self._by_name.get(name)

    def all(self) -> list[EventTemplate]:
        return list(self._by_name.values())

    def by_area(self, area: str) -> list[EventTemplate]:
        return [t for t in self._by_name.values() if t.area == area]

    def by_level(self, level: int) -> list[EventTemplate]:
        return [t for t in self._by_name.values() if t.level == level]

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    # ── loading ─────────────────────────────────────────────────────

    @classmethod
    def from_dir(cls, dirpath: str | Path | None = None) -> "EventCatalog":
        """Load every ``<area>.toml`` under *dirpath*.

        Falls back to a single built-in event when nothing loads.
        """
        catalog = cls()
        dirpath = default_dir() if dirpath is None else Path(dirpath)
        for area in AREAS:
            catalog.load_file(dirpath / f"{area}.toml", area)
        if len(catalog) == 0:
            print("[CATALOG] no events loaded, using built-in fallback")
            catalog.add(FALLBACK_EVENT)
        return catalog

    def load_file(self, filepath: str | Path, area: str) -> int:
        """Load one area file.  Returns the number of templates added."""
        filepath = Path(filepath)
        if not filepath.exists():
            print(f"[CATALOG] file not found: {filepath}")
            return 0
        try:
            with open(filepath, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            print(f"[CATALOG] could not read {filepath}: {exc}")
            return 0

        added = 0
        for raw in data.get("event", []):
            if not isinstance(raw, dict):
                continue
            tpl = template_from_dict(raw, area)
            if tpl is None:
                print(f"[CATALOG] skipping invalid event in {filepath.name}: {raw.get('name', '?')}")
                continue
            if self.add(tpl):
                added += 1
        print(f"[CATALOG] Loaded {added} {area} events from {filepath.name}")
        return added
