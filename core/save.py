"""core/save.py — Best-effort persistence of the organism's life.

Save files (JSON) hold one snapshot of the simulation::

    {
      "format_version": 1,
      "timestamp": 1712345678.0,
      "state": {"organism": {...}, "progression": {...}, "events": {...}}
    }

The adapter never raises into the tick loop: write failures are
printed and reported as ``False``; a missing, corrupt or
wrong-version file loads as ``None`` so the caller starts fresh.

    saves = SaveAdapter()            # saves/slot0.json
    saves.save(sim.get_state_data())
    data = saves.load()              # dict | None
    saves.clear()                    # on death
"""

from __future__ import annotations
import json
import time
from pathlib import Path
from typing import Any

FORMAT_VERSION = 1
SAVES_DIR = Path("saves")


def get_save_file(slot: int = 0, saves_dir: Path | None = None) -> Path:
    """Path for a save slot (the directory is created on save)."""
    return (saves_dir or SAVES_DIR) / f"slot{slot}.json"


class SaveAdapter:
    """Reads and writes one JSON save slot."""

    def __init__(self, slot: int = 0, saves_dir: str | Path | None = None):
        self.slot = slot
        self.saves_dir = Path(saves_dir) if saves_dir is not None else SAVES_DIR
        self.saves_written = 0

    @property
    def path(self) -> Path:
        return get_save_file(self.slot, self.saves_dir)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, state: dict[str, Any]) -> bool:
        """Write *state* to the slot.  Returns False on any I/O error."""
        payload = {
            "format_version": FORMAT_VERSION,
            "timestamp": time.time(),
            "state": state,
        }
        try:
            self.saves_dir.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".tmp")
            with open(tmp, "w") as f:
                json.dump(payload, f, indent=2)
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as ex:
            print(f"[SAVE] Error writing save file: {ex}")
            return False
        self.saves_written += 1
        return True

    def load(self) -> dict[str, Any] | None:
        """Return the saved state, or None if there is nothing usable."""
        path = self.path
        if not path.exists():
            return None
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as ex:
            print(f"[SAVE] Error loading save file: {ex}")
            return None

        if not isinstance(data, dict):
            print("[SAVE] Save file is not an object, ignoring")
            return None
        version = data.get("format_version")
        if version != FORMAT_VERSION:
            print(f"[SAVE] Save version {version!r} != {FORMAT_VERSION}, starting fresh")
            return None
        state = data.get("state")
        if not isinstance(state, dict):
            print("[SAVE] Save file has no state, ignoring")
            return None
        return state

    def clear(self) -> bool:
        """Delete the slot.  True if a file was removed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as ex:
            print(f"[SAVE] Error clearing save file: {ex}")
            return False
        print(f"[SAVE] Cleared {self.path}")
        return True
