"""core/tuning.py — Data-driven balance numbers.

Every gameplay number (decay rates, cooldown lengths, event odds,
evolution costs) lives in ``data/tuning.toml`` and is read once at
startup.  Any system can look a value up with::

    from core.tuning import get as _tun
    rate = _tun("organism.decay", "food_base", 0.5)

The default passed at the call site is what the game runs with when
the file (or a TOML parser) is missing, so the two must agree.

Hot-reload: call ``reload()``.  In-game, press F4 on the console.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    try:
        import tomli as tomllib            # pip install tomli
    except ModuleNotFoundError:
        tomllib = None                     # type: ignore[assignment]


_data: dict = {}
_path: Path | None = None


def default_path() -> Path:
    """``data/tuning.toml`` relative to the project root."""
    return Path(__file__).resolve().parent.parent / "data" / "tuning.toml"


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning values from *path* (default file if None)."""
    global _data, _path

    path = default_path() if path is None else Path(path)
    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found, using defaults")
        _data = {}
        return

    if tomllib is None:
        print("[TUNING] No TOML parser available (need Python 3.11+ or `pip install tomli`)")
        _data = {}
        return

    try:
        with open(path, "rb") as f:
            _data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        print(f"[TUNING] Could not read {path}: {exc}")
        _data = {}
        return

    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {path}")


def reload() -> None:
    """Re-read the tuning file from disk."""
    load(_path)


def clear() -> None:
    """Forget every loaded value so call-site defaults apply."""
    global _data
    _data = {}


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"events.probabilities"`` looks up ``[events.probabilities]``.

    >>> get("events.probabilities", "common", 0.06)
    0.06
    """
    node = _lookup(section)
    if isinstance(node, dict):
        return node.get(key, default)
    return default


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    node = _lookup(section_path)
    if isinstance(node, dict):
        return dict(node)
    return {}


def _lookup(section_path: str):
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _count_leaves(d: dict, _n: int = 0) -> int:
    for v in d.values():
        if isinstance(v, dict):
            _n = _count_leaves(v, _n)
        else:
            _n += 1
    return _n
