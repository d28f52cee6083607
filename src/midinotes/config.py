# src/midinotes/config.py
from __future__ import annotations
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, Optional, Union
import copy
import yaml

# package root: .../src/midinotes
PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "midinotes" / "config.yaml"

OVERLAPS = ("queue", "stack")
ORPHANS = ("skip",)
UNITS = ("ticks", "wholes", "seconds")

class ConfigError(ValueError):
    """Invalid option value; raised before any input is read."""

def _safe_load(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out

def load_config(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Loads the shipped defaults and deep-merges the user's YAML on top.
    Missing files count as empty; malformed YAML raises yaml.YAMLError.
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    cfg = _deep_merge(_safe_load(dpath), _safe_load(upath))
    cfg.setdefault("notes", {})
    cfg.setdefault("timesigs", {})
    return cfg

# --- validators ---

def check_overlaps(value: str) -> str:
    if value not in OVERLAPS:
        raise ConfigError(f"invalid value for overlaps: {value!r} (expected one of {', '.join(OVERLAPS)})")
    return value

def check_orphans(value: str) -> str:
    if value not in ORPHANS:
        raise ConfigError(f"invalid value for orphans: {value!r} (only 'skip' is supported)")
    return value

def check_unit(value: str) -> str:
    if value not in UNITS:
        raise ConfigError(f"unknown unit: {value!r} (expected one of {', '.join(UNITS)})")
    return value

def parse_upbeat(value: Union[str, int, float, Fraction, None], unit: str) -> Union[int, float, Fraction]:
    """Brings an upbeat into the number type of `unit` (int ticks, Fraction wholes, float seconds)."""
    check_unit(unit)
    if value is None:
        value = 0
    try:
        if unit in ("ticks", "wholes"):
            out = Fraction(value)
        else:
            out = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid upbeat for unit {unit}: {value!r}") from e
    if unit == "ticks":
        if out.denominator != 1:
            raise ConfigError(f"upbeat in ticks must be a whole number: {value!r}")
        out = int(out)
    if out < 0:
        raise ConfigError(f"upbeat must not be negative: {value!r}")
    return out

def note_options(cfg: Dict[str, Any]) -> Dict[str, Any]:
    sect = cfg.get("notes", {}) or {}
    return {
        "overlaps": check_overlaps(str(sect.get("overlaps", "queue"))),
        "orphans": check_orphans(str(sect.get("orphans", "skip"))),
        "warnings": bool(sect.get("warnings", False)),
    }

def timesig_options(cfg: Dict[str, Any]) -> Dict[str, Any]:
    sect = cfg.get("timesigs", {}) or {}
    unit = check_unit(str(sect.get("unit", "wholes")))
    return {"unit": unit, "upbeat": parse_upbeat(sect.get("upbeat", 0), unit)}
