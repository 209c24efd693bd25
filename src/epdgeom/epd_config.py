# epdgeom/epd_config.py
from __future__ import annotations
from typing import Any, Dict, Optional, Set
import json
import os

import yaml

from epdgeom.epd_tiles import TileID, resolve_tile


def _load_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """
    Load YAML or JSON into a dict. Returns {} if path is None.
    """
    if not path:
        return {}
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    text = _load_text(path)
    lower = path.lower()
    if lower.endswith(".json"):
        data = json.loads(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON must be an object.")
        return data
    if lower.endswith((".yml", ".yaml")):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML must be a mapping/object.")
        return data
    # unknown extension: YAML is a superset of JSON
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Unsupported config format (use .json, .yml, or .yaml): {e}")
    if not isinstance(data, dict):
        raise ValueError("Unsupported config format (use .json, .yml, or .yaml).")
    return data


def deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dicts. override wins on conflicts.
    """
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def parse_tile(value: Any) -> TileID:
    """
    Accept either:
      - a unique ID, as int or string ("-203")
      - a "PP,TT,EW" string ("2,3,-1" or "2,3,east")
      - a dict like {"position": 2, "tile": 3, "side": "east"}
    Return a TileID.
    """
    if isinstance(value, TileID):
        return value
    if isinstance(value, dict):
        tile_number = value.get("tile", value.get("tile_number"))
        return TileID(value.get("position"), tile_number, value.get("side"))
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",") if p.strip()]
        if len(parts) == 3:
            return TileID(int(parts[0]), int(parts[1]), parts[2])
        if len(parts) == 1:
            return resolve_tile(int(parts[0]))
        raise ValueError(f"tile must be a unique ID or 'PP,TT,EW', got {value!r}")
    return resolve_tile(value)


def overlay_config_on_namespace(ns, cfg: Dict[str, Any], subcommand: str, provided_keys: Optional[Set[str]] = None) -> None:
    defaults = cfg.get("defaults", {})
    subcfg   = cfg.get(subcommand, {})
    flat     = deep_update(defaults, subcfg)

    for k, v in flat.items():
        if not hasattr(ns, k):
            continue
        # If user explicitly passed it on CLI, don't touch it.
        if provided_keys and k in provided_keys:
            continue

        setattr(ns, k, v)
