"""
Database Module
File-based settings storage: db/settings.json holds editor defaults (layout direction, node size, gaps).
The pipeline graph itself lives in memory only.
Uses orjson for faster JSON parsing.
"""

import math
from pathlib import Path
from typing import Any, Dict

import aiofiles
import orjson
from loguru import logger

from layout.constants import (
    DEFAULT_DIRECTION,
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DIRECTIONS,
)

DB_DIR = Path(__file__).parent
SETTINGS_FILE = "settings.json"

# settings.json key -> (layout() keyword, default)
_LAYOUT_KEYS = {
    "nodeWidth": ("node_w", DEFAULT_NODE_W),
    "nodeHeight": ("node_h", DEFAULT_NODE_H),
    "nodeSep": ("node_sep", DEFAULT_NODE_SEP),
    "rankSep": ("rank_sep", DEFAULT_RANK_SEP),
}


def _resolve_layout_config(raw: dict) -> Dict[str, Any]:
    """Resolve layout keyword arguments from raw settings. Missing or bad values fall back to defaults."""
    section = raw.get("layout") if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        section = {}

    direction = section.get("direction")
    cfg: Dict[str, Any] = {"direction": direction if direction in DIRECTIONS else DEFAULT_DIRECTION}
    for key, (kw, default) in _LAYOUT_KEYS.items():
        v = section.get(key)
        try:
            value = float(v) if v is not None else float(default)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid layout.{} = {!r}", key, v)
            value = float(default)
        if not math.isfinite(value) or value < 0 or (kw in ("node_w", "node_h") and value == 0):
            logger.warning("Ignoring out-of-range layout.{} = {!r}", key, v)
            value = float(default)
        cfg[kw] = value
    return cfg


async def get_settings() -> dict:
    """Get full settings from db/settings.json."""
    file_path = DB_DIR / SETTINGS_FILE
    try:
        async with aiofiles.open(file_path, "rb") as f:
            data = await f.read()
        settings = orjson.loads(data)
    except FileNotFoundError:
        return {}
    except orjson.JSONDecodeError as e:
        logger.warning("Invalid JSON in {}: {}", file_path, e)
        return {}
    return settings if isinstance(settings, dict) else {}


async def get_layout_config() -> Dict[str, Any]:
    """Get effective layout config (keyword arguments for layout.layout)."""
    raw = await get_settings()
    return _resolve_layout_config(raw)


async def save_settings(settings: dict) -> dict:
    """Save settings to db/settings.json. Atomic write to avoid corruption."""
    DB_DIR.mkdir(parents=True, exist_ok=True)
    file_path = DB_DIR / SETTINGS_FILE
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    content = orjson.dumps(settings or {}, option=orjson.OPT_INDENT_2).decode("utf-8")
    async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
        await f.write(content)
    tmp_path.replace(file_path)
    return {"success": True}
