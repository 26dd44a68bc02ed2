"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "BeastMaster"
        return Path.home() / "BeastMaster"
    return Path.home() / ".config" / "beastmaster"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def default_config() -> Dict[str, Any]:
    return {"definitions_dir": None, "log_level": _DEFAULT_LOG_LEVEL, "seed": None}


def _normalize_definitions_dir(value: object) -> str | None:
    return value if isinstance(value, str) and value.strip() else None


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.strip().upper() in _LOG_LEVELS:
        return value.strip().upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_seed(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def normalize_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Return a complete config, replacing invalid or missing values with defaults."""
    return {
        "definitions_dir": _normalize_definitions_dir(raw.get("definitions_dir")),
        "log_level": _normalize_log_level(raw.get("log_level")),
        "seed": _normalize_seed(raw.get("seed")),
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config file %s: expected a JSON object.", config_path)
        return default_config()
    return normalize_config(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = normalize_config(config)
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
