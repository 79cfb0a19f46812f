from __future__ import annotations
import os
import json
import logging
from typing import Any, Dict
from pathlib import Path
import copy

from .config_types import AppConfig

logger = logging.getLogger(__name__)

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "matching": {
        "default_min_score": 0.30,
        "min_cross_enterprise_score": 0.40,
        "min_same_enterprise_score": 0.30,
        "max_candidates_per_item": None,
        "progress_interval": 100,
    },
    "reporting": {
        "top_matches": 10,
        "system_sample_size": 50,
        "progress_enabled": True,
    },
    # ScoringConfig field overrides, e.g. {"weight_title": 0.35}
    "scoring": {},
}

ENV_PREFIX = "LFM__"
PACKAGE_LOGGER = "lfm"


def deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Merge dict b into a (shallow copies) returning new dict.
    Nested dicts are merged recursively; other values override.
    """
    result = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)  # type: ignore[arg-type]
        else:
            result[k] = v
    return result


def _strip_inline_comment(val: str) -> str:
    """Cut a value at the first `#` that is not inside quotes."""
    quote = None
    for idx, ch in enumerate(val):
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif ch == "#" and quote is None:
            return val[:idx].rstrip()
    return val


def _load_dotenv(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = (part.strip() for part in line.split("=", 1))
        val = _strip_inline_comment(val)
        if len(val) >= 2 and val[0] == val[-1] and val[0] in ("'", '"'):
            val = val[1:-1]
        if key:
            values[key] = val
    return values


def load_config(
    overrides: Dict[str, Any] | None = None,
    dotenv_path: Path | None = None,
    configure_logging: bool = False,
) -> Dict[str, Any]:
    """Load configuration merging defaults <- .env <- environment <- overrides.

    During test runs (detected via PYTEST_CURRENT_TEST) .env loading is skipped
    unless LFM_ENABLE_DOTENV=1 is set to allow deterministic defaults.

    Args:
        overrides: Dict of values to deep-merge last (primarily for tests).
        dotenv_path: Location of the .env file (default: ./.env).
        configure_logging: Also install a root handler via ``basicConfig``.
            Off by default so a host application keeps its own logging setup;
            the ``lfm`` logger level is applied either way.

    Returns:
        dict: Configuration dictionary (for typed access use load_typed_config()).
    """
    dotenv_values: Dict[str, str] = {}
    if os.environ.get('LFM_ENABLE_DOTENV') or not os.environ.get('PYTEST_CURRENT_TEST'):
        dotenv_values = _load_dotenv(dotenv_path or Path('.env'))
    cfg: Dict[str, Any] = copy.deepcopy(_DEFAULTS)

    # real env wins over .env
    combined = {**{k: v for k, v in dotenv_values.items() if k.startswith(ENV_PREFIX)},
                **{k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)}}
    for raw_key, value in combined.items():
        path_parts = raw_key[len(ENV_PREFIX):].split("__")
        cursor: Dict[str, Any] = cfg
        for part in path_parts[:-1]:
            cursor = cursor.setdefault(part.lower(), {})  # type: ignore[assignment]
        cursor[path_parts[-1].lower()] = coerce_scalar(value)
    if overrides:
        cfg = deep_merge(cfg, overrides)

    apply_log_level(cfg.get('log_level', 'INFO'), configure_root=configure_logging)

    return cfg


def load_typed_config(
    overrides: Dict[str, Any] | None = None,
    dotenv_path: Path | None = None,
    configure_logging: bool = False,
) -> AppConfig:
    """Load configuration as typed AppConfig object (see load_config)."""
    return AppConfig.from_dict(load_config(overrides, dotenv_path, configure_logging))


def apply_log_level(level_name: Any, configure_root: bool = False) -> int:
    """Set the ``lfm`` logger level; unknown names fall back to INFO.

    With ``configure_root`` the root logger is (re)configured with a plain
    message format, for scripts that have no logging setup of their own.
    """
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    if configure_root:
        logging.basicConfig(level=level, format='%(message)s', force=True)
    return level


def coerce_scalar(value: str) -> Any:
    txt = value.strip()
    # JSON object or array
    if (txt.startswith('[') and txt.endswith(']')) or (txt.startswith('{') and txt.endswith('}')):
        try:
            return json.loads(txt)
        except ValueError:
            pass  # fall through to scalar heuristics
    lower = txt.lower()
    if lower in {"none", "null"}:
        return None
    if lower in {"true", "yes"}:
        return True
    if lower in {"false", "no"}:
        return False
    if txt.isdigit() or (txt.startswith("-") and txt[1:].isdigit()):
        return int(txt)
    try:
        return float(txt)
    except ValueError:
        return txt

__all__ = ["load_config", "deep_merge", "load_typed_config", "coerce_scalar", "apply_log_level"]
