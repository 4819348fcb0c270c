"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader (mapping root enforced)
 - `resolve_config_path`: explicit path, $PATHENTRY_CONFIG, or configs/config.yaml
 - `load_logging_config`: validated `logging:` section
 - `load_path_settings`: cached `PathSettings` built from the `paths:` section
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from common.base.file_io import read_yaml


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
CONFIG_ENV_VAR = "PATHENTRY_CONFIG"
LOGGING_SECTION_KEY = "logging"
PATHS_SECTION_KEY = "paths"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"

LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}
PATHS_ALLOWED_KEYS = {
    "separator",
    "lowercase",
    "max_length",
    "default_encoding",
    "encoding_sample_size",
    "encodings",
    "max_attempts",
}
ROOT_ALLOWED_KEYS = {LOGGING_SECTION_KEY, PATHS_SECTION_KEY}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}
AUTO_VALUES = {"auto", "default", ""}

DEFAULT_ENCODINGS: Tuple[str, ...] = (
    "ascii",
    "utf-8",
    "utf-8-sig",
    "windows-1252",
    "iso-8859-1",
    "utf-16",
)


@dataclass(frozen=True)
class PathSettings:
    separator: str = "-"
    lowercase: bool = True
    max_length: Optional[int] = None
    default_encoding: str = "utf-8"
    encoding_sample_size: int = 4096
    encodings: Tuple[str, ...] = DEFAULT_ENCODINGS
    max_attempts: int = 100000


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    unexpected = [key for key in data if key not in ROOT_ALLOWED_KEYS]
    if unexpected:
        raise ValueError(
            f"Configuration '{cfg_path}' contains unsupported sections: {', '.join(sorted(map(str, unexpected)))}"
        )
    return data


def resolve_config_path(config_path: str | Path | None = None) -> Optional[Path]:
    """
    Pick the configuration file to read.

    An explicit path wins, then the ``PATHENTRY_CONFIG`` environment variable,
    then ``configs/config.yaml`` next to the packages. Returns None when no
    file applies, in which case built-in defaults are used.
    """
    if config_path:
        return Path(config_path).expanduser()
    env_value = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_value:
        return Path(env_value).expanduser()
    default = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return default if default.exists() else None


def _section(root: Mapping[str, Any], key: str, allowed: set[str], config_path: Optional[Path]) -> ConfigDict:
    payload = root.get(key) or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Section '{key}' must be a mapping in {config_path}")
    invalid = [name for name in payload if name not in allowed]
    if invalid:
        raise ValueError(
            f"Section '{key}' contains unsupported keys in {config_path}: {', '.join(sorted(map(str, invalid)))}"
        )
    return dict(payload)


def _coerce_bool(value: object, key: str, config_path: Optional[Path]) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(f"Configuration '{config_path}' field '{key}' must be a boolean (yes/no).")


def _coerce_int(
    value: object,
    key: str,
    config_path: Optional[Path],
    *,
    minimum: int = 1,
) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Configuration '{config_path}' field '{key}' must be an integer.")
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Configuration '{config_path}' field '{key}' must be an integer.") from exc
    if number < minimum:
        raise ValueError(f"Configuration '{config_path}' field '{key}' must be >= {minimum}.")
    return number


def _normalize_use_rich(value: Any, config_path: Optional[Path]) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in AUTO_VALUES:
        return None
    return _coerce_bool(value, "use_rich", config_path)


def _normalize_encodings(value: Any, config_path: Optional[Path]) -> Tuple[str, ...]:
    if isinstance(value, str):
        items: Sequence[Any] = [v.strip() for v in value.split(",") if v.strip()]
    elif isinstance(value, Sequence):
        items = value
    else:
        raise ValueError(
            f"Configuration '{config_path}' field 'encodings' must be a list or comma-separated string."
        )
    names = tuple(str(item).strip() for item in items if str(item).strip())
    if not names:
        raise ValueError(f"Configuration '{config_path}' field 'encodings' must not be empty.")
    for name in names:
        try:
            codecs.lookup(name)
        except LookupError as exc:
            raise ValueError(f"Configuration '{config_path}' lists unknown encoding '{name}'.") from exc
    return names


def _extract_logging_settings(root: Mapping[str, Any], config_path: Optional[Path]) -> ConfigDict:
    raw = _section(root, LOGGING_SECTION_KEY, LOGGING_ALLOWED_KEYS, config_path)
    settings: ConfigDict = {
        "level": raw.get("level"),
        "use_rich": _normalize_use_rich(raw.get("use_rich"), config_path),
        "log_dir": raw.get("log_dir"),
        "file_prefix": raw.get("file_prefix"),
    }
    if settings["log_dir"] is not None:
        settings["log_dir"] = str(Path(str(settings["log_dir"])).expanduser())
    return settings


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    resolved = resolve_config_path(config_path)
    root = load_config(resolved)
    return _extract_logging_settings(root, resolved)


@lru_cache(maxsize=8)
def _load_path_settings_cached(resolved: Optional[Path]) -> PathSettings:
    root = load_config(resolved)
    raw = _section(root, PATHS_SECTION_KEY, PATHS_ALLOWED_KEYS, resolved)
    defaults = PathSettings()

    separator = raw.get("separator", defaults.separator)
    if not isinstance(separator, str) or len(separator) != 1:
        raise ValueError(f"Configuration '{resolved}' field 'separator' must be a single character.")

    max_length = raw.get("max_length")
    return PathSettings(
        separator=separator,
        lowercase=_coerce_bool(raw.get("lowercase", defaults.lowercase), "lowercase", resolved),
        max_length=None if max_length is None else _coerce_int(max_length, "max_length", resolved, minimum=2),
        default_encoding=_normalize_encodings(
            [raw.get("default_encoding", defaults.default_encoding)], resolved
        )[0],
        encoding_sample_size=_coerce_int(
            raw.get("encoding_sample_size", defaults.encoding_sample_size), "encoding_sample_size", resolved
        ),
        encodings=(
            _normalize_encodings(raw["encodings"], resolved) if "encodings" in raw else defaults.encodings
        ),
        max_attempts=_coerce_int(raw.get("max_attempts", defaults.max_attempts), "max_attempts", resolved),
    )


def load_path_settings(config_path: str | Path | None = None) -> PathSettings:
    """Return the (cached) path settings for the resolved configuration file."""
    return _load_path_settings_cached(resolve_config_path(config_path))


def clear_settings_cache() -> None:
    _load_path_settings_cached.cache_clear()
