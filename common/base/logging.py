"""
common.base.logging

Typed logging for pathentry-tools.

Features:
 - PathLogger subclass carrying the Rich flag and the active log file
 - Rich console handler, or an ANSI/emoji stream handler when Rich is disabled
 - Optional per-run log file
 - Config-driven defaults (level, Rich toggle, log directory, file prefix)
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER_NAME = "pathentry"

# ----------------------------------------------------------------------
# LEVEL STYLE METADATA
# ----------------------------------------------------------------------

ANSI_RESET = "\033[0m"

LEVEL_STYLES: Dict[int, Dict[str, str]] = {
    logging.DEBUG: {"emoji": "🐛", "ansi": "\033[36m", "rich": "bright_cyan"},
    logging.INFO: {"emoji": "ℹ️", "ansi": "\033[32m", "rich": "green"},
    logging.WARNING: {"emoji": "⚠️", "ansi": "\033[33m", "rich": "yellow"},
    logging.ERROR: {"emoji": "❌", "ansi": "\033[31m", "rich": "red"},
    logging.CRITICAL: {"emoji": "💥", "ansi": "\033[95m", "rich": "bold magenta"},
}
DEFAULT_STYLE = LEVEL_STYLES[logging.INFO]


def _level_style(levelno: int) -> Dict[str, str]:
    return LEVEL_STYLES.get(levelno, DEFAULT_STYLE)


# ----------------------------------------------------------------------
# FORMATTERS
# ----------------------------------------------------------------------

class ColorEmojiFormatter(logging.Formatter):
    """Console formatter that injects colored level names and emojis."""

    def format(self, record: logging.LogRecord) -> str:
        style = _level_style(record.levelno)
        display = f"{style['emoji']} {record.levelname}"
        record.level_display = f"{style['ansi']}{display}{ANSI_RESET}"  # type: ignore[attr-defined]
        try:
            return super().format(record)
        finally:
            del record.level_display  # type: ignore[attr-defined]


class EmojiFormatter(logging.Formatter):
    """File formatter that prefixes log lines with the level emoji."""

    def format(self, record: logging.LogRecord) -> str:
        record.level_emoji = _level_style(record.levelno)["emoji"]  # type: ignore[attr-defined]
        return super().format(record)


class PathRichHandler(RichHandler):
    """Rich console handler with emoji-enhanced level column."""

    def get_level_text(self, record: logging.LogRecord) -> Text:  # type: ignore[override]
        style = _level_style(record.levelno)
        text = Text()
        text.append(f"{style['emoji']} ", style=style["rich"])
        text.append(record.levelname, style=style["rich"])
        return text


# ----------------------------------------------------------------------
# LOGGER CLASS
# ----------------------------------------------------------------------

class PathLogger(logging.Logger):
    """Logger with a Rich flag and the optional per-run log file."""

    rich_enabled: bool = False
    log_file: Optional[Path] = None


# ----------------------------------------------------------------------
# CONFIG-DRIVEN DEFAULTS
# ----------------------------------------------------------------------

def _normalize_level(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if candidate in logging._nameToLevel:  # type: ignore[attr-defined]
            return candidate
    elif isinstance(value, int):
        label = logging.getLevelName(value)
        if isinstance(label, str) and not label.startswith("Level "):
            return label
    return "INFO"


def _load_default_logging_settings(config_path: Optional[Path | str]) -> Dict[str, Any]:
    from common.shared.loader import load_logging_config

    return load_logging_config(config_path)


def _release_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# ----------------------------------------------------------------------
# BASE LOGGER SETUP
# ----------------------------------------------------------------------

def setup_logging(
    level: str | int | None = None,
    use_rich: Optional[bool] = None,
    log_dir: Optional[Path | str] = None,
    file_prefix: Optional[str] = None,
    *,
    config_path: Optional[Path | str] = None,
) -> PathLogger:
    """
    Configure and return the package logger.

    Args:
        level: Desired logging level. Defaults to the config value (INFO if unset).
        use_rich: Force-enable or disable the Rich handler. None honors config (on by default).
        log_dir: Directory for the per-run log file. A log file is only written
            when this argument or the config provides one.
        file_prefix: Prefix for generated log filenames.
        config_path: Alternative YAML configuration file.
    """
    defaults = _load_default_logging_settings(config_path)
    resolved_level = _normalize_level(level if level is not None else defaults.get("level"))
    resolved_use_rich = use_rich if use_rich is not None else defaults.get("use_rich")
    if resolved_use_rich is None:
        resolved_use_rich = True
    resolved_log_dir = log_dir or defaults.get("log_dir")
    resolved_file_prefix = file_prefix or defaults.get("file_prefix") or ROOT_LOGGER_NAME

    logging.setLoggerClass(PathLogger)
    logger = cast(PathLogger, logging.getLogger(ROOT_LOGGER_NAME))
    logger.setLevel(resolved_level)
    _release_handlers(logger)

    # ------------------------------------------------------------------
    # Console Handler (Rich or ANSI)
    # ------------------------------------------------------------------
    console_handler: logging.Handler
    if resolved_use_rich:
        console_handler = PathRichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_level=True,
            show_path=False,
            log_time_format="[%X]",
        )
        logger.rich_enabled = True
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            ColorEmojiFormatter(
                fmt="%(asctime)s %(level_display)s %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.rich_enabled = False
    console_handler.setLevel(logging.NOTSET)
    logger.addHandler(console_handler)

    # ------------------------------------------------------------------
    # File Handler
    # ------------------------------------------------------------------
    logger.log_file = None
    if resolved_log_dir:
        directory = Path(resolved_log_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file_path = directory / f"{resolved_file_prefix}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            EmojiFormatter(
                fmt="%(asctime)s %(level_emoji)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        file_handler.setLevel(logging.NOTSET)
        logger.addHandler(file_handler)
        logger.log_file = log_file_path

    logger.propagate = False
    logger._initialized = True  # type: ignore[attr-defined]
    logger.debug(
        "Logger initialized at level %s (Rich=%s)",
        resolved_level,
        "ON" if logger.rich_enabled else "OFF",
    )
    if logger.log_file is not None:
        logger.debug("📄 Log file created at: %s", logger.log_file.resolve())

    return logger


# ----------------------------------------------------------------------
# UTILITY ACCESSOR
# ----------------------------------------------------------------------

def get_logger(name: str = ROOT_LOGGER_NAME) -> PathLogger:
    """Retrieve a namespaced package logger (configured later via setup_logging)."""

    logging.setLoggerClass(PathLogger)
    base = cast(PathLogger, logging.getLogger(ROOT_LOGGER_NAME))

    if not getattr(base, "_initialized", False) and not base.handlers:
        base.addHandler(logging.NullHandler())

    if not name or name == ROOT_LOGGER_NAME:
        return base
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return cast(PathLogger, logging.getLogger(name))

    return cast(PathLogger, base.getChild(name))
