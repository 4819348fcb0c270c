"""
common.base.cli

Shared CLI runner foundation.

Provides:
 - Base parser with the global options (log level, config file)
 - Automatic logging setup
 - Safe execution wrapper (KeyboardInterrupt, exceptions)
 - Consistent exit codes
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Optional, Sequence

from .logging import get_logger, setup_logging

log = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


# ----------------------------------------------------------------------
# BASE PARSER FACTORY
# ----------------------------------------------------------------------

def build_base_parser(prog: Optional[str] = None, description: str = "") -> argparse.ArgumentParser:
    """
    Build a parser preloaded with the global options shared by every command.
    """
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging verbosity (default: value from config, else INFO).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Alternative YAML configuration file.",
    )
    return parser


# ----------------------------------------------------------------------
# WRAPPER FUNCTION
# ----------------------------------------------------------------------

def run_cli(
    main_func: Callable[[argparse.Namespace], int],
    parser: argparse.ArgumentParser,
    argv: Optional[Sequence[str]] = None,
) -> int:
    """
    Parse ``argv``, configure logging and run ``main_func`` with unified error handling.

    Returns:
        The exit code of ``main_func``, 1 on an unexpected error, 130 on Ctrl-C.
        Usage errors exit with argparse's code 2.
    """
    args = parser.parse_args(list(argv) if argv is not None else None)

    setup_logging(args.log_level, config_path=args.config)
    run_log = get_logger(parser.prog)
    run_log.debug(f"Arguments: {args}")

    try:
        return main_func(args)
    except KeyboardInterrupt:
        run_log.warning("Operation cancelled by user.")
        return EXIT_INTERRUPTED
    except Exception as e:
        run_log.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_FAILURE
