"""
pathentry.cli

Command-line front end for :class:`pathentry.entry.PathEntry`.

Usage:
  pathentry info PATH [--json]
  pathentry free-path PATH [--separator -]
  pathentry move SRC DST [--overwrite]
  pathentry copy SRC DST [--overwrite]
  pathentry slugify-rename PATH NAME [--separator -] [--keep-case] [--max-length N] [--overwrite]
  pathentry normalize-eol PATH
  pathentry encoding PATH [--sample-size N]
"""

from __future__ import annotations

import argparse
import json
from typing import Callable, Dict, Optional, Sequence

from common.base.cli import EXIT_FAILURE, EXIT_OK, build_base_parser, run_cli
from common.base.logging import get_logger
from common.shared.loader import load_path_settings

from .entry import PathEntry
from .utils import free_path

log = get_logger(__name__)


def _entry(args: argparse.Namespace, path: str) -> PathEntry:
    return PathEntry(path, settings=load_path_settings(args.config))


def _cmd_info(args: argparse.Namespace) -> int:
    data = _entry(args, args.path).to_dict()
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key:<28}{'' if value is None else value}")
    return EXIT_OK


def _cmd_free_path(args: argparse.Namespace) -> int:
    settings = load_path_settings(args.config)
    print(free_path(args.path, args.separator or settings.separator, max_attempts=settings.max_attempts))
    return EXIT_OK


def _cmd_move(args: argparse.Namespace) -> int:
    entry = _entry(args, args.source)
    if not entry.is_resolved:
        log.error(f"Source not found: {args.source}")
        return EXIT_FAILURE
    if not entry.move(args.target, args.overwrite):
        return EXIT_FAILURE
    print(entry.pathname)
    return EXIT_OK


def _cmd_copy(args: argparse.Namespace) -> int:
    entry = _entry(args, args.source)
    if not entry.is_resolved:
        log.error(f"Source not found: {args.source}")
        return EXIT_FAILURE
    copied = entry.copy(args.target, args.overwrite)
    if copied is None:
        return EXIT_FAILURE
    print(copied.pathname)
    return EXIT_OK


def _cmd_slugify_rename(args: argparse.Namespace) -> int:
    entry = _entry(args, args.path)
    if not entry.is_resolved:
        log.error(f"File not found: {args.path}")
        return EXIT_FAILURE
    entry.set_name_slugified(
        args.name,
        separator=args.separator,
        lowercase=False if args.keep_case else None,
        max_length=args.max_length,
        overwrite=args.overwrite,
    )
    if entry.last_move is False:
        return EXIT_FAILURE
    print(entry.pathname)
    return EXIT_OK


def _cmd_normalize_eol(args: argparse.Namespace) -> int:
    entry = _entry(args, args.path)
    entry.normalize_end_lines()
    log.info(f"Normalized line endings in {entry.pathname}")
    return EXIT_OK


def _cmd_encoding(args: argparse.Namespace) -> int:
    encoding = _entry(args, args.path).detect_encoding(sample_size=args.sample_size)
    if encoding is None:
        print("unknown")
        return EXIT_FAILURE
    print(encoding)
    return EXIT_OK


COMMANDS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "info": _cmd_info,
    "free-path": _cmd_free_path,
    "move": _cmd_move,
    "copy": _cmd_copy,
    "slugify-rename": _cmd_slugify_rename,
    "normalize-eol": _cmd_normalize_eol,
    "encoding": _cmd_encoding,
}


def build_parser() -> argparse.ArgumentParser:
    parser = build_base_parser("pathentry", "Inspect, move, copy and rename files by path.")
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Show derived path metadata.")
    info.add_argument("path")
    info.add_argument("--json", action="store_true", help="Print JSON instead of a table.")

    free = sub.add_parser("free-path", help="Print a non-colliding variant of PATH.")
    free.add_argument("path")
    free.add_argument("--separator", default=None)

    for name, verb in (("move", "Move"), ("copy", "Copy")):
        cmd = sub.add_parser(name, help=f"{verb} a file without clobbering existing files.")
        cmd.add_argument("source")
        cmd.add_argument("target")
        cmd.add_argument("--overwrite", action="store_true", help="Replace an existing target.")

    rename = sub.add_parser("slugify-rename", help="Rename a file to a slugified name.")
    rename.add_argument("path")
    rename.add_argument("name", help="New name, without extension.")
    rename.add_argument("--separator", default=None)
    rename.add_argument("--keep-case", action="store_true", help="Do not lowercase the name.")
    rename.add_argument("--max-length", type=int, default=None, help="Maximum filename length, extension included.")
    rename.add_argument("--overwrite", action="store_true", help="Replace an existing target.")

    eol = sub.add_parser("normalize-eol", help="Rewrite line endings as CRLF.")
    eol.add_argument("path")

    enc = sub.add_parser("encoding", help="Detect the character encoding of a file.")
    enc.add_argument("path")
    enc.add_argument("--sample-size", type=int, default=None, help="Bytes to sample (default from config).")

    return parser


def _dispatch(args: argparse.Namespace) -> int:
    return COMMANDS[args.command](args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    return run_cli(_dispatch, build_parser(), argv)


if __name__ == "__main__":
    raise SystemExit(main())
