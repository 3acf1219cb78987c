"""Command-line interface for yearfill."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from yearfill import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yearfill",
        description="Fill in missing release years using AcoustID and MusicBrainz",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"yearfill {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    fill_parser = subparsers.add_parser(
        "fill",
        help="Resolve and write missing release years under a library root",
    )
    fill_parser.add_argument(
        "library_root",
        type=Path,
        help="Library root directory to scan",
    )
    fill_parser.add_argument(
        "--report",
        type=Path,
        help="CSV report path (default: ./yearfill-report.csv)",
    )
    fill_parser.add_argument(
        "--trace-log",
        type=Path,
        help="Diagnostic trace log path (default: ./yearfill-trace.log)",
    )
    fill_parser.add_argument(
        "--api-key",
        help="AcoustID API key (default: ACOUSTID_API_KEY)",
    )
    fill_parser.add_argument(
        "--tag-backend",
        choices=["mutagen", "meta-json"],
        help="Override tag backend for this run",
    )
    fill_parser.add_argument(
        "--config",
        type=Path,
        help="Settings path (default: ~/.config/yearfill/settings.json)",
    )
    fill_parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="fnmatch pattern of paths to skip (repeatable)",
    )
    fill_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Check that the fpcalc fingerprint tool is available",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        # Import here to avoid slow startup
        if args.command == "fill":
            from .commands.fill import run_fill
            return run_fill(args)
        if args.command == "check":
            from .commands.check import run_check
            return run_check(args)
        parser.print_help()
        return 1
    except Exception as exc:
        from .errors import exit_code_for_exception

        print(str(exc), file=sys.stderr)
        return exit_code_for_exception(exc)


if __name__ == "__main__":
    sys.exit(main())
