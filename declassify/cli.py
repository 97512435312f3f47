"""CLI entrypoints for declassify commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import Severity
from .runner import Runner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to process (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .declassify.yml file or the directory holding it.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write timestamped log records to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declassify",
        description="Convert decorator-based Vue class components into Vue.extend() objects.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Rewrite class components in place.",
    )
    _add_common_options(convert_parser)
    convert_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changes as a unified diff without writing files.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="List files that still declare class components (exit code 1 if any).",
    )
    _add_common_options(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declassify commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    paths = [Path(path) for path in args.paths]
    config_location = Path(args.config) if args.config else paths[0] if paths[0].is_dir() else Path.cwd()
    try:
        config = load_config(config_location)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    runner = Runner(config)

    if args.command == "convert":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcomes = runner.run(paths, dry_run=dry_run)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        for outcome in outcomes:
            for diagnostic in outcome.diagnostics:
                if diagnostic.severity is Severity.INFO and not args.verbose:
                    continue
                print(f"{_relativize(outcome.path)}: {diagnostic}")
            if dry_run and outcome.diff:
                print(outcome.diff, end="")
        failures = [outcome for outcome in outcomes if outcome.error]
        if failures:
            parser.exit(
                1,
                f"declassify failed for {len(failures)} file(s). Run with --verbose for more details.\n",
            )
        changed = sum(1 for outcome in outcomes if outcome.changed)
        suffix = " (dry-run)" if dry_run else ""
        print(f"{changed} of {len(outcomes)} file(s) changed{suffix}")
    elif args.command == "check":
        try:
            remaining = runner.check(paths)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        for path in remaining:
            print(_relativize(path))
        if remaining:
            parser.exit(1, f"{len(remaining)} file(s) still use class components\n")
        print("No class components found")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
