#!/usr/bin/env python3
"""
headnum: Hierarchical numbering for Markdown headings

Common usage:
  headnum README.md                   # print numbered document to stdout
  headnum -i docs/guide.md            # number headings in place
  headnum -i --max-level 3 notes.md   # number H1-H3 only
  headnum -i --format none notes.md   # remove numbering

Headings are numbered from their levels ("1 Intro", "1.1 Setup", "1.1.1 Install").
Existing numbering is replaced, so running headnum again after editing a
document brings its numbering up to date.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from headnum.config import find_config_file, load_config, merge_cli_with_config
from headnum.numbering import NumberingFormat
from headnum.update import DEFAULT_FORMAT, DEFAULT_MAX_LEVEL, update_files

LOGGER = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the headnum tool."""

    files: list[str]
    output: str
    inplace: bool
    nobackup: bool
    max_level: int
    format: str
    log_level: str
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` names the
    options the user passed explicitly (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input Markdown files (use '-' for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    parser.add_argument(
        "-i", "--inplace", action="store_true", help="Edit files in place (ignores --output)"
    )
    parser.add_argument(
        "--nobackup",
        action="store_true",
        default=None,
        help="Do not make a backup of the original file when using --inplace",
    )
    # Defaults of None let us see which options were given explicitly.
    parser.add_argument(
        "-l",
        "--max-level",
        type=int,
        default=None,
        dest="max_level",
        metavar="LEVEL",
        help=f"Deepest heading level to number; deeper headings are left alone "
        f"(default: {DEFAULT_MAX_LEVEL})",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=str,
        choices=[f.value for f in NumberingFormat],
        default=None,
        help=f"Numbering format: 'format_1' for 1, 1.1, 1.1.1 or 'none' to remove "
        f"numbering (default: {DEFAULT_FORMAT.value})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default="warning",
        dest="log_level",
        help="Logging level for diagnostics on stderr (default: %(default)s)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags = {
        name for name in ("max_level", "format", "nobackup") if getattr(opts, name) is not None
    }

    return (
        Options(
            files=opts.files,
            output=opts.output,
            inplace=opts.inplace,
            nobackup=bool(opts.nobackup),
            max_level=opts.max_level if opts.max_level is not None else DEFAULT_MAX_LEVEL,
            format=opts.format if opts.format is not None else DEFAULT_FORMAT.value,
            log_level=opts.log_level,
            version=opts.version,
        ),
        explicit_flags,
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the headnum CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)
    _configure_logging(options.log_level)

    if options.version:
        try:
            version = importlib.metadata.version("headnum")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide Markdown files, or '-' for stdin."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            LOGGER.debug("Using config file: %s", config_path)
            merge_cli_with_config(options, load_config(config_path), explicit_flags)

        update_files(
            files=options.files,
            output=options.output,
            inplace=options.inplace,
            nobackup=options.nobackup,
            max_level=options.max_level,
            fmt=options.format,
        )
    except ValueError as e:
        # Usage errors, like --inplace with stdin or an invalid config value.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Other file or processing errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
