"""CLI entry point for the overriding-let checker."""

import argparse
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

from rich.console import Console

from .analyzer import InputFormat, analyze_file
from .output import display_plain, display_results

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_OFFENSES = 1
EXIT_ERROR = 2

DIRECTORY_PATTERNS = ("*_spec.rb", "*.json")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Find RSpec let declarations that override a let from an enclosing example group"
    )
    parser.add_argument(
        "targets",
        nargs="+",
        help="Spec files or directories to check",
        type=Path,
    )
    parser.add_argument(
        "--format",
        choices=("table", "plain"),
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--input",
        choices=[f.value for f in InputFormat],
        default=InputFormat.AUTO.value,
        help="Input format: Ruby source, parser-gem JSON s-expressions, or by file suffix (default: auto)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging output",
    )
    return parser.parse_args(argv)


def collect_files(targets: list[Path]) -> Iterator[Path]:
    """Expand directories into the spec files they contain, in sorted order."""
    for target in targets:
        if target.is_dir():
            found = sorted({path for pattern in DIRECTORY_PATTERNS for path in target.rglob(pattern)})
            logger.debug("Found %d file(s) under %s", len(found), target)
            yield from found
        else:
            yield target


def main(argv: list[str] | None = None) -> None:
    """Run the CLI application."""
    console = Console()
    args = parse_args(argv)

    # Configure logging
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        logger.debug("Debug logging enabled")

    missing = [target for target in args.targets if not target.exists()]
    for target in missing:
        console.print(f"[red]Error: {target} does not exist[/red]")
    if missing:
        sys.exit(EXIT_ERROR)

    input_format = InputFormat(args.input)
    results = tuple(analyze_file(str(path), input_format) for path in collect_files(args.targets))

    if args.format == "plain":
        display_plain(console, results)
    else:
        display_results(console, results)

    if any(r.error is not None for r in results):
        sys.exit(EXIT_ERROR)
    if any(r.offenses for r in results):
        sys.exit(EXIT_OFFENSES)
    sys.exit(EXIT_CLEAN)


if __name__ == "__main__":
    main()
