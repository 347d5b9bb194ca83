"""CLI entry point for rimraf — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import TextIO

from rimraf import RimrafError, __version__
from rimraf.deleter import DeleteOptions, DeletionEngine, DeletionSummary
from rimraf.formatter.listing import format_listing
from rimraf.formatter.summary import RunTimings, format_summary
from rimraf.matcher import MatchOptions, MatchResult, TreeMatcher

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE = "**"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``rimraf`` command.
    """
    parser = argparse.ArgumentParser(
        prog="rimraf",
        description="Safe deep deletion, much like 'rm -rf', just safer.",
    )
    parser.add_argument("path", help="The root path")
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        dest="includes",
        metavar="PATTERN",
        help="Include pattern (can be specified multiple times, default: **)",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        dest="excludes",
        metavar="PATTERN",
        help="Exclude pattern (can be specified multiple times)",
    )
    parser.add_argument(
        "-s",
        "--skip-path",
        action="store_true",
        dest="skip_path",
        help="Skip deletion of the root path when it is empty",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        dest="list_items",
        help="Only list the relevant files and directories",
    )
    parser.add_argument(
        "-t",
        "--try-run",
        action="store_true",
        dest="try_run",
        help="Only try a run (no files and directories will be deleted)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet output",
    )
    parser.add_argument(
        "-c",
        "--case-sensitive",
        action="store_true",
        dest="case_sensitive",
        help="Match patterns case-sensitively",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output (debug logging on stderr)",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run_rimraf(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    """Run rimraf with provided CLI args.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.
        out: Stream for list and summary output. Defaults to stdout.

    Returns:
        int: Process exit code.

    Raises:
        RimrafError: On any user-facing validation or I/O error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args, out or sys.stdout)


def _build_matcher(args: argparse.Namespace) -> TreeMatcher:
    """Build the matcher from include/exclude options.

    Args:
        args: Parsed CLI namespace.

    Returns:
        TreeMatcher: Matcher with ``**`` as include when none was given.
    """
    matcher = TreeMatcher(MatchOptions(case_sensitive=args.case_sensitive))
    matcher.add_includes(args.includes or [DEFAULT_INCLUDE])
    matcher.add_excludes(args.excludes)
    return matcher


def _build_delete_options(args: argparse.Namespace) -> DeleteOptions:
    return DeleteOptions(dry_run=args.try_run, skip_root=args.skip_path)


def _delete(args: argparse.Namespace, result: MatchResult) -> DeletionSummary:
    """Run the deletion engine, with a progress bar unless quiet."""
    options = _build_delete_options(args)
    if args.quiet:
        return DeletionEngine(options).run(result.root, result.entries)

    from rimraf.progress import RichProgress

    with RichProgress() as progress:
        return DeletionEngine(options, progress).run(result.root, result.entries)


def _run_with_args(args: argparse.Namespace, out: TextIO) -> int:
    """Run the match/delete pipeline for parsed arguments.

    Args:
        args: Parsed CLI namespace.
        out: Stream for list and summary output.

    Returns:
        int: Process exit code.

    Raises:
        RimrafError: On any user-facing validation or I/O error.
    """
    started = time.perf_counter()
    matcher = _build_matcher(args)
    result = matcher.execute(args.path)
    enumerated = time.perf_counter() - started

    if args.list_items:
        listing = "" if args.quiet else format_listing(result, args.skip_path)
        if listing:
            out.write(listing + "\n")
        return 0

    summary = _delete(args, result)

    if args.quiet:
        return 0

    timings = RunTimings(total=time.perf_counter() - started, enumerate=enumerated)
    out.write(format_summary(summary, timings) + "\n")
    return 0


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once. Exits with code 1 on any error, after writing
    the message to stderr.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse
    _configure_logging(args.verbose)

    try:
        code = _run_with_args(args, sys.stdout)
    except RimrafError as exc:
        sys.stderr.write(f"rimraf: {exc}\n")
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unhandled error", exc_info=True)
        sys.stderr.write(f"rimraf: {exc}\n")
        sys.exit(1)

    sys.exit(code)
