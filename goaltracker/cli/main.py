"""
Goal Tracker CLI: Command-line interface for report generation.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from goaltracker import __version__
from goaltracker.core.errors import GoalTrackerError, MissingStudentNameError
from goaltracker.core.pipelines import (
    GOAL_INFO_DOCUMENT,
    TRACKER_DOCUMENT,
    TRANSCRIPT_DOCUMENT,
    build_request,
    run_request,
)
from goaltracker.documents.loaders import DocumentSource, load_grid, load_text
from goaltracker.documents.text import normalize_rows, split_lines, split_transcript_lines
from goaltracker.ir.enums import ReportStatus, SubjectKey
from goaltracker.ir.serialization import record_to_json, to_json
from goaltracker.passes import extract_goal_info, resolve_tracker, synthesize_transcript
from goaltracker.rules.loader import get_rules

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goaltracker",
        description="Weekly goal tracker report generator",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"goaltracker {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Generate command
    gen = subparsers.add_parser("generate", help="Generate a weekly report")
    gen.add_argument("--student", type=str, default=None, help="Student name (as in the tracker)")

    transcript = gen.add_mutually_exclusive_group()
    transcript.add_argument("--transcript", type=str, help="1:1 transcript file (- for stdin)")
    transcript.add_argument("--transcript-text", type=str, help="1:1 transcript as inline text")

    gen.add_argument("--tracker", type=str, help="Goal tracker .csv/.tsv/.txt file (- for stdin)")

    goal_info = gen.add_mutually_exclusive_group()
    goal_info.add_argument("--goal-info", type=str, help="Goal information file (- for stdin)")
    goal_info.add_argument("--goal-info-text", type=str, help="Goal information as inline text")

    gen.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file or directory (default: stdout)",
    )
    gen.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format: text (default) or json (full result)",
    )
    gen.add_argument(
        "--complete",
        action="append",
        default=[],
        help="Mark subjects done regardless of the tracker (comma-separated)",
    )
    gen.add_argument(
        "--incomplete",
        action="append",
        default=[],
        help="Mark subjects incomplete regardless of the tracker (comma-separated)",
    )
    _add_common_arguments(gen)

    # Parse command
    parse = subparsers.add_parser("parse", help="Parse one document and dump the record as JSON")
    parse.add_argument(
        "document",
        choices=["goal-info", "tracker", "transcript"],
        help="Which parser to run",
    )
    parse.add_argument("source", type=str, help="Document file (- for stdin)")
    parse.add_argument("--student", type=str, default=None, help="Student name (tracker only)")
    _add_common_arguments(parse)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ruleset",
        type=str,
        default=None,
        help="Ruleset name or YAML path (default: default, or GOALTRACKER_RULESET env var)",
    )

    # Logging configuration
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or GOALTRACKER_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (pipeline,extract,resolve,synthesize,render,system). Default: all",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    _configure_logging(args)

    try:
        if args.command == "generate":
            return run_generate(args)
        if args.command == "parse":
            return run_parse(args)
    except (GoalTrackerError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    return EXIT_OK


def _configure_logging(args: argparse.Namespace) -> None:
    from goaltracker.core.logging import configure_logging

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(level=args.log_level, channels=channels, force=True)


# =============================================================================
# Inputs
# =============================================================================

def _source(path: Optional[str], name: str) -> Optional[DocumentSource]:
    """A file argument as a DocumentSource; '-' reads stdin."""
    if path is None:
        return None
    if path == "-":
        return DocumentSource.from_text(name, sys.stdin.read())
    return DocumentSource.from_path(path)


def _subjects(values: list[str]) -> list[SubjectKey]:
    subjects = []
    for value in values:
        for part in value.split(","):
            if part.strip():
                subjects.append(SubjectKey.from_string(part))
    return subjects


def parse_overrides(complete: list[str], incomplete: list[str]) -> dict[SubjectKey, bool]:
    """Build completion overrides from --complete/--incomplete values."""
    overrides = {subject: True for subject in _subjects(complete)}
    overrides.update({subject: False for subject in _subjects(incomplete)})
    return overrides


# =============================================================================
# Commands
# =============================================================================

def run_generate(args: argparse.Namespace) -> int:
    """Run the generate command."""
    # Nothing is read, not even stdin, without a confirmed name
    if not args.student or not args.student.strip():
        raise MissingStudentNameError()

    stdin_args = [a for a in (args.transcript, args.tracker, args.goal_info) if a == "-"]
    if len(stdin_args) > 1:
        print("Error: only one document can be read from stdin", file=sys.stderr)
        return EXIT_USAGE

    try:
        overrides = parse_overrides(args.complete, args.incomplete)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.transcript_text is not None:
        transcript = DocumentSource.from_text(TRANSCRIPT_DOCUMENT, args.transcript_text)
    else:
        transcript = _source(args.transcript, TRANSCRIPT_DOCUMENT)

    if args.goal_info_text is not None:
        goal_info = DocumentSource.from_text(GOAL_INFO_DOCUMENT, args.goal_info_text)
    else:
        goal_info = _source(args.goal_info, GOAL_INFO_DOCUMENT)

    request = build_request(
        args.student,
        transcript,
        _source(args.tracker, TRACKER_DOCUMENT),
        goal_info,
        completion_overrides=overrides,
        ruleset=args.ruleset,
    )
    result = run_request(request)

    for diag in result.diagnostics:
        if diag.level.value in ("warning", "error"):
            print(f"[{diag.level.value}] {diag.code}: {diag.message}", file=sys.stderr)

    ok = result.status in (ReportStatus.SUCCESS, ReportStatus.PARTIAL) and result.report_text is not None

    if args.format == "json":
        output = to_json(result)
    elif ok:
        output = result.report_text
    else:
        return EXIT_FAILED

    if args.output:
        path = Path(args.output)
        if path.is_dir():
            path = path / report_filename(result.goal_info.week_number)
        path.write_text(output + "\n", encoding="utf-8")
        print(f"Report written to {path}", file=sys.stderr)
    else:
        print(output)

    return EXIT_OK if ok else EXIT_FAILED


def report_filename(week_number: str) -> str:
    """Default file name for a report written into a directory."""
    if week_number:
        return f"GoalTracker_Week{week_number}.txt"
    return "GoalTracker.txt"


def run_parse(args: argparse.Namespace) -> int:
    """Run one parser on one document and print its record."""
    rules = get_rules(args.ruleset)
    source = _source(args.source, args.document)

    if args.document == "goal-info":
        record = extract_goal_info(split_lines(load_text(source)), rules.goal_info)
    elif args.document == "transcript":
        record = synthesize_transcript(split_transcript_lines(load_text(source)), rules.transcript)
    else:
        if not args.student or not args.student.strip():
            print("Error: --student is required to parse a tracker", file=sys.stderr)
            return EXIT_USAGE
        rows = normalize_rows(load_grid(source))
        record = resolve_tracker(rows, args.student.strip(), rules.tracker)

    print(record_to_json(record))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
