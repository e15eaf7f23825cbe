"""Extract ranked mistakes from an AI review and its mjai event log.

Reads the two inputs (or a single combined report), runs the review
pipeline and prints the result as JSON on stdout. Logs and parse errors go
to stderr. Bad log lines are reported and skipped; the run fails only when
the review is unusable or no event could be read.

Usage:
    uv run python bin/analyze_review.py --log game.mjson --review review.json
    uv run python bin/analyze_review.py --report report.json --pretty
    uv run python bin/analyze_review.py --log game.mjson --review review.json --player 2 --max-mistakes 10
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from review.enums import ParseSource
from review.exceptions import ReportFormatError
from review.models import ParseError
from review.parsing import (
    NO_EVENTS_MESSAGE,
    parse_mjai_events,
    parse_mjai_log,
    parse_mortal_review,
    parse_review_document,
    split_report,
)
from review.pipeline import transform_review
from review.settings import ReviewSettings
from shared.logging import setup_logging

if TYPE_CHECKING:
    from review.mjai import MjaiEvent
    from review.mortal import MortalReview


def _read(path: Path) -> str:
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _load_report(path: Path) -> tuple[MortalReview | None, list[MjaiEvent], int | None, list[ParseError]]:
    try:
        bundle = split_report(json.loads(_read(path)))
    except (json.JSONDecodeError, ReportFormatError) as e:
        print(f"Invalid report {path}: {e}", file=sys.stderr)
        sys.exit(1)
    review, review_errors = parse_review_document(bundle.review)
    events, log_errors = parse_mjai_events(bundle.log)
    if not events:
        log_errors.append(ParseError(source=ParseSource.MJAI, message=NO_EVENTS_MESSAGE))
    return review, events, bundle.player, review_errors + log_errors


def _load_pair(log_path: Path, review_path: Path) -> tuple[MortalReview | None, list[MjaiEvent], list[ParseError]]:
    events, log_errors = parse_mjai_log(_read(log_path))
    review, review_errors = parse_mortal_review(_read(review_path))
    return review, events, log_errors + review_errors


def _print_errors(errors: list[ParseError]) -> None:
    for error in errors:
        print(f"[{error.source.value}] {error.message}", file=sys.stderr)


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract ranked mistakes from an AI review")
    parser.add_argument("--log", type=Path, help="path to the mjai event log (NDJSON)")
    parser.add_argument("--review", type=Path, help="path to the review JSON")
    parser.add_argument("--report", type=Path, help="path to a combined report holding both review and log")
    parser.add_argument("--player", type=int, help="reviewed seat 0-3 (default: from report, else 0)")
    parser.add_argument("--max-mistakes", type=int, help="number of mistakes to keep (default: 5)")
    parser.add_argument("--min-ev-diff", type=float, help="minimum value difference to report (default: 0.5)")
    parser.add_argument("--log-dir", type=Path, help="also write logs to a timestamped file in this directory")
    parser.add_argument("--pretty", action="store_true", help="indent the JSON output")
    args = parser.parse_args()

    if args.report is None and (args.log is None or args.review is None):
        parser.error("either --report or both --log and --review are required")

    # Before any parsing: unconfigured structlog prints to stdout.
    setup_logging(log_dir=args.log_dir or ReviewSettings().log_dir)

    report_player = None
    if args.report is not None:
        review, events, report_player, errors = _load_report(args.report)
    else:
        review, events, errors = _load_pair(args.log, args.review)

    _print_errors(errors)
    if review is None or not events:
        sys.exit(1)

    overrides = {
        "reviewed_player": args.player if args.player is not None else report_player,
        "max_mistakes": args.max_mistakes,
        "min_ev_diff": args.min_ev_diff,
    }
    settings = ReviewSettings(**{k: v for k, v in overrides.items() if v is not None})

    result = transform_review(review, events, settings)
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
