"""
Input parsing: mjai event logs, review documents and combined report bundles.

Parsing never raises on bad content. Problems are collected as ParseError
records next to whatever could be salvaged, so the caller decides whether a
partial input is good enough.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from review.enums import FileType, ParseSource
from review.exceptions import ReportFormatError
from review.mjai import parse_mjai_event
from review.models import ParseError
from review.mortal import MortalReview

if TYPE_CHECKING:
    from collections.abc import Iterable

    from review.mjai import MjaiEvent

logger = structlog.get_logger()

NO_EVENTS_MESSAGE = "No valid mjai events found in file"

_REVIEW_DEFAULTS = {"total_reviewed": 0, "total_matches": 0, "rating": 0}
_LOG_KEYS = ("mjai_log", "log")
_KYOKU_LOG_KEYS = ("log", "events")


def _validation_message(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def parse_mjai_events(
    raw_events: Iterable[Any],
    *,
    first_line: int = 1,
) -> tuple[list[MjaiEvent], list[ParseError]]:
    """Validate already-decoded event objects. Invalid ones are skipped with an error."""
    events: list[MjaiEvent] = []
    errors: list[ParseError] = []
    for line, data in enumerate(raw_events, start=first_line):
        if not isinstance(data, dict):
            errors.append(ParseError(source=ParseSource.MJAI, message=f"Line {line} is not an object", line=line))
            continue
        try:
            events.append(parse_mjai_event(data))
        except ValidationError as e:
            errors.append(
                ParseError(
                    source=ParseSource.MJAI,
                    message=f"Invalid {data.get('type', 'untyped')} event on line {line}: {_validation_message(e)}",
                    line=line,
                )
            )
    return events, errors


def parse_mjai_log(text: str) -> tuple[list[MjaiEvent], list[ParseError]]:
    """
    Parse an NDJSON mjai log.

    Blank lines are ignored. Line numbers in errors count every line of the
    file, blank ones included, so they point at the right place in an editor.
    """
    events: list[MjaiEvent] = []
    errors: list[ParseError] = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            errors.append(
                ParseError(source=ParseSource.MJAI, message=f"Invalid JSON on line {line_number}", line=line_number)
            )
            continue
        parsed, line_errors = parse_mjai_events([data], first_line=line_number)
        events.extend(parsed)
        errors.extend(line_errors)

    if not events:
        errors.append(ParseError(source=ParseSource.MJAI, message=NO_EVENTS_MESSAGE))

    logger.debug("parsed mjai log", events=len(events), errors=len(errors))
    return events, errors


def parse_review_document(document: Any) -> tuple[MortalReview | None, list[ParseError]]:
    """Validate an already-decoded review object."""
    if not isinstance(document, dict) or not isinstance(document.get("kyokus"), list):
        return None, [ParseError(source=ParseSource.REVIEW, message='Missing or invalid "kyokus" array in review data')]

    # Summary totals are informational; a missing or non-numeric one becomes 0.
    data = dict(document)
    for key, default in _REVIEW_DEFAULTS.items():
        value = data.get(key)
        if not isinstance(value, int | float) or isinstance(value, bool):
            data[key] = default

    try:
        return MortalReview.model_validate(data), []
    except ValidationError as e:
        errors = [
            ParseError(
                source=ParseSource.REVIEW,
                message=f"{'.'.join(str(part) for part in issue['loc'])}: {issue['msg']}",
            )
            for issue in e.errors()
        ]
        return None, errors


def parse_mortal_review(text: str) -> tuple[MortalReview | None, list[ParseError]]:
    """Parse a review JSON document."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        return None, [ParseError(source=ParseSource.REVIEW, message="Invalid JSON in review file")]
    return parse_review_document(document)


def detect_file_type(text: str) -> FileType:
    """
    Sniff whether a file is a review document or an mjai log.

    A single JSON object with "kyokus" is a review; a file whose first line
    is a JSON object with a string "type" is a log.
    """
    trimmed = text.strip()
    if trimmed.startswith("{"):
        try:
            document = json.loads(trimmed)
        except json.JSONDecodeError:
            document = None
        if isinstance(document, dict) and "kyokus" in document:
            return FileType.REVIEW

    first_line = trimmed.split("\n", 1)[0].strip()
    if first_line:
        try:
            data = json.loads(first_line)
        except json.JSONDecodeError:
            return FileType.UNKNOWN
        if isinstance(data, dict) and isinstance(data.get("type"), str):
            return FileType.MJAI

    return FileType.UNKNOWN


@dataclass(frozen=True)
class ReportBundle:
    """A review document and its event log as found in a combined report."""

    review: dict[str, Any]
    log: list[Any] = field(default_factory=list)
    player: int | None = None


def _embedded_log(document: dict[str, Any]) -> list[Any]:
    for key in _LOG_KEYS:
        if isinstance(document.get(key), list):
            return document[key]

    events: list[Any] = []
    for kyoku in document.get("kyokus") or []:
        if not isinstance(kyoku, dict):
            continue
        for key in _KYOKU_LOG_KEYS:
            if isinstance(kyoku.get(key), list):
                events.extend(kyoku[key])
    return events


def _player(*candidates: Any) -> int | None:
    for value in candidates:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def split_report(document: Any) -> ReportBundle:
    """
    Split a combined report into its review and event log.

    Accepts the review itself with the log embedded (top level or per round),
    or a wrapper object holding both. Anything else is treated as a review
    with no log.

    Raises:
        ReportFormatError: If the document is not a JSON object.
    """
    if not isinstance(document, dict):
        raise ReportFormatError(f"Report must be a JSON object, got {type(document).__name__}")

    if isinstance(document.get("kyokus"), list):
        return ReportBundle(
            review=document,
            log=_embedded_log(document),
            player=_player(document.get("reviewed_player")),
        )

    review = document.get("review")
    if isinstance(review, dict):
        log = next((document[key] for key in _LOG_KEYS if isinstance(document.get(key), list)), None)
        return ReportBundle(
            review=review,
            log=log if log is not None else _embedded_log(review),
            player=_player(document.get("player"), review.get("reviewed_player")),
        )

    logger.warning("unknown report format", keys=sorted(document))
    return ReportBundle(review=document)
