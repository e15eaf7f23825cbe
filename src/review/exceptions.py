"""Typed exceptions for the review pipeline.

Most input problems never raise: they degrade to ParseError records,
replay fallbacks with warnings, or an empty mistake list. Only calling the
pipeline without a usable review, or handing it a report that is not a JSON
object, is an error.
"""


class ReviewError(Exception):
    """Base exception for review pipeline errors."""


class ReviewUnavailableError(ReviewError):
    """The pipeline was asked to run without a parsed review."""


class ReportFormatError(ReviewError):
    """A combined report document is not a JSON object."""
