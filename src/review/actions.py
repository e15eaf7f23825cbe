"""Human-readable strings for the actual and recommended actions of a decision."""

from __future__ import annotations

from typing import TYPE_CHECKING

from review.mjai import (
    AnkanEvent,
    ChiEvent,
    DahaiEvent,
    DaiminkanEvent,
    HoraEvent,
    KakanEvent,
    PonEvent,
    ReachEvent,
    RyukyokuEvent,
)
from review.tiles import UNKNOWN_TILE, normalize_tile

if TYPE_CHECKING:
    from review.mjai import MjaiEvent

PASS = "Pass"

_CALL_LABELS: dict[type, str] = {
    ChiEvent: "Chi",
    PonEvent: "Pon",
    DaiminkanEvent: "Kan",
    KakanEvent: "Kakan",
}


def format_action(event: MjaiEvent) -> str | None:
    """Format one action. A declined call (or any non-action) formats to None."""
    if isinstance(event, DahaiEvent):
        return normalize_tile(event.pai)
    if isinstance(event, ReachEvent):
        return "Riichi"
    if isinstance(event, ChiEvent | PonEvent | DaiminkanEvent | KakanEvent):
        return f"{_CALL_LABELS[type(event)]} {normalize_tile(event.pai)}"
    if isinstance(event, AnkanEvent):
        first = event.consumed[0] if event.consumed else UNKNOWN_TILE
        return f"Ankan {normalize_tile(first)}"
    if isinstance(event, HoraEvent):
        return "Tsumo" if event.is_tsumo else "Ron"
    if isinstance(event, RyukyokuEvent):
        return "Abortive draw"
    return None


def format_plays(actual: MjaiEvent, expected: MjaiEvent) -> tuple[str | None, str]:
    """
    Return (your play, optimal play).

    The optimal play is never None: a recommended pass reads "Pass". When the
    two differ only in whether riichi was declared, the optimal string names
    the discard tile and the riichi difference.
    """
    your_play = format_action(actual)

    if isinstance(expected, ReachEvent) and isinstance(actual, DahaiEvent):
        return your_play, f"{normalize_tile(actual.pai)} (with riichi)"
    if isinstance(actual, ReachEvent) and isinstance(expected, DahaiEvent):
        return your_play, f"{normalize_tile(expected.pai)} (without riichi)"

    return your_play, format_action(expected) or PASS
