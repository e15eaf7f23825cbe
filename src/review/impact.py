"""
Derive the impact of a flagged decision from how its round ended.

This is a narrative layer over the recorded outcome. It never invents a
counterfactual score: when the better play's result cannot be known from
the log (the reviewed seat won anyway), the swing is reported as unknown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from review.enums import ImpactType
from review.mjai import HoraEvent, RyukyokuEvent
from review.models import Impact, PointSwing

if TYPE_CHECKING:
    from review.mjai import TerminalEvent
    from review.mortal import MortalKyokuReview

UNKNOWN_DIFF = "unknown"


def format_points(points: int) -> str:
    return f"{points:,}"


def format_delta(delta: int) -> str:
    if delta > 0:
        return f"+{delta:,}"
    return f"{delta:,}"


def select_terminal_event(kyoku: MortalKyokuReview, reviewed_seat: int) -> TerminalEvent | None:
    """
    Pick the terminal event that speaks for the reviewed seat.

    On a multiple ron the win the seat took part in (as winner or as the
    seat that dealt in) is preferred; otherwise the round's first win, then
    its draw.
    """
    wins = [e for e in kyoku.end_status if isinstance(e, HoraEvent)]
    for win in wins:
        if reviewed_seat in (win.actor, win.loser):
            return win
    return kyoku.terminal_event


def _seat_delta(event: TerminalEvent, seat: int) -> int:
    return event.deltas[seat] if event.deltas is not None else 0


def _win_impact(win: HoraEvent, seat: int) -> Impact:
    delta = _seat_delta(win, seat)

    if win.loser == seat:
        lost = abs(delta)
        return Impact(
            type=ImpactType.DEALT_IN,
            description=f"Dealt into opponent for {format_points(lost)} points.",
            point_swing=PointSwing(actual=format_delta(delta), optimal="0", diff=format_points(lost)),
        )

    if win.actor == seat:
        return Impact(
            type=ImpactType.POSITION_LOSS,
            description=f"Won the hand for {format_delta(delta)} points, but optimal play may have yielded more.",
            point_swing=PointSwing(actual=format_delta(delta), optimal=format_delta(delta), diff=UNKNOWN_DIFF),
        )

    swing = None
    if delta != 0:
        swing = PointSwing(actual=format_delta(delta), optimal="0", diff=format_points(abs(delta)))
    return Impact(
        type=ImpactType.NO_DIRECT,
        description=f"Round ended with another player winning. Your score changed by {format_delta(delta)}.",
        point_swing=swing,
    )


def _draw_impact(draw: RyukyokuEvent, seat: int) -> Impact:
    delta = _seat_delta(draw, seat)

    if delta < 0:
        lost = abs(delta)
        return Impact(
            type=ImpactType.MISSED_WIN,
            description=f"Round ended in exhaustive draw. Lost {format_points(lost)} (noten penalty).",
            point_swing=PointSwing(
                actual=format_delta(delta),
                optimal=format_delta(lost),
                diff=format_points(lost * 2),
            ),
        )

    if delta > 0:
        return Impact(
            type=ImpactType.NO_DIRECT,
            description=f"Round ended in exhaustive draw. Gained {format_delta(delta)} (tenpai payment).",
            point_swing=PointSwing(actual=format_delta(delta), optimal=format_delta(delta), diff="0"),
        )

    return Impact(type=ImpactType.NO_DIRECT, description="Round ended in exhaustive draw with no score change.")


def derive_impact(terminal: TerminalEvent | None, reviewed_seat: int) -> Impact:
    """Map a round's terminal event to the reviewed seat's impact record."""
    if isinstance(terminal, HoraEvent):
        return _win_impact(terminal, reviewed_seat)
    if isinstance(terminal, RyukyokuEvent):
        return _draw_impact(terminal, reviewed_seat)
    return Impact(
        type=ImpactType.NO_DIRECT,
        description="Round outcome could not be determined from available data.",
    )


def derive_round_impact(kyoku: MortalKyokuReview, reviewed_seat: int) -> Impact:
    return derive_impact(select_terminal_event(kyoku, reviewed_seat), reviewed_seat)
