"""
Score ledger threading between rounds.

Round N starts from the scores round N-1 ended with, so rounds are always
processed in log order. Scores printed on a round start event, when the log
carries them, are authoritative and resynchronize the ledger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from review.mjai import HoraEvent, RyukyokuEvent
from review.replay.state import RoundLedger

if TYPE_CHECKING:
    from review.mortal import MortalKyokuReview
    from review.replay.tracker import RoundLog

logger = structlog.get_logger()


def ledger_for_round(ledger: RoundLedger, round_log: RoundLog | None) -> RoundLedger:
    """Return the starting ledger for a round, preferring the log's own scores."""
    if round_log is None or round_log.start.scores is None:
        return ledger
    logged = RoundLedger(scores=round_log.start.scores)
    if logged != ledger:
        logger.debug(
            "round start scores differ from ledger",
            round_index=round_log.start.round_index,
            ledger=list(ledger.scores),
            logged=list(logged.scores),
        )
    return logged


def riichi_pot(round_log: RoundLog, riichi_stake: int) -> int:
    """Riichi sticks on the table at the end of a round: carried over plus newly accepted."""
    return riichi_stake * (round_log.start.kyotaku + len(round_log.accepted_riichi_seats))


def is_balanced(kyoku: MortalKyokuReview, pot: int) -> bool:
    """
    Check score conservation for a round's terminal events.

    Draw payments always sum to zero. Win payments sum to the riichi pot the
    winner collects, which is zero when no sticks are on the table.
    """
    wins = [e.deltas for e in kyoku.end_status if isinstance(e, HoraEvent) and e.deltas is not None]
    if wins:
        return sum(sum(d) for d in wins) == pot
    draws = [e.deltas for e in kyoku.end_status if isinstance(e, RyukyokuEvent) and e.deltas is not None]
    return all(sum(d) == 0 for d in draws)


def advance_ledger(
    ledger: RoundLedger,
    kyoku: MortalKyokuReview,
    riichi_deposits: tuple[int, int, int, int],
) -> RoundLedger:
    """Return the ledger after a round: riichi deposits plus every terminal delta."""
    ledger = ledger.apply(riichi_deposits)
    for deltas in kyoku.terminal_deltas:
        ledger = ledger.apply(deltas)
    return ledger
