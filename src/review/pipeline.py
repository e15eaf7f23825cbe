"""
Mistake extraction: turn a review and its event log into ranked mistakes.

Rounds are processed in review order with the score ledger threaded from
one round to the next. Within a round every non-matching decision above the
value threshold gets its own replay, classification and impact record; the
survivors of all rounds are then ranked by the size of their value
difference, truncated and numbered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from review.actions import format_plays
from review.classifier import classify_mistake
from review.exceptions import ReviewUnavailableError
from review.impact import derive_round_impact, format_delta
from review.mjai import StartGameEvent
from review.models import Explanation, GameResult, Mistake, PipelineResult, ReplayMetadata
from review.replay import (
    GameReplayer,
    ReplayFallback,
    RoundLedger,
    advance_ledger,
    is_balanced,
    ledger_for_round,
    riichi_pot,
    snapshot_to_board_state,
)
from review.settings import ReviewSettings
from review.tiles import format_round, normalize_tile, normalize_tiles

if TYPE_CHECKING:
    from collections.abc import Sequence

    from review.mjai import MjaiEvent
    from review.mortal import MortalDetail, MortalEntry, MortalKyokuReview, MortalReview

logger = structlog.get_logger()

FULL_HAND_SIZE = 14


def best_candidate(entry: MortalEntry) -> MortalDetail | None:
    """Highest-valued candidate. Candidates are not assumed to arrive sorted."""
    return max(entry.details, key=lambda d: d.q_value, default=None)


def compute_ev_diff(entry: MortalEntry) -> float:
    """
    Value of the actual action minus the value of the best candidate.

    Never positive. An actual rank past the end of the candidate list is
    clamped to the last candidate; an entry without candidates scores 0.
    """
    best = best_candidate(entry)
    if best is None:
        return 0.0
    actual = entry.details[min(entry.actual_index, len(entry.details) - 1)].q_value
    return actual - best.q_value


def drawn_tile(entry: MortalEntry) -> str | None:
    """The tile drawn for a self-turn decision; calls have none."""
    if entry.is_call_decision:
        return None
    if entry.tile:
        return normalize_tile(entry.tile)
    if len(entry.state.tehai) == FULL_HAND_SIZE:
        return normalize_tile(entry.state.tehai[-1])
    return None


def _shanten_label(shanten: int) -> str:
    if shanten == -1:
        return "tenpai"
    if shanten == 0:
        return "1 tile from tenpai"
    return f"{shanten + 1} tiles from tenpai"


def build_placeholder_explanation(entry: MortalEntry, ev_diff: float) -> Explanation:
    """Explanation shown until an external writer replaces it."""
    shanten = _shanten_label(entry.shanten)
    best = best_candidate(entry)
    best_prob = f"{best.prob * 100:.1f}" if best is not None else "?"
    return Explanation(
        summary=f"AI recommended a different play. EV difference: {ev_diff:.2f}. Your hand was {shanten}.",
        details=(
            f"Your hand was {shanten} with {entry.tiles_left} wall tiles remaining.",
            f"The AI's top choice had {best_prob}% confidence.",
            f"Your actual play ranked #{entry.actual_index + 1} among {len(entry.details)} candidate actions.",
            "A detailed explanation has not been generated yet.",
        ),
        principle="Analysis pending: strategic advice will be added when the explanation is generated.",
    )


def _initial_ledger(replayer: GameReplayer, settings: ReviewSettings) -> RoundLedger:
    first = replayer.first_start()
    if first is not None and first.scores is not None:
        return RoundLedger(scores=first.scores)
    return RoundLedger.starting(settings.starting_score)


def _player_name(events: Sequence[MjaiEvent], seat: int) -> str | None:
    start = next((e for e in events if isinstance(e, StartGameEvent)), None)
    if start is None or start.names is None or seat >= len(start.names):
        return None
    return start.names[seat]


def build_metadata(
    review: MortalReview,
    *,
    initial: RoundLedger,
    final: RoundLedger,
    settings: ReviewSettings,
    player_name: str | None = None,
    date: str = "",
    room: str = "Unknown",
    mode: str = "4p",
) -> ReplayMetadata:
    """
    Summarize the game for the reviewed seat.

    Mistake counts cover every non-matching decision, before the value
    threshold and truncation are applied. Rank ties go to the lower seat.
    """
    seat = settings.reviewed_player
    ev_diffs = [compute_ev_diff(e) for kyoku in review.kyokus for e in kyoku.entries if not e.is_equal]
    standings = sorted(range(len(final.scores)), key=lambda s: (-final.scores[s], s))
    return ReplayMetadata(
        date=date,
        room=room,
        mode=mode,
        player_name=player_name,
        result=GameResult(
            rank=standings.index(seat) + 1,
            score=final.scores[seat],
            delta=format_delta(final.scores[seat] - initial.scores[seat]),
        ),
        overall_accuracy=review.rating * 100,
        total_mistakes=len(ev_diffs),
        big_mistakes=sum(1 for d in ev_diffs if abs(d) >= settings.big_mistake_threshold),
    )


class _Extraction:
    """Per-run accumulator. Lives for one transform_review call."""

    def __init__(self, replayer: GameReplayer, settings: ReviewSettings) -> None:
        self.replayer = replayer
        self.settings = settings
        self.mistakes: list[Mistake] = []
        self.warnings: list[str] = []

    def warn(self, message: str, **context: object) -> None:
        logger.warning(message, **context)
        self.warnings.append(message)

    def extract_round(self, kyoku: MortalKyokuReview, ledger: RoundLedger) -> None:
        seat = self.settings.reviewed_player
        label = format_round(kyoku.kyoku, kyoku.honba)

        for entry in kyoku.entries:
            if entry.is_equal:
                continue
            ev_diff = compute_ev_diff(entry)
            if abs(ev_diff) < self.settings.min_ev_diff:
                continue

            outcome = self.replayer.snapshot_for(kyoku.kyoku, kyoku.honba, entry, seat, ledger)
            if outcome is None:
                self.warn(
                    f"Could not reconstruct board state for {label} turn {entry.junme}",
                    round=label,
                    turn=entry.junme,
                )
                continue
            if isinstance(outcome, ReplayFallback):
                if not self.settings.keep_fallback_snapshots:
                    self.warn(
                        f"Could not reconstruct board state for {label} turn {entry.junme}: {outcome.reason}",
                        round=label,
                        turn=entry.junme,
                    )
                    continue
                self.warn(
                    f"Board state for {label} turn {entry.junme} is approximate: {outcome.reason}",
                    round=label,
                    turn=entry.junme,
                )

            snapshot = outcome.snapshot
            your_play, optimal_play = format_plays(entry.actual, entry.expected)
            self.mistakes.append(
                Mistake(
                    id=0,
                    round=label,
                    turn=entry.junme,
                    ev_diff=ev_diff,
                    category=classify_mistake(entry, snapshot, seat),
                    hand=tuple(normalize_tiles(entry.state.tehai)),
                    drew=drawn_tile(entry),
                    your_discard=your_play,
                    optimal_discard=optimal_play,
                    board_state=snapshot_to_board_state(snapshot, seat, entry, round_label=label),
                    impact=derive_round_impact(kyoku, seat),
                    explanation=build_placeholder_explanation(entry, ev_diff),
                )
            )

    def close_round(self, kyoku: MortalKyokuReview, ledger: RoundLedger) -> RoundLedger:
        """Check the round's payments and return the ledger the next round starts from."""
        round_log = self.replayer.round_log(kyoku.kyoku, kyoku.honba)
        if round_log is not None and not is_balanced(kyoku, riichi_pot(round_log, self.settings.riichi_stake)):
            label = format_round(kyoku.kyoku, kyoku.honba)
            self.warn(f"Score deltas for {label} do not balance", round=label)
        deposits = self.replayer.riichi_deposits(kyoku.kyoku, kyoku.honba)
        return advance_ledger(ledger, kyoku, deposits)

    def ranked(self) -> tuple[Mistake, ...]:
        """Largest value loss first, ties in extraction order, numbered from 1."""
        ordered = sorted(self.mistakes, key=lambda m: -abs(m.ev_diff))
        top = ordered[: self.settings.max_mistakes]
        return tuple(m.model_copy(update={"id": i}) for i, m in enumerate(top, start=1))


def transform_review(
    review: MortalReview | None,
    events: Sequence[MjaiEvent],
    settings: ReviewSettings | None = None,
    *,
    date: str = "",
    room: str = "Unknown",
    mode: str = "4p",
) -> PipelineResult:
    """
    Extract the reviewed seat's ranked mistakes from a review and its event log.

    Never fails on imperfect data: decisions whose board cannot be rebuilt are
    skipped with a warning, and filtering everything out is a valid, empty
    result.

    Raises:
        ReviewUnavailableError: If review is None (the review failed to parse).
    """
    if review is None:
        raise ReviewUnavailableError("Cannot extract mistakes without a parsed review")
    settings = settings or ReviewSettings()

    replayer = GameReplayer(events, riichi_stake=settings.riichi_stake)
    extraction = _Extraction(replayer, settings)
    initial = _initial_ledger(replayer, settings)

    ledger = initial
    for kyoku in review.kyokus:
        ledger = ledger_for_round(ledger, replayer.round_log(kyoku.kyoku, kyoku.honba))
        extraction.extract_round(kyoku, ledger)
        ledger = extraction.close_round(kyoku, ledger)

    mistakes = extraction.ranked()
    metadata = build_metadata(
        review,
        initial=initial,
        final=ledger,
        settings=settings,
        player_name=_player_name(events, settings.reviewed_player),
        date=date,
        room=room,
        mode=mode,
    )
    logger.info(
        "review transformed",
        reviewed_player=settings.reviewed_player,
        candidates=len(extraction.mistakes),
        mistakes=len(mistakes),
        warnings=len(extraction.warnings),
    )
    return PipelineResult(mistakes=mistakes, metadata=metadata, warnings=tuple(extraction.warnings))
