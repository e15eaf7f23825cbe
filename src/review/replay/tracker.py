"""
Round replay: walk one round's events up to a reviewed decision.

The review stores only the reviewed seat's own hand. Replaying the event log
recovers everything else visible at the table when the decision was made:
every seat's pond, melds, riichi status and score.

A decision is located by counting the reviewed seat's own draws:

- self-turn decisions (discard, riichi, concealed or upgraded quad) match the
  draw that brings the count to the entry's turn number; the snapshot is the
  board before that draw is applied, since the drawn tile is already part of
  the entry;
- call decisions match the opponent discard of the entry's tile while the
  count is one below the entry's turn number; that discard is applied first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from review.mjai import DahaiEvent, DoraEvent, EndKyokuEvent, ReachAcceptedEvent, StartKyokuEvent, TsumoEvent
from review.replay.apply import apply_event
from review.replay.state import (
    INITIAL_HAND_SIZE,
    ReplayFallback,
    ReplayMatched,
    RoundLedger,
    Snapshot,
    TrackedPlayer,
)
from review.tiles import NUM_SEATS, dora_from_indicator, normalize_tile, normalize_wind, seat_to_wind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from review.mjai import MjaiEvent
    from review.mortal import MortalEntry
    from review.replay.state import Players, ReplayOutcome

logger = structlog.get_logger()

RoundKey = tuple[int, int]  # (absolute round index, honba)


@dataclass(frozen=True)
class RoundLog:
    """One round's events: its start event and everything up to its end."""

    start: StartKyokuEvent
    events: tuple[MjaiEvent, ...]

    @property
    def key(self) -> RoundKey:
        return self.start.round_index, self.start.honba

    @property
    def accepted_riichi_seats(self) -> tuple[int, ...]:
        return tuple(e.actor for e in self.events if isinstance(e, ReachAcceptedEvent))


def split_rounds(events: Sequence[MjaiEvent]) -> dict[RoundKey, RoundLog]:
    """
    Group a full game log into rounds keyed by (round index, honba).

    Events before the first round start or after a round end are not part of
    any round. A repeated key keeps the first round and logs a warning.
    """
    rounds: dict[RoundKey, RoundLog] = {}
    start: StartKyokuEvent | None = None
    body: list[MjaiEvent] = []

    def _close() -> None:
        if start is None:
            return
        log = RoundLog(start=start, events=tuple(body))
        if log.key in rounds:
            logger.warning("duplicate round in event log", round_index=log.key[0], honba=log.key[1])
            return
        rounds[log.key] = log

    for event in events:
        if isinstance(event, StartKyokuEvent):
            _close()
            start, body = event, []
        elif start is not None:
            body.append(event)
            if isinstance(event, EndKyokuEvent):
                _close()
                start, body = None, []
    _close()
    return rounds


def initial_players(start: StartKyokuEvent, ledger: RoundLedger) -> Players:
    """Tracked players at the start of a round. Hidden starting tiles are only counted."""
    players = []
    for seat in range(NUM_SEATS):
        hand_size = len(start.tehais[seat]) if len(start.tehais) == NUM_SEATS else INITIAL_HAND_SIZE
        players.append(
            TrackedPlayer(
                seat_wind=seat_to_wind(seat, start.oya),
                is_dealer=seat == start.oya,
                score=ledger.scores[seat],
                closed_tile_count=hand_size,
            )
        )
    return tuple(players)  # type: ignore[return-value]


def _snapshot(round_log: RoundLog, turn_number: int, players: Players, dora_indicators: list[str]) -> Snapshot:
    start = round_log.start
    return Snapshot(
        round_index=start.round_index,
        round_wind=normalize_wind(start.bakaze),
        turn_number=turn_number,
        honba=start.honba,
        dora=dora_from_indicator(start.dora_marker),
        dora_indicators=tuple(dora_indicators),
        dealer=start.oya,
        players=players,
    )


def replay_round(
    round_log: RoundLog,
    entry: MortalEntry,
    reviewed_seat: int,
    ledger: RoundLedger,
    *,
    riichi_stake: int = 1000,
) -> ReplayOutcome:
    """
    Replay one round up to the decision described by entry.

    Pure function of its inputs: starting scores come from ledger, and the
    returned snapshot is never shared with another call.
    """
    players = initial_players(round_log.start, ledger)
    dora_indicators = [normalize_tile(round_log.start.dora_marker)]
    trigger_tile = normalize_tile(entry.tile) if entry.tile is not None else None
    reviewed_turns = 0

    for event in round_log.events:
        if isinstance(event, TsumoEvent) and event.actor == reviewed_seat:
            reviewed_turns += 1
            if reviewed_turns == entry.junme and not entry.is_call_decision:
                return ReplayMatched(_snapshot(round_log, entry.junme, players, dora_indicators))

        if (
            entry.is_call_decision
            and isinstance(event, DahaiEvent)
            and event.actor != reviewed_seat
            and normalize_tile(event.pai) == trigger_tile
            and reviewed_turns == entry.junme - 1
        ):
            players = apply_event(players, event, riichi_stake=riichi_stake)
            return ReplayMatched(_snapshot(round_log, entry.junme, players, dora_indicators))

        players = apply_event(players, event, riichi_stake=riichi_stake)
        if isinstance(event, DoraEvent):
            dora_indicators.append(normalize_tile(event.dora_marker))

    reason = f"no decision point for turn {entry.junme} (reviewed seat drew {reviewed_turns} times)"
    logger.warning(
        "replay fell back to last known state",
        round_index=round_log.start.round_index,
        honba=round_log.start.honba,
        turn=entry.junme,
        tile=entry.tile,
    )
    return ReplayFallback(_snapshot(round_log, entry.junme, players, dora_indicators), reason)


class GameReplayer:
    """
    Index a full game log by round and replay decisions on demand.

    Holds no mutable replay state: every snapshot_for call starts a fresh
    walk from the round's start event.
    """

    def __init__(self, events: Sequence[MjaiEvent], *, riichi_stake: int = 1000) -> None:
        self._rounds = split_rounds(events)
        self._riichi_stake = riichi_stake

    def round_log(self, round_index: int, honba: int) -> RoundLog | None:
        return self._rounds.get((round_index, honba))

    def first_start(self) -> StartKyokuEvent | None:
        """The earliest round start in the log, if any."""
        return next(iter(self._rounds.values())).start if self._rounds else None

    def snapshot_for(
        self,
        round_index: int,
        honba: int,
        entry: MortalEntry,
        reviewed_seat: int,
        ledger: RoundLedger,
    ) -> ReplayOutcome | None:
        """Replay to the entry's decision, or return None when the log lacks that round."""
        round_log = self.round_log(round_index, honba)
        if round_log is None:
            return None
        return replay_round(round_log, entry, reviewed_seat, ledger, riichi_stake=self._riichi_stake)

    def riichi_deposits(self, round_index: int, honba: int) -> tuple[int, int, int, int]:
        """Per-seat riichi stakes paid during a round, as negative score deltas."""
        round_log = self.round_log(round_index, honba)
        deposits = [0] * NUM_SEATS
        if round_log is not None:
            for seat in round_log.accepted_riichi_seats:
                deposits[seat] -= self._riichi_stake
        return tuple(deposits)  # type: ignore[return-value]
