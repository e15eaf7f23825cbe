"""
Immutable replay state: tracked players, snapshots and the score ledger.

Every model here is frozen. Applying an event produces new values through
model_copy, so a snapshot handed to a caller is never changed by events
replayed after it.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from review.enums import Wind
from review.models import Meld
from review.tiles import NUM_SEATS

INITIAL_HAND_SIZE = 13

SeatScores = tuple[int, int, int, int]


class TrackedPlayer(BaseModel):
    """
    Observable state of one seat during replay.

    closed_tile_count goes up by one per draw, down by one per discard and
    down by the tiles consumed when forming a meld. The discard pile only
    grows, except that a call removes the caller's target's latest discard.
    """

    model_config = ConfigDict(frozen=True)

    seat_wind: Wind
    is_dealer: bool = False
    score: int
    discards: tuple[str, ...] = ()
    melds: tuple[Meld, ...] = ()
    is_riichi: bool = False
    riichi_discard_index: int | None = None  # set only once riichi is accepted
    closed_tile_count: int = INITIAL_HAND_SIZE


Players = tuple[TrackedPlayer, TrackedPlayer, TrackedPlayer, TrackedPlayer]


class Snapshot(BaseModel):
    """The observable board at one decision point."""

    model_config = ConfigDict(frozen=True)

    round_index: int
    round_wind: Wind
    turn_number: int
    honba: int
    dora: str
    dora_indicators: tuple[str, ...]
    dealer: int
    players: Players

    def opponents(self, seat: int) -> tuple[TrackedPlayer, ...]:
        """Tracked players other than the given seat, in seat order."""
        return tuple(p for i, p in enumerate(self.players) if i != seat)


def update_player(players: Players, seat: int, **updates: object) -> Players:
    """Return a new players tuple with the player at seat updated."""
    if not (0 <= seat < NUM_SEATS):
        raise ValueError(f"Invalid seat {seat}, expected 0-{NUM_SEATS - 1}")
    invalid_fields = set(updates) - set(TrackedPlayer.model_fields)
    if invalid_fields:
        raise ValueError(f"Invalid player fields: {invalid_fields}")
    new_players = list(players)
    new_players[seat] = players[seat].model_copy(update=updates)
    return tuple(new_players)  # type: ignore[return-value]


class RoundLedger(BaseModel):
    """Running per-seat scores carried from one round to the next."""

    model_config = ConfigDict(frozen=True)

    scores: SeatScores

    @classmethod
    def starting(cls, score: int) -> RoundLedger:
        return cls(scores=(score, score, score, score))

    def apply(self, deltas: SeatScores) -> RoundLedger:
        """Return a new ledger with per-seat deltas added."""
        return RoundLedger(scores=tuple(s + d for s, d in zip(self.scores, deltas, strict=True)))  # type: ignore[arg-type]


@dataclass(frozen=True)
class ReplayMatched:
    """The replay reached the entry's decision point."""

    snapshot: Snapshot


@dataclass(frozen=True)
class ReplayFallback:
    """The round ran out before the decision point; snapshot is the last known state."""

    snapshot: Snapshot
    reason: str


ReplayOutcome = ReplayMatched | ReplayFallback
