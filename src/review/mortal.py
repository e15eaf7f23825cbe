"""Mortal AI review models.

A review evaluates one seat's decisions. Each kyoku holds the decision
entries for that round plus its terminal events; each entry ranks the
candidate actions by value (q_value) and records where the actual action
landed in that ranking.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from review.enums import MjaiEventType
from review.mjai import HoraEvent, MjaiEvent, RyukyokuEvent, Seat, TerminalEvent


class _ReviewModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class MortalFuuro(_ReviewModel):
    """An open or concealed meld in the reviewed seat's stored hand state."""

    type: MjaiEventType
    pai: str | None = None
    target: Seat | None = None
    consumed: tuple[str, ...] = ()


class MortalState(_ReviewModel):
    tehai: tuple[str, ...] = ()
    fuuros: tuple[MortalFuuro, ...] = ()


class MortalDetail(_ReviewModel):
    """One candidate action with its value score and selection probability."""

    action: MjaiEvent
    q_value: float
    prob: float = 0.0


class MortalEntry(_ReviewModel):
    """One reviewed decision of the reviewed seat."""

    junme: int = Field(ge=0)  # reviewed seat's own turn count, 1-based
    tiles_left: int = 0
    last_actor: Seat | None = None
    tile: str | None = None  # tile that triggered the decision
    state: MortalState = Field(default_factory=MortalState)
    at_self_chi_pon: bool = False
    at_self_riichi: bool = False
    at_opponent_kakan: bool = False
    expected: MjaiEvent
    actual: MjaiEvent
    is_equal: bool = False
    details: tuple[MortalDetail, ...] = ()
    shanten: int = Field(default=0, ge=-1)  # -1 = ready
    at_furiten: bool = False
    actual_index: int = Field(default=0, ge=0)

    @property
    def is_call_decision(self) -> bool:
        return self.at_self_chi_pon


class MortalKyokuReview(_ReviewModel):
    kyoku: int = Field(ge=0)  # zero-based absolute round index
    honba: int = Field(default=0, ge=0)
    end_status: tuple[MjaiEvent, ...] = ()
    relative_scores: tuple[int, ...] = ()
    entries: tuple[MortalEntry, ...] = ()

    @property
    def terminal_event(self) -> TerminalEvent | None:
        """The round's win or exhaustive draw. A win takes precedence."""
        hora = next((e for e in self.end_status if isinstance(e, HoraEvent)), None)
        if hora is not None:
            return hora
        return next((e for e in self.end_status if isinstance(e, RyukyokuEvent)), None)

    @property
    def terminal_deltas(self) -> tuple[tuple[int, int, int, int], ...]:
        """Per-seat score deltas of every terminal event (several on a double ron)."""
        return tuple(
            e.deltas for e in self.end_status if isinstance(e, HoraEvent | RyukyokuEvent) and e.deltas is not None
        )


class MortalReview(_ReviewModel):
    total_reviewed: int = 0
    total_matches: int = 0
    rating: float = 0.0
    temperature: float | None = None
    model_tag: str | None = None
    kyokus: tuple[MortalKyokuReview, ...]
