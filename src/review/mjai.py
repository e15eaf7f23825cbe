"""mjai event log models.

Each line of an mjai log is one JSON object discriminated by its "type" field.
These models are the read-only input of the replay; tile fields keep the
notation of the log and are normalized when applied.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from review.enums import MjaiEventType
from review.tiles import NUM_SEATS, normalize_wind, wind_index

Seat = Annotated[int, Field(ge=0, le=NUM_SEATS - 1)]
SeatDeltas = tuple[int, int, int, int]


class MjaiBaseEvent(BaseModel):
    """Base class for all mjai events. Unknown extra fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: MjaiEventType


class StartGameEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.START_GAME] = MjaiEventType.START_GAME
    names: tuple[str, ...] | None = None


class StartKyokuEvent(MjaiBaseEvent):
    """Round start: wind, hand number within the wind, dealer, dora and starting hands."""

    type: Literal[MjaiEventType.START_KYOKU] = MjaiEventType.START_KYOKU
    bakaze: str
    kyoku: int = Field(ge=1, le=NUM_SEATS)
    honba: int = Field(default=0, ge=0)
    kyotaku: int = Field(default=0, ge=0)
    oya: Seat
    dora_marker: str
    tehais: tuple[tuple[str, ...], ...] = ()
    scores: SeatDeltas | None = None

    @property
    def round_index(self) -> int:
        """Zero-based absolute round index (East 1 = 0, South 1 = 4)."""
        return wind_index(normalize_wind(self.bakaze)) * NUM_SEATS + (self.kyoku - 1)


class TsumoEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.TSUMO] = MjaiEventType.TSUMO
    actor: Seat
    pai: str = "?"


class DahaiEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.DAHAI] = MjaiEventType.DAHAI
    actor: Seat
    pai: str
    tsumogiri: bool = False


class ChiEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.CHI] = MjaiEventType.CHI
    actor: Seat
    target: Seat
    pai: str
    consumed: tuple[str, ...] = ()


class PonEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.PON] = MjaiEventType.PON
    actor: Seat
    target: Seat
    pai: str
    consumed: tuple[str, ...] = ()


class DaiminkanEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.DAIMINKAN] = MjaiEventType.DAIMINKAN
    actor: Seat
    target: Seat
    pai: str
    consumed: tuple[str, ...] = ()


class AnkanEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.ANKAN] = MjaiEventType.ANKAN
    actor: Seat
    consumed: tuple[str, ...]


class KakanEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.KAKAN] = MjaiEventType.KAKAN
    actor: Seat
    pai: str
    consumed: tuple[str, ...] = ()


class ReachEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.REACH] = MjaiEventType.REACH
    actor: Seat


class ReachAcceptedEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.REACH_ACCEPTED] = MjaiEventType.REACH_ACCEPTED
    actor: Seat


class HoraEvent(MjaiBaseEvent):
    """Win. target is the seat that dealt in, or the winner itself on tsumo."""

    type: Literal[MjaiEventType.HORA] = MjaiEventType.HORA
    actor: Seat
    target: Seat
    pai: str | None = None
    deltas: SeatDeltas | None = None
    ura_markers: tuple[str, ...] | None = None
    scores: SeatDeltas | None = None

    @property
    def is_tsumo(self) -> bool:
        return self.actor == self.target

    @property
    def loser(self) -> int | None:
        return None if self.is_tsumo else self.target


class RyukyokuEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.RYUKYOKU] = MjaiEventType.RYUKYOKU
    deltas: SeatDeltas | None = None
    scores: SeatDeltas | None = None


class EndKyokuEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.END_KYOKU] = MjaiEventType.END_KYOKU


class EndGameEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.END_GAME] = MjaiEventType.END_GAME


class DoraEvent(MjaiBaseEvent):
    type: Literal[MjaiEventType.DORA] = MjaiEventType.DORA
    dora_marker: str


class NoneEvent(MjaiBaseEvent):
    """A declined call. Appears only as a review action."""

    type: Literal[MjaiEventType.NONE] = MjaiEventType.NONE


MjaiEvent = Annotated[
    StartGameEvent
    | StartKyokuEvent
    | TsumoEvent
    | DahaiEvent
    | ChiEvent
    | PonEvent
    | DaiminkanEvent
    | AnkanEvent
    | KakanEvent
    | ReachEvent
    | ReachAcceptedEvent
    | HoraEvent
    | RyukyokuEvent
    | EndKyokuEvent
    | EndGameEvent
    | DoraEvent
    | NoneEvent,
    Field(discriminator="type"),
]

CallEvent = ChiEvent | PonEvent | DaiminkanEvent
TerminalEvent = HoraEvent | RyukyokuEvent

_event_adapter: TypeAdapter[MjaiEvent] = TypeAdapter(MjaiEvent)


def parse_mjai_event(data: dict[str, Any]) -> MjaiEvent:
    """Validate a raw dict into a typed mjai event.

    Raises pydantic.ValidationError for unknown types or invalid fields.
    """
    return _event_adapter.validate_python(data)
