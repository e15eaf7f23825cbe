"""
Output models consumed by rendering and explanation layers.

All models are frozen. They serialize with camelCase keys
(model_dump(by_alias=True)) to match what the rendering layer reads.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from review.enums import ImpactType, MeldKind, MistakeCategory, ParseSource, Wind


class _OutputModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Meld(_OutputModel):
    """
    A formed meld as displayed on the board.

    called_from is the index of the tile drawn sideways (the one claimed
    from an opponent); None for concealed quads.
    """

    kind: MeldKind
    tiles: tuple[str, ...]
    called_from: int | None = None


class PlayerState(_OutputModel):
    seat: Wind
    score: int
    discards: tuple[str, ...] = ()
    closed_hand_count: int
    is_riichi: bool = False
    riichi_turn_index: int | None = None  # index into discards of the riichi declaration tile
    is_dealer: bool = False
    open_melds: tuple[Meld, ...] = ()


class BoardState(_OutputModel):
    """Board at a decision, seen from the reviewed seat."""

    round_wind: Wind
    turn_number: int
    dora: str
    dora_indicators: tuple[str, ...] = ()
    honba: int
    you: PlayerState
    kamicha: PlayerState  # left seat, plays before you
    toimen: PlayerState  # opposite seat
    shimocha: PlayerState  # right seat, plays after you
    round: str | None = None


class PointSwing(_OutputModel):
    actual: str
    optimal: str
    diff: str


class Impact(_OutputModel):
    type: ImpactType
    description: str
    point_swing: PointSwing | None = None


class Explanation(_OutputModel):
    summary: str
    details: tuple[str, ...]
    principle: str


class Mistake(_OutputModel):
    id: int
    round: str  # "East 2", "South 1 Honba 1"
    turn: int
    ev_diff: float  # <= 0
    category: MistakeCategory
    hand: tuple[str, ...]
    drew: str | None
    your_discard: str | None
    optimal_discard: str
    board_state: BoardState
    impact: Impact
    explanation: Explanation


class GameResult(_OutputModel):
    rank: int
    score: int
    delta: str


class ReplayMetadata(_OutputModel):
    date: str = ""
    room: str = "Unknown"
    mode: str = "4p"
    player_name: str | None = None
    result: GameResult
    overall_accuracy: float
    total_mistakes: int
    big_mistakes: int


class ParseError(_OutputModel):
    """A non-fatal problem found while parsing an input file."""

    source: ParseSource
    message: str
    line: int | None = None


class PipelineResult(_OutputModel):
    mistakes: tuple[Mistake, ...]
    metadata: ReplayMetadata
    warnings: tuple[str, ...] = Field(default_factory=tuple)
