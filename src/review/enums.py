"""
String enum definitions for review concepts.
"""

from enum import Enum, StrEnum


class Wind(str, Enum):
    """Round wind or seat wind."""

    EAST = "East"
    SOUTH = "South"
    WEST = "West"
    NORTH = "North"


WIND_ORDER: tuple[Wind, ...] = (Wind.EAST, Wind.SOUTH, Wind.WEST, Wind.NORTH)


class MistakeCategory(str, Enum):
    """Category assigned to a flagged decision."""

    PUSH_FOLD = "Push/Fold"
    EFFICIENCY = "Efficiency"
    RIICHI_DECISION = "Riichi Decision"
    CALLING_DECISION = "Calling Decision"
    DEFENSE = "Defense"


class ImpactType(str, Enum):
    """How the round outcome relates to the flagged decision."""

    DEALT_IN = "dealt_in"
    MISSED_WIN = "missed_win"
    POSITION_LOSS = "position_loss"
    NO_DIRECT = "no_direct"


class MeldKind(str, Enum):
    """Formed meld kinds as tracked during replay."""

    CHI = "chi"
    PON = "pon"
    KAN = "kan"  # open quad, called or upgraded
    ANKAN = "ankan"  # concealed quad


class MjaiEventType(StrEnum):
    """Event types of the mjai event log."""

    START_GAME = "start_game"
    START_KYOKU = "start_kyoku"
    TSUMO = "tsumo"
    DAHAI = "dahai"
    CHI = "chi"
    PON = "pon"
    DAIMINKAN = "daiminkan"
    ANKAN = "ankan"
    KAKAN = "kakan"
    REACH = "reach"
    REACH_ACCEPTED = "reach_accepted"
    HORA = "hora"
    RYUKYOKU = "ryukyoku"
    END_KYOKU = "end_kyoku"
    END_GAME = "end_game"
    DORA = "dora"
    NONE = "none"


class FileType(str, Enum):
    """Result of sniffing an uploaded file."""

    MJAI = "mjai"
    REVIEW = "review"
    UNKNOWN = "unknown"


class ParseSource(str, Enum):
    """Which input a parse error belongs to."""

    MJAI = "mjai"
    REVIEW = "review"
