"""
Tile and wind notation utilities.

Canonical tile notation is a digit followed by a suit letter:

    1m-9m  man (characters), 0m = red five
    1p-9p  pin (circles),    0p = red five
    1s-9s  sou (bamboo),     0s = red five
    1z-4z  winds (East, South, West, North)
    5z-7z  dragons (white, green, red)

Event logs may instead spell winds as E/S/W/N, dragons as P/F/C and red
fives as 5mr/5pr/5sr. Hidden tiles are "?".

Every function here is total: malformed notation is passed through unchanged
with a logged warning so one bad token never aborts a review.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
from mahjong.tile import TilesConverter

from review.enums import WIND_ORDER, Wind

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()

UNKNOWN_TILE = "?"
NUM_SEATS = 4

_CANONICAL_TILE = re.compile(r"^(?:[0-9][mps]|[1-7]z)$")

_NOTATION_ALIASES: dict[str, str] = {
    # winds
    "E": "1z",
    "S": "2z",
    "W": "3z",
    "N": "4z",
    # dragons
    "P": "5z",
    "F": "6z",
    "C": "7z",
    # red fives, suffix and prefix marker styles
    "5mr": "0m",
    "5pr": "0p",
    "5sr": "0s",
    "r5m": "0m",
    "r5p": "0p",
    "r5s": "0s",
}

_WIND_ALIASES: dict[str, Wind] = {
    "E": Wind.EAST,
    "S": Wind.SOUTH,
    "W": Wind.WEST,
    "N": Wind.NORTH,
    **{wind.value: wind for wind in WIND_ORDER},
}

_NUM_WINDS = 4
_NUM_DRAGONS = 3
_FIRST_DRAGON = 5
_RED_FIVE = 0
_NINE = 9

_SUIT_KEYWORDS = {"m": "man", "p": "pin", "s": "sou", "z": "honors"}


def is_canonical(tile: str) -> bool:
    """Check if a tile is already in canonical notation."""
    return bool(_CANONICAL_TILE.match(tile))


def normalize_tile(raw: str) -> str:
    """Translate any supported tile spelling into canonical notation."""
    alias = _NOTATION_ALIASES.get(raw)
    if alias is not None:
        return alias
    if raw == UNKNOWN_TILE or is_canonical(raw):
        return raw
    logger.warning("unknown tile notation", tile=raw)
    return raw


def normalize_tiles(raw_tiles: Iterable[str]) -> list[str]:
    return [normalize_tile(t) for t in raw_tiles]


def normalize_wind(raw: str) -> Wind:
    """Translate a wind letter or name into a Wind. Unknown values fall back to East."""
    wind = _WIND_ALIASES.get(raw)
    if wind is None:
        logger.warning("unknown wind notation", wind=raw)
        return Wind.EAST
    return wind


def wind_index(wind: Wind) -> int:
    return WIND_ORDER.index(wind)


def seat_to_wind(seat: int, dealer: int) -> Wind:
    """
    Return the seat wind of a seat for the given dealer.

    The dealer is always East; the other seats follow counter-clockwise.
    """
    return WIND_ORDER[(seat - dealer) % NUM_SEATS]


def format_round(round_index: int, honba: int) -> str:
    """
    Format a zero-based absolute round index as a human label.

    0-3 are East 1-4, 4-7 South 1-4 and so on; e.g. (5, 1) -> "South 2 Honba 1".
    """
    wind_number, hand_number = divmod(round_index, NUM_SEATS)
    if 0 <= wind_number < len(WIND_ORDER):
        wind = WIND_ORDER[wind_number]
    else:
        logger.warning("round index out of range", round_index=round_index)
        wind = Wind.EAST
    label = f"{wind.value} {hand_number + 1}"
    return f"{label} Honba {honba}" if honba > 0 else label


def dora_from_indicator(indicator: str) -> str:
    """
    Return the dora tile indicated by a dora indicator.

    Numbered suits step up by one with 9 wrapping to 1; a red five indicates
    like a plain five. Winds cycle E->S->W->N->E and dragons cycle
    white->green->red->white.
    """
    tile = normalize_tile(indicator)
    if not is_canonical(tile):
        logger.warning("cannot resolve dora from indicator", indicator=indicator)
        return tile

    number, suit = int(tile[0]), tile[1]
    if suit == "z":
        if number <= _NUM_WINDS:
            return f"{number % _NUM_WINDS + 1}z"
        return f"{(number - _FIRST_DRAGON + 1) % _NUM_DRAGONS + _FIRST_DRAGON}z"

    if number == _RED_FIVE:
        return f"6{suit}"
    if number == _NINE:
        return f"1{suit}"
    return f"{number + 1}{suit}"


def tile_to_34(tile: str) -> int:
    """
    Convert a canonical tile to its 34-format index.

    Red fives share the index of the plain five.
    """
    if not is_canonical(tile):
        raise ValueError(f"tile must be in canonical notation, got {tile!r}")
    digit = "5" if tile[0] == "0" else tile[0]
    tiles_136 = TilesConverter.string_to_136_array(**{_SUIT_KEYWORDS[tile[1]]: digit})
    return tiles_136[0] // 4


def tile_sort_key(tile: str) -> tuple[int, str]:
    """Sort key ordering tiles man, pin, sou, honors; unrecognized tiles go last."""
    if is_canonical(tile):
        return tile_to_34(tile), tile
    return 34, tile


def sort_tiles(tiles: Iterable[str]) -> list[str]:
    return sorted(tiles, key=tile_sort_key)


def same_kind(first: str, second: str) -> bool:
    """Check if two tiles are the same kind, treating a red five as a five."""
    if is_canonical(first) and is_canonical(second):
        return tile_to_34(first) == tile_to_34(second)
    return first == second
