"""Translate an absolute-seat snapshot into the reviewed seat's point of view."""

from __future__ import annotations

from typing import TYPE_CHECKING

from review.models import BoardState, PlayerState
from review.tiles import NUM_SEATS, normalize_tiles

if TYPE_CHECKING:
    from review.mortal import MortalEntry
    from review.replay.state import Snapshot, TrackedPlayer


def _player_state(player: TrackedPlayer) -> PlayerState:
    return PlayerState(
        seat=player.seat_wind,
        score=player.score,
        discards=player.discards,
        closed_hand_count=player.closed_tile_count,
        is_riichi=player.is_riichi,
        riichi_turn_index=player.riichi_discard_index,
        is_dealer=player.is_dealer,
        open_melds=player.melds,
    )


def snapshot_to_board_state(
    snapshot: Snapshot,
    reviewed_seat: int,
    entry: MortalEntry,
    round_label: str | None = None,
) -> BoardState:
    """
    Map seats to you / shimocha (right) / toimen (opposite) / kamicha (left).

    The reviewed seat's concealed count comes from the entry's stored hand,
    which is exact, rather than from replay bookkeeping.
    """
    players = snapshot.players
    you = _player_state(players[reviewed_seat]).model_copy(
        update={"closed_hand_count": len(normalize_tiles(entry.state.tehai))},
    )
    return BoardState(
        round_wind=snapshot.round_wind,
        turn_number=snapshot.turn_number,
        dora=snapshot.dora,
        dora_indicators=snapshot.dora_indicators,
        honba=snapshot.honba,
        you=you,
        shimocha=_player_state(players[(reviewed_seat + 1) % NUM_SEATS]),
        toimen=_player_state(players[(reviewed_seat + 2) % NUM_SEATS]),
        kamicha=_player_state(players[(reviewed_seat + 3) % NUM_SEATS]),
        round=round_label,
    )
