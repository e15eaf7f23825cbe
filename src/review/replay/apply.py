"""
Event application: fold one mjai event into the tracked players.

Each handler returns a new players tuple and never mutates its input.
Opponents' concealed tiles are never looked at; only their counts move.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from review.enums import MeldKind
from review.mjai import (
    AnkanEvent,
    ChiEvent,
    DahaiEvent,
    DaiminkanEvent,
    HoraEvent,
    KakanEvent,
    PonEvent,
    ReachAcceptedEvent,
    RyukyokuEvent,
    TsumoEvent,
)
from review.models import Meld
from review.replay.state import update_player
from review.tiles import NUM_SEATS, normalize_tile, normalize_tiles, same_kind, tile_sort_key

if TYPE_CHECKING:
    from review.mjai import CallEvent, MjaiEvent
    from review.replay.state import Players

logger = structlog.get_logger()

# Sideways tile position by where the target sits relative to the caller:
# (target - caller) % 4 == 3 is the left seat, 2 opposite, 1 right.
_TRIPLET_CALLED_INDEX = {3: 0, 2: 1, 1: 2}
_QUAD_CALLED_INDEX = {3: 0, 2: 1, 1: 3}

_CALL_KINDS: dict[type, MeldKind] = {
    ChiEvent: MeldKind.CHI,
    PonEvent: MeldKind.PON,
    DaiminkanEvent: MeldKind.KAN,
}


def build_call_meld(event: CallEvent) -> Meld:
    """
    Build the displayed meld for a call on an opponent's discard.

    A sequence is shown sorted with the called tile sideways wherever it
    lands; triplets and quads put the called tile at the position that
    points to the seat it came from.
    """
    called = normalize_tile(event.pai)
    consumed = normalize_tiles(event.consumed)
    kind = _CALL_KINDS[type(event)]

    if kind == MeldKind.CHI:
        tiles = sorted([called, *consumed], key=tile_sort_key)
        return Meld(kind=kind, tiles=tuple(tiles), called_from=tiles.index(called))

    relation = (event.target - event.actor) % NUM_SEATS
    index_map = _QUAD_CALLED_INDEX if kind == MeldKind.KAN else _TRIPLET_CALLED_INDEX
    called_from = min(index_map.get(relation, 0), len(consumed))
    tiles = [*consumed[:called_from], called, *consumed[called_from:]]
    return Meld(kind=kind, tiles=tuple(tiles), called_from=called_from)


def _apply_draw(players: Players, event: TsumoEvent) -> Players:
    player = players[event.actor]
    return update_player(players, event.actor, closed_tile_count=player.closed_tile_count + 1)


def _apply_discard(players: Players, event: DahaiEvent) -> Players:
    player = players[event.actor]
    return update_player(
        players,
        event.actor,
        discards=(*player.discards, normalize_tile(event.pai)),
        closed_tile_count=player.closed_tile_count - 1,
    )


def _apply_call(players: Players, event: CallEvent) -> Players:
    target = players[event.target]
    if target.discards:
        players = update_player(players, event.target, discards=target.discards[:-1])
    else:
        logger.warning("call on an empty pond", caller=event.actor, target=event.target, tile=event.pai)

    caller = players[event.actor]
    return update_player(
        players,
        event.actor,
        melds=(*caller.melds, build_call_meld(event)),
        closed_tile_count=caller.closed_tile_count - len(event.consumed),
    )


def _apply_concealed_quad(players: Players, event: AnkanEvent) -> Players:
    caller = players[event.actor]
    meld = Meld(kind=MeldKind.ANKAN, tiles=tuple(normalize_tiles(event.consumed)))
    return update_player(
        players,
        event.actor,
        melds=(*caller.melds, meld),
        closed_tile_count=caller.closed_tile_count - 4,
    )


def _apply_upgraded_quad(players: Players, event: KakanEvent) -> Players:
    caller = players[event.actor]
    added = normalize_tile(event.pai)
    melds = list(caller.melds)
    for i, meld in enumerate(melds):
        if meld.kind == MeldKind.PON and same_kind(meld.tiles[0], added):
            melds[i] = Meld(kind=MeldKind.KAN, tiles=(*meld.tiles, added), called_from=meld.called_from)
            break
    else:
        logger.warning("upgraded quad without a matching triplet", seat=event.actor, tile=added)

    return update_player(
        players,
        event.actor,
        melds=tuple(melds),
        closed_tile_count=caller.closed_tile_count - 1,
    )


def _apply_riichi_accepted(players: Players, event: ReachAcceptedEvent, riichi_stake: int) -> Players:
    player = players[event.actor]
    return update_player(
        players,
        event.actor,
        is_riichi=True,
        riichi_discard_index=len(player.discards) - 1 if player.discards else None,
        score=player.score - riichi_stake,
    )


def _apply_deltas(players: Players, deltas: tuple[int, int, int, int] | None) -> Players:
    if deltas is None:
        return players
    for seat, delta in enumerate(deltas):
        players = update_player(players, seat, score=players[seat].score + delta)
    return players


def apply_event(players: Players, event: MjaiEvent, *, riichi_stake: int) -> Players:
    """Return the players after one event. Events without board effect return players unchanged."""
    if isinstance(event, TsumoEvent):
        return _apply_draw(players, event)
    if isinstance(event, DahaiEvent):
        return _apply_discard(players, event)
    if isinstance(event, ChiEvent | PonEvent | DaiminkanEvent):
        return _apply_call(players, event)
    if isinstance(event, AnkanEvent):
        return _apply_concealed_quad(players, event)
    if isinstance(event, KakanEvent):
        return _apply_upgraded_quad(players, event)
    if isinstance(event, ReachAcceptedEvent):
        return _apply_riichi_accepted(players, event, riichi_stake)
    if isinstance(event, HoraEvent | RyukyokuEvent):
        return _apply_deltas(players, event.deltas)
    # reach declarations only matter once accepted; dora reveals are tracked
    # on the round, not the players
    return players
