"""
Test builders for mjai events, review entries and a synthetic three-round game.

The synthetic game is reviewed from seat 0:

- East 1 (dealer 0): seat 1 declares riichi; on turn 3 seat 0 discards 5m
  instead of the safe 1z and deals in for 8,000.
- East 2 (dealer 1): on turn 1 seat 0 discards 8p into a ready hand without
  declaring riichi; on turn 2 it declines a pon of seat 1's 7z. Exhaustive
  draw, seat 0 not ready.
- East 3 (dealer 2): seat 3 pons seat 2's 6z; seat 0 makes an efficiency
  slip on turn 2 while far from ready. Seat 2 wins by self-draw.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from review.mjai import (
    AnkanEvent,
    ChiEvent,
    DahaiEvent,
    DaiminkanEvent,
    DoraEvent,
    EndGameEvent,
    EndKyokuEvent,
    HoraEvent,
    KakanEvent,
    NoneEvent,
    PonEvent,
    ReachAcceptedEvent,
    ReachEvent,
    RyukyokuEvent,
    StartGameEvent,
    StartKyokuEvent,
    TsumoEvent,
)
from review.mortal import MortalDetail, MortalEntry, MortalKyokuReview, MortalReview, MortalState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from review.mjai import MjaiEvent

HIDDEN_HAND = ("?",) * 13

ROUND1_HAND = ("1m", "2m", "3m", "5m", "6m", "9m", "1p", "2p", "3p", "1s", "7s", "8s", "E")
ROUND2_HAND = ("2m", "3m", "4m", "6m", "7m", "8m", "2p", "3p", "8p", "5s", "5s", "C", "C")
ROUND3_HAND = ("1m", "4m", "7m", "1p", "9p", "2s", "5s", "8s", "E", "W", "P", "F", "C")

DEAL_IN_DELTAS = (-8000, 9000, 0, 0)
DRAW_DELTAS = (-1500, 1500, 1500, -1500)
DEALER_TSUMO_DELTAS = (-2000, -2000, 6000, -2000)


def start_kyoku(
    *,
    bakaze: str = "E",
    kyoku: int = 1,
    honba: int = 0,
    kyotaku: int = 0,
    oya: int = 0,
    dora_marker: str = "1m",
    hand: Sequence[str] | None = None,
    reviewed_seat: int = 0,
    scores: tuple[int, int, int, int] | None = None,
) -> StartKyokuEvent:
    """Round start with the reviewed seat's hand visible and the rest hidden."""
    tehais = [HIDDEN_HAND] * 4
    tehais[reviewed_seat] = tuple(hand) if hand is not None else HIDDEN_HAND
    return StartKyokuEvent(
        bakaze=bakaze,
        kyoku=kyoku,
        honba=honba,
        kyotaku=kyotaku,
        oya=oya,
        dora_marker=dora_marker,
        tehais=tuple(tehais),
        scores=scores,
    )


def tsumo(actor: int, pai: str = "?") -> TsumoEvent:
    return TsumoEvent(actor=actor, pai=pai)


def dahai(actor: int, pai: str, *, tsumogiri: bool = False) -> DahaiEvent:
    return DahaiEvent(actor=actor, pai=pai, tsumogiri=tsumogiri)


def turn(actor: int, discard: str, draw: str = "?") -> list[MjaiEvent]:
    """A plain draw-then-discard turn."""
    return [tsumo(actor, draw), dahai(actor, discard)]


def chi(actor: int, target: int, pai: str, consumed: Sequence[str]) -> ChiEvent:
    return ChiEvent(actor=actor, target=target, pai=pai, consumed=tuple(consumed))


def pon(actor: int, target: int, pai: str, consumed: Sequence[str] | None = None) -> PonEvent:
    return PonEvent(actor=actor, target=target, pai=pai, consumed=tuple(consumed or (pai, pai)))


def daiminkan(actor: int, target: int, pai: str) -> DaiminkanEvent:
    return DaiminkanEvent(actor=actor, target=target, pai=pai, consumed=(pai, pai, pai))


def ankan(actor: int, pai: str) -> AnkanEvent:
    return AnkanEvent(actor=actor, consumed=(pai, pai, pai, pai))


def kakan(actor: int, pai: str) -> KakanEvent:
    return KakanEvent(actor=actor, pai=pai, consumed=(pai, pai, pai))


def reach(actor: int) -> ReachEvent:
    return ReachEvent(actor=actor)


def reach_accepted(actor: int) -> ReachAcceptedEvent:
    return ReachAcceptedEvent(actor=actor)


def hora(actor: int, target: int, deltas: tuple[int, int, int, int], pai: str | None = None) -> HoraEvent:
    return HoraEvent(actor=actor, target=target, pai=pai, deltas=deltas)


def ryukyoku(deltas: tuple[int, int, int, int]) -> RyukyokuEvent:
    return RyukyokuEvent(deltas=deltas)


def dora(marker: str) -> DoraEvent:
    return DoraEvent(dora_marker=marker)


def end_kyoku() -> EndKyokuEvent:
    return EndKyokuEvent()


def none_action() -> NoneEvent:
    return NoneEvent()


def candidate(action: MjaiEvent, q_value: float, prob: float = 0.0) -> MortalDetail:
    return MortalDetail(action=action, q_value=q_value, prob=prob)


def make_entry(
    *,
    junme: int,
    actual: MjaiEvent,
    expected: MjaiEvent,
    details: Sequence[MortalDetail] = (),
    actual_index: int = 1,
    tile: str | None = None,
    tehai: Sequence[str] = (),
    is_equal: bool = False,
    shanten: int = 1,
    at_self_chi_pon: bool = False,
    at_self_riichi: bool = False,
    tiles_left: int = 60,
) -> MortalEntry:
    return MortalEntry(
        junme=junme,
        tiles_left=tiles_left,
        tile=tile,
        state=MortalState(tehai=tuple(tehai)),
        at_self_chi_pon=at_self_chi_pon,
        at_self_riichi=at_self_riichi,
        expected=expected,
        actual=actual,
        is_equal=is_equal,
        details=tuple(details),
        shanten=shanten,
        actual_index=actual_index,
    )


def make_kyoku(
    kyoku: int,
    entries: Sequence[MortalEntry],
    end_status: Sequence[MjaiEvent] = (),
    honba: int = 0,
) -> MortalKyokuReview:
    return MortalKyokuReview(kyoku=kyoku, honba=honba, end_status=tuple(end_status), entries=tuple(entries))


def make_review(kyokus: Sequence[MortalKyokuReview], *, rating: float = 0.8) -> MortalReview:
    total = sum(len(k.entries) for k in kyokus)
    matches = sum(1 for k in kyokus for e in k.entries if e.is_equal)
    return MortalReview(total_reviewed=total, total_matches=matches, rating=rating, kyokus=tuple(kyokus))


# ============================================================================
# Synthetic three-round game
# ============================================================================


def round1_events() -> list[MjaiEvent]:
    return [
        start_kyoku(hand=ROUND1_HAND, dora_marker="1m", oya=0),
        *turn(0, "9m", draw="5p"),
        *turn(1, "E"),
        *turn(2, "9p"),
        *turn(3, "S"),
        *turn(0, "1s", draw="6s"),
        tsumo(1),
        reach(1),
        dahai(1, "4m"),
        reach_accepted(1),
        *turn(2, "C"),
        *turn(3, "W"),
        tsumo(0, "3m"),
        dahai(0, "5m"),
        hora(1, 0, DEAL_IN_DELTAS, pai="5m"),
        end_kyoku(),
    ]


def round2_events() -> list[MjaiEvent]:
    return [
        start_kyoku(hand=ROUND2_HAND, kyoku=2, oya=1, dora_marker="3s", scores=(17000, 33000, 25000, 25000)),
        *turn(1, "9s"),
        *turn(2, "1p"),
        *turn(3, "1m"),
        *turn(0, "8p", draw="4p"),
        *turn(1, "C"),
        *turn(2, "2p"),
        *turn(3, "9m"),
        *turn(0, "2s", draw="2s"),
        ryukyoku(DRAW_DELTAS),
        end_kyoku(),
    ]


def round3_events() -> list[MjaiEvent]:
    return [
        start_kyoku(hand=ROUND3_HAND, kyoku=3, oya=2, dora_marker="9p", scores=(15500, 34500, 26500, 23500)),
        *turn(2, "F"),
        pon(3, 2, "F"),
        dahai(3, "9s"),
        *turn(0, "1p", draw="2m"),
        *turn(1, "5s"),
        *turn(2, "3s"),
        *turn(3, "4s"),
        *turn(0, "9p", draw="7m"),
        *turn(1, "8s"),
        tsumo(2),
        hora(2, 2, DEALER_TSUMO_DELTAS),
        end_kyoku(),
    ]


def synthetic_events() -> list[MjaiEvent]:
    return [
        StartGameEvent(names=("Alice", "Bob", "Carol", "Dave")),
        *round1_events(),
        *round2_events(),
        *round3_events(),
        EndGameEvent(),
    ]


def deal_in_entry() -> MortalEntry:
    """East 1 turn 3: 5m into seat 1's riichi instead of the genbutsu 1z. Value difference -2.5."""
    return make_entry(
        junme=3,
        tile="3m",
        tehai=("1m", "2m", "3m", "3m", "5m", "6m", "1p", "2p", "3p", "5p", "6s", "7s", "8s", "E"),
        actual=dahai(0, "5m"),
        expected=dahai(0, "E"),
        details=[candidate(dahai(0, "E"), 1.0, 0.7), candidate(dahai(0, "5m"), -1.5, 0.1)],
        shanten=1,
        tiles_left=58,
    )


def riichi_entry() -> MortalEntry:
    """East 2 turn 1: ready after drawing 4p, discards 8p without riichi. Value difference -1.2."""
    return make_entry(
        junme=1,
        tile="4p",
        tehai=("2m", "3m", "4m", "6m", "7m", "8m", "2p", "3p", "4p", "8p", "5s", "5s", "C", "C"),
        actual=dahai(0, "8p"),
        expected=reach(0),
        details=[candidate(reach(0), 2.0, 0.8), candidate(dahai(0, "8p"), 0.8, 0.15)],
        shanten=0,
        tiles_left=66,
    )


def declined_pon_entry() -> MortalEntry:
    """East 2 turn 2: passes on seat 1's 7z. Value difference -0.7."""
    return make_entry(
        junme=2,
        tile="C",
        tehai=("2m", "3m", "4m", "6m", "7m", "8m", "2p", "3p", "4p", "5s", "5s", "C", "C"),
        actual=none_action(),
        expected=pon(0, 1, "C"),
        details=[candidate(pon(0, 1, "C"), 0.5, 0.6), candidate(none_action(), -0.2, 0.4)],
        shanten=-1,
        at_self_chi_pon=True,
        tiles_left=62,
    )


def efficiency_entries() -> list[MortalEntry]:
    """East 3: a -0.3 slip on turn 1 (under the default threshold) and a -0.8 one on turn 2."""
    return [
        make_entry(
            junme=1,
            tile="2m",
            tehai=("1m", "2m", "4m", "7m", "1p", "9p", "2s", "5s", "8s", "E", "W", "P", "F", "C"),
            actual=dahai(0, "1p"),
            expected=dahai(0, "9p"),
            details=[candidate(dahai(0, "9p"), 0.1, 0.5), candidate(dahai(0, "1p"), -0.2, 0.3)],
            shanten=4,
        ),
        make_entry(
            junme=2,
            tile="7m",
            tehai=("1m", "2m", "4m", "7m", "7m", "9p", "2s", "5s", "8s", "E", "W", "P", "F", "C"),
            actual=dahai(0, "9p"),
            expected=dahai(0, "E"),
            details=[candidate(dahai(0, "E"), 0.3, 0.5), candidate(dahai(0, "9p"), -0.5, 0.2)],
            shanten=3,
        ),
    ]


def synthetic_review() -> MortalReview:
    round1_match = make_entry(
        junme=1,
        tile="5p",
        actual=dahai(0, "9m"),
        expected=dahai(0, "9m"),
        is_equal=True,
        actual_index=0,
    )
    return make_review(
        [
            make_kyoku(0, [round1_match, deal_in_entry()], [hora(1, 0, DEAL_IN_DELTAS, pai="5m")]),
            make_kyoku(1, [riichi_entry(), declined_pon_entry()], [ryukyoku(DRAW_DELTAS)]),
            make_kyoku(2, efficiency_entries(), [hora(2, 2, DEALER_TSUMO_DELTAS)]),
        ],
        rating=0.72,
    )


def events_to_ndjson(events: Sequence[MjaiEvent]) -> str:
    return "\n".join(event.model_dump_json() for event in events) + "\n"


def review_to_json(review: MortalReview) -> str:
    return review.model_dump_json()


def review_to_dict(review: MortalReview) -> dict:
    return json.loads(review.model_dump_json())
