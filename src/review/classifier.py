"""
Mistake category classification.

The review does not label its mistakes, so the category is inferred from the
decision's context with an ordered rule table: the first rule whose guard
holds decides. Riichi and calling decisions are recognizable from the entry
alone and come first; threat-based rules only settle the remaining discards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from review.enums import MistakeCategory, MjaiEventType

if TYPE_CHECKING:
    from collections.abc import Callable

    from review.mortal import MortalEntry
    from review.replay.state import Snapshot

# An opponent with this many open melds and at most this many concealed
# tiles is treated as a visible fast-hand threat.
THREAT_MIN_OPEN_MELDS = 2
THREAT_MAX_CONCEALED_TILES = 7

# Shanten at or above this is "far from ready".
FAR_FROM_READY_SHANTEN = 2
READY_SHANTEN = -1

_CALL_ACTIONS = frozenset({MjaiEventType.CHI, MjaiEventType.PON})


@dataclass(frozen=True)
class DecisionContext:
    """The facts the rule table looks at."""

    at_riichi_point: bool
    at_call_point: bool
    expected: MjaiEventType
    actual: MjaiEventType
    shanten: int
    opponent_in_riichi: bool
    opponent_open_threat: bool


@dataclass(frozen=True)
class Rule:
    name: str
    applies: Callable[[DecisionContext], bool]
    category: MistakeCategory


def build_context(entry: MortalEntry, snapshot: Snapshot, reviewed_seat: int) -> DecisionContext:
    opponents = snapshot.opponents(reviewed_seat)
    return DecisionContext(
        at_riichi_point=entry.at_self_riichi,
        at_call_point=entry.at_self_chi_pon,
        expected=entry.expected.type,
        actual=entry.actual.type,
        shanten=entry.shanten,
        opponent_in_riichi=any(p.is_riichi for p in opponents),
        opponent_open_threat=any(
            len(p.melds) >= THREAT_MIN_OPEN_MELDS and p.closed_tile_count <= THREAT_MAX_CONCEALED_TILES
            for p in opponents
        ),
    )


def _is_riichi_decision(ctx: DecisionContext) -> bool:
    return ctx.at_riichi_point or MjaiEventType.REACH in (ctx.expected, ctx.actual)


def _is_calling_decision(ctx: DecisionContext) -> bool:
    return (
        ctx.at_call_point
        or ctx.expected in _CALL_ACTIONS
        or ctx.actual in _CALL_ACTIONS
        or ctx.actual == MjaiEventType.NONE
    )


CLASSIFICATION_RULES: tuple[Rule, ...] = (
    Rule("riichi decision", _is_riichi_decision, MistakeCategory.RIICHI_DECISION),
    Rule("calling decision", _is_calling_decision, MistakeCategory.CALLING_DECISION),
    Rule(
        "far from ready against riichi",
        lambda ctx: ctx.opponent_in_riichi and ctx.shanten >= FAR_FROM_READY_SHANTEN,
        MistakeCategory.PUSH_FOLD,
    ),
    Rule(
        "close to ready against riichi",
        lambda ctx: ctx.opponent_in_riichi and READY_SHANTEN < ctx.shanten < FAR_FROM_READY_SHANTEN,
        MistakeCategory.DEFENSE,
    ),
    Rule(
        "ready against riichi",
        lambda ctx: ctx.opponent_in_riichi and ctx.shanten == READY_SHANTEN,
        MistakeCategory.PUSH_FOLD,
    ),
    Rule(
        "far from ready against an open hand",
        lambda ctx: ctx.opponent_open_threat and ctx.shanten >= FAR_FROM_READY_SHANTEN,
        MistakeCategory.DEFENSE,
    ),
)


def classify_context(ctx: DecisionContext) -> MistakeCategory:
    for rule in CLASSIFICATION_RULES:
        if rule.applies(ctx):
            return rule.category
    return MistakeCategory.EFFICIENCY


def classify_mistake(entry: MortalEntry, snapshot: Snapshot, reviewed_seat: int) -> MistakeCategory:
    """Classify a flagged decision. Priority: riichi, calling, riichi threat, open threat, efficiency."""
    return classify_context(build_context(entry, snapshot, reviewed_seat))
