"""
Event log replay: rebuild the table at each reviewed decision.

Dependency direction: replay imports from review.mjai, review.mortal,
review.models and review.tiles. None of those import from replay.
"""

from review.replay.board import snapshot_to_board_state
from review.replay.ledger import advance_ledger, is_balanced, ledger_for_round, riichi_pot
from review.replay.state import (
    ReplayFallback,
    ReplayMatched,
    ReplayOutcome,
    RoundLedger,
    Snapshot,
    TrackedPlayer,
)
from review.replay.tracker import GameReplayer, RoundLog, replay_round, split_rounds

__all__ = [
    "GameReplayer",
    "ReplayFallback",
    "ReplayMatched",
    "ReplayOutcome",
    "RoundLedger",
    "RoundLog",
    "Snapshot",
    "TrackedPlayer",
    "advance_ledger",
    "is_balanced",
    "ledger_for_round",
    "replay_round",
    "riichi_pot",
    "snapshot_to_board_state",
    "split_rounds",
]
