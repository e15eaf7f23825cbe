"""Review pipeline configuration via environment variables (prefix REVIEW_)."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from review.tiles import NUM_SEATS


class ReviewSettings(BaseSettings):
    """
    Configuration for one pipeline run.

    Every field can be overridden by an environment variable, e.g.
    REVIEW_MAX_MISTAKES=10 or REVIEW_REVIEWED_PLAYER=2.
    """

    model_config = SettingsConfigDict(env_prefix="REVIEW_", frozen=True)

    max_mistakes: int = Field(default=5, ge=1)
    min_ev_diff: float = Field(default=0.5, ge=0)  # minimum |value difference| to report
    reviewed_player: int = Field(default=0, ge=0, le=NUM_SEATS - 1)
    big_mistake_threshold: float = Field(default=1.0, ge=0)
    starting_score: int = 25000
    riichi_stake: int = Field(default=1000, ge=0)

    # Report entries whose board state came from a replay fallback instead of
    # skipping them.
    keep_fallback_snapshots: bool = False

    log_dir: str | None = None
