import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Search budget
    MCTS_ITERATIONS: int = 2000
    MCTS_EXPLORATION: float = 1.4
    ROLLOUT_MAX_PLIES: int = 400
    SEARCH_TIME_LIMIT: float = 30.0

    # App config
    RANDOM_SEED: int | None = None
    DEBUG: bool = False

    @field_validator("MCTS_ITERATIONS", "ROLLOUT_MAX_PLIES")
    @classmethod
    def validate_positive_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("MCTS_EXPLORATION")
    @classmethod
    def validate_exploration(cls, v: float) -> float:
        if not 1.0 <= v <= 2.0:
            raise ValueError("MCTS_EXPLORATION must be between 1 and 2")
        return v

    @field_validator("SEARCH_TIME_LIMIT")
    @classmethod
    def validate_time_limit(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("SEARCH_TIME_LIMIT must be positive")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Rollouts and expansions are too chatty for debug runs
    logging.getLogger("backgammon.services.search.rollout").setLevel(logging.INFO)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug(
        "Search budget: iterations=%d, exploration=%.2f, max_plies=%d, time_limit=%.1fs",
        settings.MCTS_ITERATIONS,
        settings.MCTS_EXPLORATION,
        settings.ROLLOUT_MAX_PLIES,
        settings.SEARCH_TIME_LIMIT,
    )
    return settings
