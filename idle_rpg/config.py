"""
Engine configuration settings.
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Engine settings."""

    # Logging
    LOG_LEVEL: str = "WARNING"

    # Combat
    MAX_BATTLE_ROUNDS: int = 100  # Simulation safety bound
    MAX_ADDITIONAL_ATTACK_CHANCE: float = 1.0

    # Simulation
    DEFAULT_SIMULATION_COUNT: int = 100
    MAX_SIMULATION_COUNT: int = 1000

    # Loot
    IDLE_CHECK_INTERVAL_SECONDS: int = 1
    BONUS_DROP_CHANCE: float = 0.3
    BONUS_DROP_MIN_STAGE: int = 3

    # Enhancement
    DESTRUCTION_ENABLED: bool = True
    DOWNGRADE_MIN_LEVEL: int = 12

    # Sales
    MAX_ITEMS_PER_SALE: int = 20
    HIGH_VALUE_SALE_THRESHOLD: int = 100

    # Offline progress
    MAX_OFFLINE_HOURS: int = 24

    class Config:
        env_prefix = "IDLE_RPG_"
        env_file = ".env"


settings = EngineSettings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Set up console logging for the engine.

    Args:
        level: Level name; defaults to settings.LOG_LEVEL.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("idle_rpg").setLevel(level_name)
