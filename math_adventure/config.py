"""
Configuration management for Math Adventure.

This module centralizes all configuration settings:
- Engine thresholds (difficulty window, mastery promotion, selection weights)
- Data paths for persisted mastery and session results
- Logging level
- Environment overrides loaded from a .env file
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()


PromotionMode = Literal["every_update", "crossing"]


def _env_seed() -> Optional[int]:
    value = os.getenv("MATH_ADVENTURE_SEED")
    return int(value) if value else None


@dataclass
class EngineConfig:
    """Adaptive session engine thresholds."""

    # Difficulty ladder
    analysis_window: int = 5  # Trailing attempts considered
    min_window_attempts: int = 3  # No adjustment before this many attempts
    advance_accuracy: float = 0.8  # Window accuracy needed to climb
    advance_streak: int = 3  # Streak needed to climb
    retreat_accuracy: float = 0.4  # Window accuracy at or below which we descend

    # Weighted selection
    min_selection_weight: float = 0.1

    # Mastery promotion
    promotion_success_rate: float = 0.8
    promotion_min_attempts: int = 10
    max_mastery_level: int = 5
    promotion_mode: PromotionMode = "every_update"

    # Outcome decoration
    retry_incorrect_limit: int = 2  # Offer retry while fewer incorrect answers than this
    quick_answer_ratio: float = 0.8
    slow_answer_ratio: float = 1.5

    # Reproducibility
    random_seed: Optional[int] = field(default_factory=_env_seed)


@dataclass
class PathConfig:
    """File system paths - single source of truth for all directories."""

    package_root: Path = field(default_factory=lambda: Path(__file__).parent)
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("MATH_ADVENTURE_DATA_DIR", Path.cwd() / "data")
        ).resolve()
    )

    mastery_dir: Path = field(init=False)
    results_dir: Path = field(init=False)
    schemas_dir: Path = field(init=False)
    mastery_schema: Path = field(init=False)
    session_result_schema: Path = field(init=False)

    def __post_init__(self):
        """Initialize computed paths."""
        self.mastery_dir = self.data_dir / "mastery"
        self.results_dir = self.data_dir / "results"
        self.schemas_dir = self.package_root / "schemas"
        self.mastery_schema = self.schemas_dir / "skill_mastery.schema.json"
        self.session_result_schema = self.schemas_dir / "session_result.schema.json"

    def prepare_filesystem(self):
        """
        Create data directories if they don't exist.

        Separated from __post_init__ to avoid side-effects on import.
        """
        for directory in [self.data_dir, self.mastery_dir, self.results_dir]:
            directory.mkdir(parents=True, exist_ok=True)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = field(
        default_factory=lambda: os.getenv("MATH_ADVENTURE_LOG_LEVEL", "INFO").upper()
    )


class Config:
    """
    Main configuration class. Singleton pattern.

    Usage:
        from math_adventure.config import config

        window = config.engine.analysis_window
        config.prepare_fs()
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.engine = EngineConfig()
            cls._instance.paths = PathConfig()
            cls._instance.logging = LoggingConfig()
        return cls._instance

    def prepare_fs(self):
        """Prepare filesystem (create directories). Call once at startup."""
        self.paths.prepare_filesystem()

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        engine = self.engine

        if engine.analysis_window < 1:
            errors.append(f"analysis_window must be >= 1, got {engine.analysis_window}")

        if not (1 <= engine.min_window_attempts <= engine.analysis_window):
            errors.append(
                f"min_window_attempts must be in [1, {engine.analysis_window}], "
                f"got {engine.min_window_attempts}"
            )

        if not (0 <= engine.retreat_accuracy < engine.advance_accuracy <= 1):
            errors.append(
                "Difficulty thresholds must satisfy 0 <= retreat_accuracy < advance_accuracy <= 1, "
                f"got {engine.retreat_accuracy} / {engine.advance_accuracy}"
            )

        if not (0 < engine.min_selection_weight <= 1):
            errors.append(
                f"min_selection_weight must be in (0, 1], got {engine.min_selection_weight}"
            )

        if not (0 <= engine.promotion_success_rate <= 1):
            errors.append(
                f"promotion_success_rate must be in [0, 1], got {engine.promotion_success_rate}"
            )

        if engine.promotion_min_attempts < 1:
            errors.append(
                f"promotion_min_attempts must be >= 1, got {engine.promotion_min_attempts}"
            )

        if engine.max_mastery_level < 1:
            errors.append(f"max_mastery_level must be >= 1, got {engine.max_mastery_level}")

        if engine.promotion_mode not in ("every_update", "crossing"):
            errors.append(f"Unknown promotion_mode: {engine.promotion_mode}")

        for schema in (self.paths.mastery_schema, self.paths.session_result_schema):
            if not schema.exists():
                errors.append(f"Schema not found: {schema}")

        return errors


# Global config instance
config = Config()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route loguru output to stderr at the configured level.

    Call once from the application entrypoint.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or config.logging.log_level),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
    )
