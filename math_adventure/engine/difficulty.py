"""
Difficulty ladder with a hysteresis band.

Difficulty climbs one step when the trailing window is accurate and the
learner is on a streak, drops one step when the window accuracy is poor,
and otherwise stays put. The dead zone between the two thresholds keeps
difficulty from flipping on every answer.
"""

from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from ..config import EngineConfig, config
from ..exceptions import ConfigError
from ..models.types import Attempt


class DifficultyLadder:
    """Ordered difficulty levels plus the climb/descend rule."""

    def __init__(self, levels: Sequence[str], engine_config: Optional[EngineConfig] = None):
        """
        Initialize ladder.

        Args:
            levels: Difficulty names, easiest first
            engine_config: Thresholds (defaults to global config)

        Raises:
            ConfigError: If levels is empty or contains duplicates
        """
        if not levels:
            raise ConfigError("Difficulty ladder needs at least one level")
        if len(set(levels)) != len(levels):
            raise ConfigError(f"Difficulty ladder has duplicate levels: {list(levels)}")

        self.levels = tuple(levels)
        self._config = engine_config or config.engine

    def __contains__(self, level: str) -> bool:
        return level in self.levels

    def __len__(self) -> int:
        return len(self.levels)

    @property
    def bottom(self) -> str:
        return self.levels[0]

    @property
    def top(self) -> str:
        return self.levels[-1]

    def index(self, level: str) -> int:
        """Position of a level on the ladder."""
        try:
            return self.levels.index(level)
        except ValueError:
            raise ConfigError(f"Unknown difficulty '{level}', expected one of {list(self.levels)}") from None

    def step_up(self, level: str) -> str:
        idx = self.index(level)
        return self.levels[min(idx + 1, len(self.levels) - 1)]

    def step_down(self, level: str) -> str:
        idx = self.index(level)
        return self.levels[max(idx - 1, 0)]

    def window_accuracy(self, history: Sequence[Attempt]) -> Optional[float]:
        """
        Accuracy over the trailing window.

        Returns:
            correct / total over the last analysis_window attempts, or None
            while fewer than min_window_attempts attempts exist
        """
        window = list(history)[-self._config.analysis_window:]
        if len(window) < self._config.min_window_attempts:
            return None
        return sum(1 for a in window if a.correct) / len(window)

    def adjust(
        self,
        history: Sequence[Attempt],
        current_streak: int,
        current_difficulty: str,
    ) -> str:
        """
        Decide the difficulty for the next problem.

        Args:
            history: Session attempts, oldest first (only the tail is used)
            current_streak: Consecutive correct answers so far
            current_difficulty: Level the session is at

        Returns:
            The same level, or one step up or down
        """
        self.index(current_difficulty)

        accuracy = self.window_accuracy(history)
        if accuracy is None:
            return current_difficulty

        if accuracy >= self._config.advance_accuracy and current_streak >= self._config.advance_streak:
            new_level = self.step_up(current_difficulty)
            if new_level != current_difficulty:
                logger.info(f"Difficulty increased to: {new_level} (window accuracy {accuracy:.2f})")
            return new_level

        if accuracy <= self._config.retreat_accuracy:
            new_level = self.step_down(current_difficulty)
            if new_level != current_difficulty:
                logger.info(f"Difficulty decreased to: {new_level} (window accuracy {accuracy:.2f})")
            return new_level

        return current_difficulty
