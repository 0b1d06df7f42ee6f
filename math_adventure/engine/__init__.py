"""Adaptive engine: difficulty ladder, weighted selector and the session controller."""

from .difficulty import DifficultyLadder
from .selector import WeightedSelector
from .session_controller import AdaptiveSessionEngine

__all__ = ["AdaptiveSessionEngine", "DifficultyLadder", "WeightedSelector"]
