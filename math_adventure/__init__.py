"""
Math Adventure: adaptive learning games for young children.

One generic AdaptiveSessionEngine drives four game domains (arithmetic,
number sequences, clock reading, money) through ProblemGenerator plug-ins.
"""

from .config import config, configure_logging
from .engine import AdaptiveSessionEngine, DifficultyLadder, WeightedSelector
from .events import EventChannel, GameEvent
from .exceptions import (
    ConfigError,
    MathAdventureError,
    NoCandidatesError,
    PersistenceUnavailable,
    SessionStateError,
    UnknownProblemError,
)
from .feedback import FeedbackContext, TemplateFeedbackComposer
from .games import get_generator
from .models import MasteryTracker, Outcome, Problem, SessionConfig, SessionResult, SessionState
from .utils import JsonFilePersistence

__version__ = "0.1.0"

__all__ = [
    "AdaptiveSessionEngine",
    "ConfigError",
    "DifficultyLadder",
    "EventChannel",
    "FeedbackContext",
    "GameEvent",
    "JsonFilePersistence",
    "MasteryTracker",
    "MathAdventureError",
    "NoCandidatesError",
    "Outcome",
    "PersistenceUnavailable",
    "Problem",
    "SessionConfig",
    "SessionResult",
    "SessionState",
    "SessionStateError",
    "TemplateFeedbackComposer",
    "UnknownProblemError",
    "WeightedSelector",
    "config",
    "configure_logging",
    "get_generator",
]
