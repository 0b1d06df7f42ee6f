"""
Data models for the adaptive session engine.

This module contains core data models:
- Problem, Attempt, Outcome, SessionResult: values crossing the UI boundary
- ComparisonRule: how an answer is graded
- SkillMastery / MasteryTracker: per-skill counters and promotion
- Session / SessionConfig / SessionState: the active game session
"""

from .mastery import MasteryTracker, SkillMastery
from .session import Session, SessionConfig, SessionState
from .types import (
    Attempt,
    ComparisonKind,
    ComparisonRule,
    Outcome,
    Problem,
    RandomSource,
    SessionResult,
)

__all__ = [
    "Attempt",
    "ComparisonKind",
    "ComparisonRule",
    "MasteryTracker",
    "Outcome",
    "Problem",
    "RandomSource",
    "Session",
    "SessionConfig",
    "SessionResult",
    "SessionState",
    "SkillMastery",
]
