"""
Game session state.

A Session lives from start() until its SessionResult is returned and is
mutated only by the engine. It is never persisted mid-session.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .types import Attempt, Problem, utc_now


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    ANSWER_PROCESSED = "answer_processed"
    COMPLETE = "complete"

    @property
    def in_progress(self) -> bool:
        return self in (SessionState.AWAITING_ANSWER, SessionState.ANSWER_PROCESSED)


@dataclass(frozen=True)
class SessionConfig:
    """
    Options for starting a session.

    Attributes:
        max_questions: Answers to collect before the session completes (> 0)
        initial_difficulty: Starting ladder level (domain default if None)
        focus_sub_type: Ask only this sub-type instead of weighted selection
    """

    max_questions: int
    initial_difficulty: Optional[str] = None
    focus_sub_type: Optional[str] = None


@dataclass
class Session:
    """Mutable state of the active session."""

    max_questions: int
    current_difficulty: str
    focus_sub_type: Optional[str] = None
    session_id: str = field(default_factory=lambda: f"gs-{uuid.uuid4()}")
    started_at: str = field(default_factory=utc_now)
    started_monotonic: float = field(default_factory=time.monotonic)
    state: SessionState = SessionState.IDLE

    questions_asked: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    history: List[Attempt] = field(default_factory=list)
    pending: Dict[str, Problem] = field(default_factory=dict)
    difficulty_progression: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.difficulty_progression:
            self.difficulty_progression.append(self.current_difficulty)

    @property
    def is_complete(self) -> bool:
        return self.questions_asked >= self.max_questions

    @property
    def accuracy(self) -> float:
        if self.questions_asked == 0:
            return 0.0
        return self.correct_count / self.questions_asked

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_monotonic) * 1000)

    def record(self, attempt: Attempt) -> None:
        """Append an attempt and update counters and streaks."""
        self.history.append(attempt)
        self.questions_asked += 1
        if attempt.correct:
            self.correct_count += 1
            self.current_streak += 1
            self.longest_streak = max(self.longest_streak, self.current_streak)
        else:
            self.incorrect_count += 1
            self.current_streak = 0

    def set_difficulty(self, difficulty: str) -> None:
        if difficulty != self.current_difficulty:
            self.current_difficulty = difficulty
            self.difficulty_progression.append(difficulty)
