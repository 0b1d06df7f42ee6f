"""
Shared value types for the adaptive session engine.

Problems, attempts, outcomes and session results crossing the UI boundary,
plus the comparison rules a domain attaches to each problem.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol


class RandomSource(Protocol):
    """Anything with random() -> float in [0, 1). random.Random qualifies."""

    def random(self) -> float:
        ...


def utc_now() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


def new_problem_id() -> str:
    return f"prob-{uuid.uuid4()}"


class ComparisonKind(str, Enum):
    EXACT = "exact"
    NUMERIC_TOLERANCE = "numeric_tolerance"
    CASE_INSENSITIVE = "case_insensitive"
    INDEX = "index"


@dataclass(frozen=True)
class ComparisonRule:
    """
    How a learner's answer is matched against the correct answer.

    Attributes:
        kind: Comparison variant
        tolerance: Absolute tolerance, only used by NUMERIC_TOLERANCE
    """

    kind: ComparisonKind = ComparisonKind.EXACT
    tolerance: float = 0.0

    @classmethod
    def exact(cls) -> ComparisonRule:
        return cls(ComparisonKind.EXACT)

    @classmethod
    def numeric(cls, tolerance: float = 0.01) -> ComparisonRule:
        if tolerance <= 0:
            raise ValueError(f"Tolerance must be > 0, got {tolerance}")
        return cls(ComparisonKind.NUMERIC_TOLERANCE, tolerance)

    @classmethod
    def case_insensitive(cls) -> ComparisonRule:
        return cls(ComparisonKind.CASE_INSENSITIVE)

    @classmethod
    def index(cls) -> ComparisonRule:
        return cls(ComparisonKind.INDEX)

    def matches(self, answer: Any, correct: Any) -> bool:
        """
        Check an answer against the correct value.

        Answers typed by the learner usually arrive as strings, so numeric
        rules parse them first. Unparseable answers are simply wrong.

        Args:
            answer: Learner's answer as received from the UI
            correct: Correct answer stored on the problem

        Returns:
            True if the answer is accepted
        """
        if answer is None:
            return False

        if self.kind is ComparisonKind.NUMERIC_TOLERANCE:
            value = _to_float(answer)
            if value is None:
                return False
            # Round off float noise before the strict comparison
            return round(abs(value - float(correct)), 9) < self.tolerance

        if self.kind is ComparisonKind.CASE_INSENSITIVE:
            return str(answer).strip().lower() == str(correct).strip().lower()

        if self.kind is ComparisonKind.INDEX:
            try:
                return int(str(answer).strip()) == int(correct)
            except ValueError:
                return False

        # EXACT
        if answer == correct:
            return True
        if isinstance(correct, (int, float)) and not isinstance(correct, bool) and isinstance(answer, str):
            value = _to_float(answer)
            return value is not None and value == correct
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "tolerance": self.tolerance}


def _to_float(value: Any) -> Optional[float]:
    try:
        result = float(str(value).strip().lstrip("$"))
    except ValueError:
        return None
    return result if math.isfinite(result) else None


@dataclass
class Problem:
    """
    A concrete question handed to the UI.

    The engine only relies on id, sub_type, correct_answer and
    comparison_rule; display_data is opaque domain payload.

    Attributes:
        id: Problem identifier (prob-<uuid4>)
        sub_type: Question sub-type within the domain
        difficulty: Difficulty level the problem was built at
        display_data: Domain-specific rendering payload
        correct_answer: Expected answer
        distractors: Wrong options for multiple choice presentations
        comparison_rule: Rule used to grade the answer
        expected_answer_time_ms: Advisory answer time, never enforced
        hints: Progressive hints, easiest first
        created_at: ISO 8601 creation time
    """

    sub_type: str
    difficulty: str
    display_data: Dict[str, Any]
    correct_answer: Any
    distractors: List[Any] = field(default_factory=list)
    comparison_rule: ComparisonRule = field(default_factory=ComparisonRule.exact)
    expected_answer_time_ms: Optional[int] = None
    hints: List[str] = field(default_factory=list)
    id: str = field(default_factory=new_problem_id)
    created_at: str = field(default_factory=utc_now)

    def check(self, answer: Any) -> bool:
        """Grade an answer with this problem's comparison rule."""
        return self.comparison_rule.matches(answer, self.correct_answer)

    @property
    def options(self) -> List[Any]:
        """Correct answer followed by distractors (UI shuffles)."""
        return [self.correct_answer, *self.distractors]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "sub_type": self.sub_type,
            "difficulty": self.difficulty,
            "display_data": self.display_data,
            "correct_answer": self.correct_answer,
            "distractors": list(self.distractors),
            "comparison_rule": self.comparison_rule.to_dict(),
            "expected_answer_time_ms": self.expected_answer_time_ms,
            "hints": list(self.hints),
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Attempt:
    """One graded answer. Immutable once appended to the session history."""

    sub_type: str
    difficulty_at_time: str
    correct: bool
    time_taken_ms: int
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sub_type": self.sub_type,
            "difficulty_at_time": self.difficulty_at_time,
            "correct": self.correct,
            "time_taken_ms": self.time_taken_ms,
            "timestamp": self.timestamp,
        }


@dataclass
class Outcome:
    """
    Result of submitting an answer.

    A failed lookup (unknown or already answered problem) produces an Outcome
    with correct=None and error set; no session state changes in that case.

    Attributes:
        problem_id: Problem the answer was for
        correct: Whether the answer was accepted (None on failure)
        correct_answer: Expected answer
        new_difficulty: Difficulty after adjustment
        session_complete: True once max_questions answers were recorded
        user_answer: Answer as received
        streak: Current streak after this answer
        message: Feedback phrase
        celebration: "good" / "great" / "amazing" for correct answers
        next_action: "continue" or "retry"
        was_quick: Answered faster than 0.8x expected time
        was_slow: Answered slower than 1.5x expected time
        error: Failure description, if any
    """

    problem_id: str
    correct: Optional[bool]
    correct_answer: Any = None
    new_difficulty: Optional[str] = None
    session_complete: bool = False
    user_answer: Any = None
    streak: int = 0
    message: Optional[str] = None
    celebration: Optional[str] = None
    next_action: str = "continue"
    was_quick: bool = False
    was_slow: bool = False
    error: Optional[str] = None

    @classmethod
    def failure(cls, problem_id: str, error: str) -> Outcome:
        return cls(problem_id=problem_id, correct=None, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "problem_id": self.problem_id,
            "correct": self.correct,
            "correct_answer": self.correct_answer,
            "new_difficulty": self.new_difficulty,
            "session_complete": self.session_complete,
            "user_answer": self.user_answer,
            "streak": self.streak,
            "message": self.message,
            "celebration": self.celebration,
            "next_action": self.next_action,
            "was_quick": self.was_quick,
            "was_slow": self.was_slow,
            "error": self.error,
        }


@dataclass
class SessionResult:
    """
    Terminal summary emitted when a session completes.

    Attributes:
        session_id: Session identifier (gs-<uuid4>)
        domain: Game domain id
        questions_answered: Number of graded answers
        correct_answers: Number of correct answers
        accuracy: correct_answers / questions_answered (0.0 if none)
        longest_streak: Longest run of correct answers
        final_difficulty: Difficulty at session end
        elapsed_ms: Wall time from start to end
        mastery: Snapshot of all skill records {skill_key: record dict}
        difficulty_progression: Difficulty after each change, starting level first
        recommendations: Practice suggestions
        message: Closing feedback phrase
        started_at: ISO 8601 start time
        completed_at: ISO 8601 completion time
        user_id: Learner the session belongs to
    """

    session_id: str
    domain: str
    questions_answered: int
    correct_answers: int
    accuracy: float
    longest_streak: int
    final_difficulty: str
    elapsed_ms: int
    mastery: Dict[str, Dict[str, Any]]
    difficulty_progression: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    message: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: str = field(default_factory=utc_now)
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence."""
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "domain": self.domain,
            "questions_answered": self.questions_answered,
            "correct_answers": self.correct_answers,
            "accuracy": self.accuracy,
            "longest_streak": self.longest_streak,
            "final_difficulty": self.final_difficulty,
            "elapsed_ms": self.elapsed_ms,
            "mastery": self.mastery,
            "difficulty_progression": list(self.difficulty_progression),
            "recommendations": list(self.recommendations),
            "message": self.message,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }
