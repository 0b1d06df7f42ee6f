"""
Feedback phrasing.

The engine asks a FeedbackComposer for a phrase after every answer and at
session end. Composers are pure: the same context always yields the same
phrase. TemplateFeedbackComposer is a small built-in default; applications
plug in their own phrase corpus through the same interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Protocol, Tuple

FeedbackEvent = Literal["correct", "incorrect", "session_complete"]


@dataclass(frozen=True)
class FeedbackContext:
    """
    Everything a composer may look at.

    Attributes:
        outcome: Which moment the phrase is for
        streak: Current streak (longest streak for session_complete)
        sub_type: Question sub-type ("" at session end)
        difficulty: Current difficulty
        domain: Game domain id
        correct_answer: Expected answer, for incorrect answers
        was_quick: Answered well under the expected time
        support_level: "high" after repeated recent mistakes, else "standard"
        accuracy: Session accuracy, for session_complete
    """

    outcome: FeedbackEvent
    streak: int
    sub_type: str
    difficulty: str
    domain: str
    correct_answer: Any = None
    was_quick: bool = False
    support_level: str = "standard"
    accuracy: Optional[float] = None


class FeedbackComposer(Protocol):
    def compose(self, context: FeedbackContext) -> str:
        ...


DEFAULT_PHRASES: Dict[str, Tuple[str, ...]] = {
    "correct": ("Great job!", "You got it!", "Well done!", "Super!"),
    "correct_streak": ("You're on fire!", "Amazing streak!", "Unstoppable!"),
    "correct_quick": ("Lightning fast!", "Wow, that was quick!"),
    "incorrect": ("Nice try! The answer is {answer}.", "Almost! It was {answer}."),
    "incorrect_support": (
        "That's okay, let's look at it together. The answer is {answer}.",
        "Learning takes practice. The answer is {answer}.",
    ),
    "session_great": ("Fantastic session!", "You're a superstar!"),
    "session_good": ("Good work today!", "Nice practice session!"),
    "session_keep_going": ("Keep practicing, you're getting better!", "Every try helps you learn!"),
}


class TemplateFeedbackComposer:
    """Picks a phrase from a small template table."""

    def __init__(self, phrases: Optional[Dict[str, Tuple[str, ...]]] = None):
        self.phrases = phrases or DEFAULT_PHRASES

    def _pick(self, key: str, seed: int, **fmt: Any) -> str:
        options = self.phrases[key]
        return options[seed % len(options)].format(**fmt)

    def compose(self, context: FeedbackContext) -> str:
        if context.outcome == "correct":
            if context.streak >= 3:
                return self._pick("correct_streak", context.streak)
            if context.was_quick:
                return self._pick("correct_quick", context.streak)
            return self._pick("correct", context.streak)

        if context.outcome == "incorrect":
            key = "incorrect_support" if context.support_level == "high" else "incorrect"
            return self._pick(key, len(context.sub_type), answer=context.correct_answer)

        accuracy = context.accuracy or 0.0
        if accuracy >= 0.8:
            return self._pick("session_great", context.streak)
        if accuracy >= 0.6:
            return self._pick("session_good", context.streak)
        return self._pick("session_keep_going", context.streak)
