"""
Adaptive session engine.

One generic controller drives every game domain. It owns the Session,
asks the WeightedSelector which sub-type to practise, delegates problem
construction to the domain's ProblemGenerator, grades answers, updates
mastery and moves difficulty along the ladder.

Session lifecycle:
    IDLE -> AWAITING_ANSWER <-> ANSWER_PROCESSED -> COMPLETE

Usage:
    engine = AdaptiveSessionEngine(ArithmeticGenerator(), user_id="kid-1",
                                   persistence=JsonFilePersistence())
    await engine.init()
    problem = engine.start(SessionConfig(max_questions=10))
    outcome = engine.submit_answer(problem.id, "7", time_taken_ms=4200)
    nxt = engine.next_problem()   # Problem, or SessionResult once complete
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from ..config import EngineConfig, config
from ..events import EventChannel, GameEvent
from ..exceptions import (
    ConfigError,
    PersistenceUnavailable,
    SessionStateError,
    UnknownProblemError,
)
from ..feedback import FeedbackComposer, FeedbackContext, TemplateFeedbackComposer
from ..games.base import ProblemGenerator
from ..models.mastery import MasteryTracker, SkillMastery
from ..models.session import Session, SessionConfig, SessionState
from ..models.types import Attempt, Outcome, Problem, RandomSource, SessionResult, utc_now
from ..utils.persistence import MasteryStore
from ..utils.progress import generate_recommendations
from .difficulty import DifficultyLadder
from .selector import WeightedSelector

DEFAULT_GUEST_MAX_QUESTIONS = 5


class AdaptiveSessionEngine:
    """
    Orchestrates start, next-problem, submit-answer and end for one learner.

    At most one problem is pending at a time. Asking for a new problem
    while one is pending replaces it; the skipped problem is not graded.
    """

    def __init__(
        self,
        generator: ProblemGenerator,
        *,
        user_id: Optional[str] = None,
        age_group: Optional[str] = None,
        persistence: Optional[MasteryStore] = None,
        feedback: Optional[FeedbackComposer] = None,
        events: Optional[EventChannel] = None,
        rng: Optional[RandomSource] = None,
        engine_config: Optional[EngineConfig] = None,
        authenticated: bool = True,
    ):
        """
        Initialize engine for one domain and one learner.

        Args:
            generator: Domain plug-in building problems
            user_id: Learner id used for persistence (no persistence if None)
            age_group: Age group key (domain default if None)
            persistence: Mastery and session-result store
            feedback: Phrase composer (template composer if None)
            events: Caller-owned event channel (private channel if None)
            rng: Random source shared by selector and generator
            engine_config: Thresholds (defaults to global config)
            authenticated: Chooses between guest and learner question limits

        Raises:
            ConfigError: If the domain configuration is inconsistent
        """
        self.generator = generator
        self.game_config = generator.game_config
        self.game_config.validate()

        self._config = engine_config or config.engine
        self.user_id = user_id
        self.age_group_key = age_group or self.game_config.default_age_group
        self.age_group = self.game_config.age_group(self.age_group_key)
        self.authenticated = authenticated

        self.persistence = persistence
        self.feedback = feedback or TemplateFeedbackComposer()
        self.events = events or EventChannel()
        self.rng = rng if rng is not None else random.Random(self._config.random_seed)

        self.ladder = DifficultyLadder(self.game_config.ladder, self._config)
        self.selector = WeightedSelector(self.rng, self._config)
        self.mastery = MasteryTracker(self.game_config.sub_types, engine_config=self._config)

        self._session: Optional[Session] = None
        self._result: Optional[SessionResult] = None
        self.unsaved_results: List[SessionResult] = []
        self._mastery_dirty = False

    # ==================== Properties ====================

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state if self._session else SessionState.IDLE

    @property
    def domain(self) -> str:
        return self.game_config.domain

    def default_max_questions(self, authenticated: Optional[bool] = None) -> int:
        """
        Question limit for the active age group.

        Guests get the age group's guest limit, or 5 when the domain does
        not define one.
        """
        if authenticated is None:
            authenticated = self.authenticated
        if authenticated:
            return self.age_group.max_questions
        return self.age_group.guest_max_questions or DEFAULT_GUEST_MAX_QUESTIONS

    # ==================== Lifecycle ====================

    async def init(self) -> bool:
        """
        Load persisted mastery for the configured learner.

        Returns:
            True if saved records were loaded (or there is nothing to load),
            False if loading failed and defaults are in use
        """
        if self.persistence is None or self.user_id is None:
            return True

        try:
            records = await asyncio.to_thread(self.persistence.load_mastery, self.user_id)
        except PersistenceUnavailable as e:
            logger.warning(f"Mastery load failed for {self.user_id}, using defaults: {e}")
            return False

        self.mastery.merge(records)
        logger.info(f"Loaded mastery for {self.user_id}: {len(records)} skill(s)")
        return True

    def start(self, session_config: Optional[SessionConfig] = None) -> Problem:
        """
        Begin a fresh session and return its first problem.

        Any session in progress is abandoned without a result.

        Args:
            session_config: Question limit, starting difficulty, focus sub-type
                (age-group defaults if None)

        Returns:
            The first problem

        Raises:
            ConfigError: If max_questions <= 0, the difficulty is not on the
                ladder, or the focus sub-type is unknown
        """
        if session_config is None:
            session_config = SessionConfig(max_questions=self.default_max_questions())

        max_questions = session_config.max_questions
        if isinstance(max_questions, bool) or not isinstance(max_questions, int) or max_questions <= 0:
            raise ConfigError(f"max_questions must be a positive integer, got {max_questions!r}")

        difficulty = session_config.initial_difficulty or self.age_group.default_difficulty
        if difficulty not in self.ladder:
            raise ConfigError(
                f"Unknown difficulty '{difficulty}', expected one of {list(self.ladder.levels)}"
            )

        focus = session_config.focus_sub_type
        if focus is not None and focus not in self.game_config.sub_types:
            raise ConfigError(
                f"Unknown focus sub-type '{focus}', expected one of {list(self.game_config.sub_types)}"
            )

        if self._session is not None and self._session.state.in_progress:
            logger.info(f"Abandoning session {self._session.session_id} for a fresh start")

        self._session = Session(
            max_questions=max_questions,
            current_difficulty=difficulty,
            focus_sub_type=focus,
        )
        self._result = None
        logger.info(
            f"Started {self.domain} session {self._session.session_id} "
            f"({max_questions} questions, difficulty {difficulty})"
        )
        self.events.emit(
            GameEvent.SESSION_STARTED,
            {
                "session_id": self._session.session_id,
                "domain": self.domain,
                "max_questions": max_questions,
                "difficulty": difficulty,
                "focus_sub_type": focus,
            },
        )

        return self._next_problem()

    def next_problem(self) -> Union[Problem, SessionResult]:
        """
        Produce the next problem, or end the session once enough answers were given.

        Returns:
            A Problem, or the SessionResult when questions_asked >= max_questions

        Raises:
            SessionStateError: If no session was started or it already completed
        """
        session = self._require_session("next_problem")
        if session.state is SessionState.COMPLETE:
            raise SessionStateError("Session is complete; call start() for a new one")
        return self._next_problem()

    def submit_answer(
        self,
        problem_id: str,
        answer: Any,
        time_taken_ms: int,
        strict: bool = False,
    ) -> Outcome:
        """
        Grade an answer for a pending problem.

        Args:
            problem_id: Id of the problem being answered
            answer: Learner's answer as received from the UI
            time_taken_ms: Time the learner took (advisory only)
            strict: Raise UnknownProblemError instead of returning a failure Outcome

        Returns:
            Outcome describing correctness, new difficulty and feedback

        Raises:
            SessionStateError: If no session was started
            UnknownProblemError: If strict and the problem is not pending
            ValueError: If time_taken_ms is negative
        """
        session = self._require_session("submit_answer")

        problem = session.pending.get(problem_id)
        if problem is None:
            logger.warning(f"Answer for unknown or already answered problem {problem_id}")
            if strict:
                raise UnknownProblemError(problem_id)
            return Outcome.failure(problem_id, f"Problem {problem_id} is not pending")

        if time_taken_ms < 0:
            raise ValueError(f"time_taken_ms must be >= 0, got {time_taken_ms}")

        del session.pending[problem_id]
        correct = problem.check(answer)

        session.record(
            Attempt(
                sub_type=problem.sub_type,
                difficulty_at_time=session.current_difficulty,
                correct=correct,
                time_taken_ms=int(time_taken_ms),
            )
        )
        self.mastery.update(problem.sub_type, correct)
        self._mastery_dirty = True

        new_difficulty = self.ladder.adjust(
            session.history, session.current_streak, session.current_difficulty
        )
        session.set_difficulty(new_difficulty)
        session.state = SessionState.ANSWER_PROCESSED

        outcome = self._build_outcome(problem, answer, correct, time_taken_ms)
        logger.debug(
            f"Answer for {problem.sub_type} {'correct' if correct else 'incorrect'} "
            f"({session.questions_asked}/{session.max_questions})"
        )
        self.events.emit(
            GameEvent.ANSWER_SUBMITTED,
            {
                "session_id": session.session_id,
                "problem_id": problem_id,
                "sub_type": problem.sub_type,
                "correct": correct,
                "streak": session.current_streak,
                "difficulty": session.current_difficulty,
                "time_taken_ms": int(time_taken_ms),
            },
        )
        return outcome

    def end(self) -> SessionResult:
        """
        Terminate the session and return its result.

        Mastery and the result are saved best-effort; failures keep the
        result in unsaved_results for retry_pending_saves().

        Raises:
            SessionStateError: If no session was started
        """
        session = self._require_session("end")
        if session.state is SessionState.COMPLETE and self._result is not None:
            return self._result

        session.pending.clear()
        session.state = SessionState.COMPLETE

        records = self.mastery.snapshot()
        accuracy = session.accuracy
        message = self.feedback.compose(
            FeedbackContext(
                outcome="session_complete",
                streak=session.longest_streak,
                sub_type="",
                difficulty=session.current_difficulty,
                domain=self.domain,
                accuracy=accuracy,
            )
        )

        result = SessionResult(
            session_id=session.session_id,
            domain=self.domain,
            questions_answered=session.questions_asked,
            correct_answers=session.correct_count,
            accuracy=accuracy,
            longest_streak=session.longest_streak,
            final_difficulty=session.current_difficulty,
            elapsed_ms=session.elapsed_ms(),
            mastery={key: record.to_dict() for key, record in records.items()},
            difficulty_progression=list(session.difficulty_progression),
            recommendations=generate_recommendations(records, accuracy),
            message=message,
            started_at=session.started_at,
            completed_at=utc_now(),
            user_id=self.user_id,
        )
        self._result = result

        logger.info(
            f"Session {session.session_id} complete: {session.correct_count}/{session.questions_asked} "
            f"correct, final difficulty {session.current_difficulty}"
        )
        self._persist(result, records)
        self.events.emit(GameEvent.SESSION_ENDED, result.to_dict())
        return result

    def retry_pending_saves(self) -> int:
        """
        Retry saving results (and mastery) that previously failed.

        Returns:
            Number of results still unsaved
        """
        if not self.unsaved_results:
            return 0
        pending, self.unsaved_results = self.unsaved_results, []
        for result in pending:
            self._persist(result, self.mastery.snapshot())
        return len(self.unsaved_results)

    # ==================== Internals ====================

    def _require_session(self, operation: str) -> Session:
        if self._session is None or self._session.state is SessionState.IDLE:
            raise SessionStateError(f"{operation}() called before start()")
        return self._session

    def _next_problem(self) -> Union[Problem, SessionResult]:
        session = self._session
        if session.is_complete:
            return self.end()

        if session.pending:
            skipped = ", ".join(session.pending)
            logger.debug(f"Replacing unanswered problem {skipped}")
            session.pending.clear()

        difficulty = session.current_difficulty
        if session.focus_sub_type:
            sub_type = session.focus_sub_type
        else:
            candidates = self.game_config.eligible_sub_types(self.age_group_key, difficulty)
            sub_type = self.selector.select(candidates, self.mastery.get)

        problem = self.generator.generate(difficulty, sub_type, self.rng)
        session.pending[problem.id] = problem
        session.state = SessionState.AWAITING_ANSWER

        self.events.emit(
            GameEvent.PROBLEM_GENERATED,
            {
                "session_id": session.session_id,
                "problem_id": problem.id,
                "sub_type": sub_type,
                "difficulty": difficulty,
            },
        )
        return problem

    def _support_level(self) -> str:
        recent = self._session.history[-3:]
        recent_errors = sum(1 for attempt in recent if not attempt.correct)
        return "high" if recent_errors >= 2 else "standard"

    def _build_outcome(self, problem: Problem, answer: Any, correct: bool, time_taken_ms: int) -> Outcome:
        session = self._session

        expected = problem.expected_answer_time_ms
        was_quick = bool(expected) and time_taken_ms < expected * self._config.quick_answer_ratio
        was_slow = bool(expected) and time_taken_ms > expected * self._config.slow_answer_ratio

        if correct:
            streak = session.current_streak
            celebration = "amazing" if streak >= 5 else "great" if streak >= 3 else "good"
            next_action = "continue"
        else:
            celebration = None
            if session.incorrect_count < self._config.retry_incorrect_limit:
                next_action = "retry"
            else:
                next_action = "continue"

        message = self.feedback.compose(
            FeedbackContext(
                outcome="correct" if correct else "incorrect",
                streak=session.current_streak,
                sub_type=problem.sub_type,
                difficulty=session.current_difficulty,
                domain=self.domain,
                correct_answer=problem.correct_answer,
                was_quick=was_quick,
                support_level=self._support_level(),
            )
        )

        return Outcome(
            problem_id=problem.id,
            correct=correct,
            correct_answer=problem.correct_answer,
            new_difficulty=session.current_difficulty,
            session_complete=session.is_complete,
            user_answer=answer,
            streak=session.current_streak,
            message=message,
            celebration=celebration,
            next_action=next_action,
            was_quick=was_quick,
            was_slow=was_slow,
        )

    def _persist(self, result: SessionResult, records: Dict[str, SkillMastery]) -> None:
        if self.persistence is None:
            return

        try:
            if self.user_id is not None and self._mastery_dirty:
                self.persistence.save_mastery(self.user_id, records)
                self._mastery_dirty = False
            self.persistence.save_session_result(result)
        except PersistenceUnavailable as e:
            logger.error(f"Could not save session {result.session_id}, keeping it in memory: {e}")
            self.unsaved_results.append(result)
