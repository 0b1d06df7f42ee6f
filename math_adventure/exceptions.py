"""
Exception hierarchy for the adaptive session engine.

Wrong answers are never errors; they come back as regular Outcome values.
"""


class MathAdventureError(Exception):
    """Base class for all engine errors."""


class ConfigError(MathAdventureError, ValueError):
    """Invalid session or game configuration. The session is not created."""


class UnknownProblemError(MathAdventureError, KeyError):
    """An answer referenced a problem that is not pending in the current session."""

    def __init__(self, problem_id: str):
        self.problem_id = problem_id
        super().__init__(f"Problem {problem_id} is not pending in the current session")

    def __str__(self) -> str:
        return self.args[0]


class NoCandidatesError(MathAdventureError, ValueError):
    """No sub-type is eligible for the active age group and difficulty."""


class PersistenceUnavailable(MathAdventureError, RuntimeError):
    """Loading or saving mastery records or session results failed."""


class SessionStateError(MathAdventureError, RuntimeError):
    """Operation is not valid in the session's current state."""
