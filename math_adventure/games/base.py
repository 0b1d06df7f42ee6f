"""
Problem generator plug-in contract and per-game configuration.

Each game domain supplies one ProblemGenerator. The engine never looks
inside a problem beyond its id, sub-type, correct answer and comparison
rule, so all domain content lives behind this interface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..exceptions import ConfigError
from ..models.types import Problem, RandomSource

DEFAULT_LADDER: Tuple[str, ...] = ("beginner", "easy", "medium", "hard", "expert")

# Advisory only, never enforced
DEFAULT_ANSWER_TIMES_MS: Dict[str, int] = {
    "beginner": 15000,
    "easy": 12000,
    "medium": 10000,
    "hard": 8000,
    "expert": 8000,
}
FALLBACK_ANSWER_TIME_MS = 12000


@dataclass(frozen=True)
class AgeGroup:
    """
    Age-appropriate limits for one game.

    Attributes:
        name: Display name
        sub_types: Sub-types this age group may be asked
        default_difficulty: Starting difficulty
        max_questions: Question limit for authenticated learners
        guest_max_questions: Question limit for guests
    """

    name: str
    sub_types: Tuple[str, ...]
    default_difficulty: str
    max_questions: int = 10
    guest_max_questions: int = 5


@dataclass(frozen=True)
class GameConfig:
    """
    Closed configuration for one game domain, validated at engine construction.

    Attributes:
        domain: Game id (e.g. "basic-arithmetic")
        name: Display name
        sub_types: Every sub-type the generator can build, in display order
        difficulty_sub_types: Sub-types unlocked at each difficulty
        age_groups: Age group key -> AgeGroup
        default_age_group: Age group used when none is given
        ladder: Difficulty levels, easiest first
        answer_times_ms: Advisory expected answer time per difficulty
    """

    domain: str
    name: str
    sub_types: Tuple[str, ...]
    difficulty_sub_types: Mapping[str, Tuple[str, ...]]
    age_groups: Mapping[str, AgeGroup]
    default_age_group: str
    ladder: Tuple[str, ...] = DEFAULT_LADDER
    answer_times_ms: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_ANSWER_TIMES_MS))

    def validate(self) -> None:
        """
        Check internal consistency.

        Raises:
            ConfigError: On the first inconsistency found
        """
        if not self.ladder:
            raise ConfigError(f"{self.domain}: difficulty ladder is empty")
        if not self.sub_types:
            raise ConfigError(f"{self.domain}: no sub-types declared")

        known = set(self.sub_types)
        for level in self.ladder:
            if level not in self.difficulty_sub_types:
                raise ConfigError(f"{self.domain}: difficulty '{level}' has no sub-type list")
        for level, unlocked in self.difficulty_sub_types.items():
            if level not in self.ladder:
                raise ConfigError(f"{self.domain}: difficulty '{level}' is not on the ladder")
            unknown = set(unlocked) - known
            if unknown:
                raise ConfigError(f"{self.domain}: unknown sub-types at '{level}': {sorted(unknown)}")

        if self.default_age_group not in self.age_groups:
            raise ConfigError(f"{self.domain}: default age group '{self.default_age_group}' not defined")
        for key, group in self.age_groups.items():
            unknown = set(group.sub_types) - known
            if unknown:
                raise ConfigError(f"{self.domain}: age group '{key}' has unknown sub-types {sorted(unknown)}")
            if group.default_difficulty not in self.ladder:
                raise ConfigError(
                    f"{self.domain}: age group '{key}' default difficulty "
                    f"'{group.default_difficulty}' is not on the ladder"
                )
            if group.max_questions <= 0 or group.guest_max_questions < 0:
                raise ConfigError(f"{self.domain}: age group '{key}' has invalid question limits")

    def age_group(self, key: Optional[str] = None) -> AgeGroup:
        key = key or self.default_age_group
        if key not in self.age_groups:
            raise ConfigError(
                f"{self.domain}: unknown age group '{key}', expected one of {sorted(self.age_groups)}"
            )
        return self.age_groups[key]

    def eligible_sub_types(self, age_group: str, difficulty: str) -> List[str]:
        """Sub-types allowed for the age group AND unlocked at the difficulty."""
        allowed = set(self.age_group(age_group).sub_types)
        unlocked = set(self.difficulty_sub_types.get(difficulty, ()))
        return [s for s in self.sub_types if s in allowed and s in unlocked]

    def expected_answer_time_ms(self, difficulty: str) -> int:
        return self.answer_times_ms.get(difficulty, FALLBACK_ANSWER_TIME_MS)


class ProblemGenerator(Protocol):
    """Domain plug-in: (difficulty, sub-type, rng) -> Problem."""

    game_config: GameConfig

    def generate(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        """Build a problem. Must draw randomness only from rng."""
        ...


# ==================== Helpers shared by generators ====================


def rand_int(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in [low, high] drawn from rng.random()."""
    if high < low:
        low, high = high, low
    return low + int(rng.random() * (high - low + 1)) if high > low else low


def choice(rng: RandomSource, items: Sequence[Any]) -> Any:
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[min(int(rng.random() * len(items)), len(items) - 1)]


def shuffled(rng: RandomSource, items: Sequence[Any]) -> List[Any]:
    """Fisher-Yates shuffle returning a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rand_int(rng, 0, i)
        result[i], result[j] = result[j], result[i]
    return result


def numeric_distractors(
    rng: RandomSource,
    correct: int,
    count: int = 3,
    spread: int = 3,
    allow_negative: bool = False,
) -> List[int]:
    """
    Near-miss wrong answers around an integer.

    Returns count distinct values different from correct, within +/- spread
    when possible (the spread widens if it cannot supply enough values).
    """
    distractors: List[int] = []
    span = max(1, spread)
    while len(distractors) < count:
        candidates = [
            correct + offset
            for offset in range(-span, span + 1)
            if offset != 0
            and (allow_negative or correct + offset >= 0)
            and correct + offset not in distractors
        ]
        if not candidates:
            span += 1
            continue
        distractors.append(choice(rng, candidates))
    return distractors
