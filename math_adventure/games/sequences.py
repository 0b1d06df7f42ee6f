"""
Pattern Quest: counting, skip counting and number patterns.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..models.types import ComparisonRule, Problem, RandomSource
from .base import AgeGroup, GameConfig, choice, numeric_distractors, rand_int

PATTERN_TYPES = ("simple_counting", "skip_counting", "missing_number", "pattern_completion")

SEQUENCES_CONFIG = GameConfig(
    domain="number-sequences",
    name="Pattern Quest",
    sub_types=PATTERN_TYPES,
    difficulty_sub_types={
        "beginner": ("simple_counting",),
        "easy": ("simple_counting", "skip_counting"),
        "medium": ("simple_counting", "skip_counting", "missing_number"),
        "hard": PATTERN_TYPES,
        "expert": PATTERN_TYPES,
    },
    age_groups={
        "3-4": AgeGroup("Early Learners", ("simple_counting", "skip_counting"), "beginner", 10, 0),
        "4-5": AgeGroup(
            "Pre-K Explorers", ("simple_counting", "skip_counting", "missing_number"), "beginner", 15, 0
        ),
        "5-6": AgeGroup("Kindergarten Stars", PATTERN_TYPES, "easy", 20, 0),
        "6-7": AgeGroup("Advanced Learners", PATTERN_TYPES, "medium", 25, 0),
    },
    default_age_group="5-6",
    answer_times_ms={
        "beginner": 20000,
        "easy": 18000,
        "medium": 15000,
        "hard": 12000,
        "expert": 10000,
    },
)


# start range, step range, visible length
ARITHMETIC_PATTERNS: Dict[str, Tuple[Tuple[int, int], Tuple[int, int], int]] = {
    "beginner": ((1, 5), (1, 2), 5),
    "easy": ((1, 10), (1, 3), 6),
    "medium": ((1, 20), (2, 5), 7),
    "hard": ((1, 50), (3, 10), 8),
    "expert": ((1, 100), (5, 15), 10),
}

# start range, multiplier range, visible length
GEOMETRIC_PATTERNS: Dict[str, Tuple[Tuple[int, int], Tuple[int, int], int]] = {
    "beginner": ((1, 3), (2, 2), 4),
    "easy": ((1, 5), (2, 3), 5),
    "medium": ((1, 10), (2, 4), 6),
    "hard": ((1, 15), (2, 5), 7),
    "expert": ((1, 20), (3, 6), 8),
}

# seed range, visible length
GROWING_PATTERNS: Dict[str, Tuple[Tuple[int, int], int]] = {
    "beginner": ((1, 1), 5),
    "easy": ((1, 2), 6),
    "medium": ((2, 3), 7),
    "hard": ((1, 5), 8),
    "expert": ((3, 7), 9),
}

SKIP_STEPS: Dict[str, Tuple[int, ...]] = {
    "beginner": (2,),
    "easy": (2, 5),
    "medium": (2, 5, 10),
    "hard": (2, 3, 5, 10),
    "expert": (3, 4, 6, 7, 25),
}


class SequenceGenerator:
    """Builds sequences with one blank the learner fills in."""

    game_config = SEQUENCES_CONFIG

    def generate(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        if sub_type == "simple_counting":
            sequence, rule = self._counting(difficulty, rng)
            blank = len(sequence) - 1
        elif sub_type == "skip_counting":
            sequence, rule = self._skip_counting(difficulty, rng)
            blank = len(sequence) - 1
        elif sub_type == "missing_number":
            sequence, rule = self._arithmetic(difficulty, rng)
            blank = rand_int(rng, 1, len(sequence) - 2)
        elif sub_type == "pattern_completion":
            sequence, rule = self._pattern(difficulty, rng)
            blank = len(sequence) - 1
        else:
            raise ValueError(f"Unsupported sequence sub-type: {sub_type}")

        answer = sequence[blank]
        shown: List[Optional[int]] = list(sequence)
        shown[blank] = None

        return Problem(
            sub_type=sub_type,
            difficulty=difficulty,
            display_data={"sequence": shown, "blank_index": blank, "rule": rule},
            correct_answer=answer,
            distractors=numeric_distractors(rng, answer, spread=max(3, abs(sequence[1] - sequence[0]))),
            comparison_rule=ComparisonRule.exact(),
            expected_answer_time_ms=self.game_config.expected_answer_time_ms(difficulty),
            hints=[f"Look at how each number changes: {rule}", "Say the numbers out loud"],
        )

    def _counting(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        (low, high), _, length = ARITHMETIC_PATTERNS[difficulty]
        start = rand_int(rng, low, high)
        # Counting backwards unlocks at hard
        if difficulty in ("hard", "expert") and rng.random() < 0.5:
            start += length
            return [start - i for i in range(length)], "count down by 1"
        return [start + i for i in range(length)], "count up by 1"

    def _skip_counting(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        step = choice(rng, SKIP_STEPS[difficulty])
        length = ARITHMETIC_PATTERNS[difficulty][2]
        start = step * rand_int(rng, 0, 3)
        return [start + step * i for i in range(length)], f"count by {step}s"

    def _arithmetic(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        (low, high), (step_low, step_high), length = ARITHMETIC_PATTERNS[difficulty]
        start = rand_int(rng, low, high)
        step = rand_int(rng, step_low, step_high)
        return [start + step * i for i in range(length)], f"add {step}"

    def _geometric(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        (low, high), (m_low, m_high), length = GEOMETRIC_PATTERNS[difficulty]
        start = rand_int(rng, low, high)
        multiplier = rand_int(rng, m_low, m_high)
        return [start * multiplier ** i for i in range(length)], f"multiply by {multiplier}"

    def _growing(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        (low, high), length = GROWING_PATTERNS[difficulty]
        a = rand_int(rng, low, high)
        b = rand_int(rng, a, high)
        sequence = [a, b]
        while len(sequence) < length:
            sequence.append(sequence[-1] + sequence[-2])
        return sequence, "add the two numbers before"

    def _pattern(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], str]:
        builders = [self._arithmetic, self._geometric]
        if difficulty in ("hard", "expert"):
            builders.append(self._growing)
        return choice(rng, builders)(difficulty, rng)
