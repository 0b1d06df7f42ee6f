"""
Number Magic: addition, subtraction, multiplication and division.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..models.types import ComparisonRule, Problem, RandomSource
from .base import AgeGroup, GameConfig, numeric_distractors, rand_int

OPERATIONS = ("addition", "subtraction", "multiplication", "division")

SYMBOLS = {
    "addition": "+",
    "subtraction": "−",
    "multiplication": "×",
    "division": "÷",
}

ARITHMETIC_CONFIG = GameConfig(
    domain="basic-arithmetic",
    name="Number Magic",
    sub_types=OPERATIONS,
    difficulty_sub_types={
        "beginner": ("addition",),
        "easy": ("addition", "subtraction"),
        "medium": ("addition", "subtraction", "multiplication"),
        "hard": OPERATIONS,
        "expert": OPERATIONS,
    },
    age_groups={
        "3-4": AgeGroup("Early Learners", ("addition", "subtraction"), "beginner", 10, 5),
        "4-5": AgeGroup("Pre-K Explorers", ("addition", "subtraction"), "beginner", 15, 5),
        "5-6": AgeGroup(
            "Kindergarten Stars", ("addition", "subtraction", "multiplication"), "easy", 20, 10
        ),
        "6-7": AgeGroup("Advanced Learners", OPERATIONS, "medium", 25, 10),
    },
    default_age_group="5-6",
)

# (low, high, operand count)
ADDITION_RANGES: Dict[str, Tuple[int, int, int]] = {
    "beginner": (1, 5, 2),
    "easy": (1, 10, 2),
    "medium": (1, 20, 2),
    "hard": (1, 50, 3),
    "expert": (1, 100, 3),
}

# (low, high, keep result non-negative)
SUBTRACTION_RANGES: Dict[str, Tuple[int, int, bool]] = {
    "beginner": (1, 5, True),
    "easy": (1, 10, True),
    "medium": (1, 20, True),
    "hard": (1, 50, False),
    "expert": (1, 100, False),
}

# (first factor range, second factor range)
MULTIPLICATION_RANGES: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "beginner": ((1, 3), (1, 5)),
    "easy": ((1, 5), (1, 10)),
    "medium": ((1, 10), (1, 10)),
    "hard": ((1, 12), (1, 12)),
    "expert": ((1, 15), (1, 15)),
}

# (max dividend, divisor range)
DIVISION_RANGES: Dict[str, Tuple[int, Tuple[int, int]]] = {
    "beginner": (10, (2, 5)),
    "easy": (20, (2, 5)),
    "medium": (50, (2, 10)),
    "hard": (100, (2, 12)),
    "expert": (200, (2, 15)),
}


class ArithmeticGenerator:
    """Builds the four basic operations with whole-number answers."""

    game_config = ARITHMETIC_CONFIG

    def generate(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        builders = {
            "addition": self._addition,
            "subtraction": self._subtraction,
            "multiplication": self._multiplication,
            "division": self._division,
        }
        if sub_type not in builders:
            raise ValueError(f"Unsupported arithmetic sub-type: {sub_type}")

        operands, result = builders[sub_type](difficulty, rng)
        display = {
            "operation": sub_type,
            "operands": operands,
            "equation": format_equation(sub_type, operands),
        }
        return Problem(
            sub_type=sub_type,
            difficulty=difficulty,
            display_data=display,
            correct_answer=result,
            distractors=numeric_distractors(rng, result, allow_negative=result < 0),
            comparison_rule=ComparisonRule.exact(),
            expected_answer_time_ms=self.game_config.expected_answer_time_ms(difficulty),
            hints=generate_hints(sub_type, operands),
        )

    def _addition(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], int]:
        low, high, count = ADDITION_RANGES[difficulty]
        operands = [rand_int(rng, low, high) for _ in range(count)]
        return operands, sum(operands)

    def _subtraction(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], int]:
        low, high, non_negative = SUBTRACTION_RANGES[difficulty]
        a, b = rand_int(rng, low, high), rand_int(rng, low, high)
        if non_negative and b > a:
            a, b = b, a
        return [a, b], a - b

    def _multiplication(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], int]:
        first, second = MULTIPLICATION_RANGES[difficulty]
        a, b = rand_int(rng, *first), rand_int(rng, *second)
        return [a, b], a * b

    def _division(self, difficulty: str, rng: RandomSource) -> Tuple[List[int], int]:
        # Built backwards from divisor * quotient so the answer is whole
        max_dividend, divisor_range = DIVISION_RANGES[difficulty]
        divisor = rand_int(rng, *divisor_range)
        quotient = rand_int(rng, 1, max(1, max_dividend // divisor))
        return [divisor * quotient, divisor], quotient


def format_equation(operation: str, operands: List[int]) -> str:
    symbol = f" {SYMBOLS[operation]} "
    return f"{symbol.join(str(n) for n in operands)} = ?"


def generate_hints(operation: str, operands: List[Any]) -> List[str]:
    """Progressive hints for an arithmetic problem."""
    a, b = operands[0], operands[1]
    if operation == "addition":
        hints = [f"Start with {a} and count up {b} more"]
        if b <= 5:
            hints.append(f"Use your fingers to count: {a} + {b}")
        hints.append("Try using the dots or objects to help you count")
        return hints
    if operation == "subtraction":
        return [f"Start with {a} and take away {b}", "Cross out items as you subtract them"]
    if operation == "multiplication":
        return [f"Make {a} groups with {b} items in each group", "Count all the items in all the groups"]
    return [f"Share {a} items equally into {b} groups", "How many items will be in each group?"]
