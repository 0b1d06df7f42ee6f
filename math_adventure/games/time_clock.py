"""
Time Wizard: reading analog and digital clocks, comparing times and
working out elapsed time.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from ..models.types import ComparisonRule, Problem, RandomSource
from .base import AgeGroup, GameConfig, choice, rand_int, shuffled

TIME_TYPES = ("read_analog", "read_digital", "time_comparison", "elapsed_time")

TIME_CONFIG = GameConfig(
    domain="time-clock",
    name="Time Wizard",
    sub_types=TIME_TYPES,
    difficulty_sub_types={
        "beginner": ("read_analog", "read_digital"),
        "easy": ("read_analog", "read_digital", "time_comparison"),
        "medium": TIME_TYPES,
        "hard": TIME_TYPES,
        "expert": TIME_TYPES,
    },
    age_groups={
        "3-4": AgeGroup("Early Learners", ("read_analog", "read_digital"), "beginner", 8, 0),
        "4-5": AgeGroup("Pre-K Explorers", ("read_analog", "read_digital"), "beginner", 10, 0),
        "5-6": AgeGroup(
            "Kindergarten Stars", ("read_analog", "read_digital", "time_comparison"), "beginner", 15, 0
        ),
        "6-7": AgeGroup("Advanced Learners", TIME_TYPES, "easy", 20, 0),
    },
    default_age_group="5-6",
    answer_times_ms={
        "beginner": 25000,
        "easy": 22000,
        "medium": 20000,
        "hard": 18000,
        "expert": 15000,
    },
)

ANY_MINUTE = tuple(range(60))

MINUTE_OPTIONS: Dict[str, Tuple[int, ...]] = {
    "beginner": (0,),
    "easy": (0, 30),
    "medium": (0, 15, 30, 45),
    "hard": tuple(range(0, 60, 5)),
    "expert": ANY_MINUTE,
}

ELAPSED_OPTIONS: Dict[str, Tuple[int, ...]] = {
    "beginner": (60,),
    "easy": (30, 60),
    "medium": (30, 60, 90, 120),
    "hard": (30, 60, 90, 120, 180),
    "expert": (15, 45, 75, 105, 150, 195),
}


def format_time(hour24: int, minute: int) -> str:
    """12-hour display, e.g. 15:05 -> '3:05 PM'."""
    hour24 %= 24
    period = "AM" if hour24 < 12 else "PM"
    display_hour = hour24 % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


class TimeGenerator:
    """Builds clock-reading problems on a 12-hour display."""

    game_config = TIME_CONFIG

    def generate(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        if sub_type in ("read_analog", "read_digital"):
            return self._read_time(difficulty, sub_type, rng)
        if sub_type == "time_comparison":
            return self._comparison(difficulty, rng)
        if sub_type == "elapsed_time":
            return self._elapsed(difficulty, rng)
        raise ValueError(f"Unsupported time sub-type: {sub_type}")

    def _random_time(self, difficulty: str, rng: RandomSource) -> Tuple[int, int]:
        hour = rand_int(rng, 6, 20)
        minute = choice(rng, MINUTE_OPTIONS[difficulty])
        return hour, minute

    def _read_time(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        hour, minute = self._random_time(difficulty, rng)
        answer = format_time(hour, minute)

        display = {
            "clock": "analog" if sub_type == "read_analog" else "digital",
            "hour": hour,
            "minute": minute,
            "show_numbers": difficulty != "expert",
        }
        hints = ["The short hand points to the hour", "The long hand points to the minutes"]
        if sub_type == "read_digital":
            hints = ["The number before the colon is the hour", "The numbers after the colon are minutes"]

        return Problem(
            sub_type=sub_type,
            difficulty=difficulty,
            display_data=display,
            correct_answer=answer,
            distractors=self._time_distractors(hour, minute, difficulty, rng),
            comparison_rule=ComparisonRule.exact(),
            expected_answer_time_ms=self.game_config.expected_answer_time_ms(difficulty),
            hints=hints,
        )

    def _time_distractors(self, hour: int, minute: int, difficulty: str, rng: RandomSource) -> List[str]:
        answer = format_time(hour, minute)
        candidates = {
            format_time(hour + 1, minute),
            format_time(hour - 1, minute),
            format_time(hour + 12, minute),
            format_time(hour, (minute + 30) % 60),
            # Hands swapped: a common mistake on analog clocks
            format_time(minute // 5 or 12, (hour % 12) * 5),
        }
        candidates.discard(answer)
        return shuffled(rng, sorted(candidates))[:3]

    def _comparison(self, difficulty: str, rng: RandomSource) -> Problem:
        first = self._random_time(difficulty, rng)
        second = self._random_time(difficulty, rng)
        if second == first:
            second = (first[0] + 1, first[1])

        ask = choice(rng, ("earlier", "later"))
        first_is_earlier = first < second
        if ask == "earlier":
            answer = "first" if first_is_earlier else "second"
        else:
            answer = "second" if first_is_earlier else "first"

        return Problem(
            sub_type="time_comparison",
            difficulty=difficulty,
            display_data={
                "times": [format_time(*first), format_time(*second)],
                "question": f"Which time is {ask}?",
            },
            correct_answer=answer,
            distractors=["second" if answer == "first" else "first"],
            comparison_rule=ComparisonRule.case_insensitive(),
            expected_answer_time_ms=self.game_config.expected_answer_time_ms(difficulty),
            hints=["Morning (AM) comes before afternoon (PM)", "Compare the hours first"],
        )

    def _elapsed(self, difficulty: str, rng: RandomSource) -> Problem:
        hour, minute = self._random_time(difficulty, rng)
        elapsed = choice(rng, ELAPSED_OPTIONS[difficulty])
        end_total = hour * 60 + minute + elapsed
        end_hour, end_minute = divmod(end_total, 60)

        distractors = sorted({elapsed + 30, abs(elapsed - 30) or 15, elapsed + 60} - {elapsed})

        return Problem(
            sub_type="elapsed_time",
            difficulty=difficulty,
            display_data={
                "start": format_time(hour, minute),
                "end": format_time(end_hour, end_minute),
                "question": "How many minutes passed?",
            },
            correct_answer=elapsed,
            distractors=shuffled(rng, distractors)[:3],
            comparison_rule=ComparisonRule.exact(),
            expected_answer_time_ms=self.game_config.expected_answer_time_ms(difficulty),
            hints=["Count the hours first, then the minutes", "One hour is 60 minutes"],
        )
