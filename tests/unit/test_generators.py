"""
Unit tests for the four domain problem generators.

Tests:
- Every sub-type builds at every difficulty
- The correct answer passes its own comparison rule, distractors fail it
- Domain-specific arithmetic of the answers
- Game configuration consistency
"""

import random
from dataclasses import replace

import pytest

from math_adventure.exceptions import ConfigError
from math_adventure.games import (
    GENERATORS,
    ArithmeticGenerator,
    MoneyGenerator,
    SequenceGenerator,
    TimeGenerator,
    get_generator,
)
from math_adventure.games.base import numeric_distractors, rand_int, shuffled
from math_adventure.games.money import COINS, optimal_coins
from math_adventure.games.time_clock import format_time
from math_adventure.models.types import ComparisonKind

ALL_GENERATORS = [ArithmeticGenerator(), SequenceGenerator(), TimeGenerator(), MoneyGenerator()]


def all_cases():
    for generator in ALL_GENERATORS:
        cfg = generator.game_config
        for difficulty in cfg.ladder:
            for sub_type in cfg.sub_types:
                yield pytest.param(generator, difficulty, sub_type, id=f"{cfg.domain}-{difficulty}-{sub_type}")


class TestAllGenerators:
    @pytest.mark.parametrize("generator,difficulty,sub_type", list(all_cases()))
    def test_problem_is_self_consistent(self, generator, difficulty, sub_type):
        rng = random.Random(f"{difficulty}-{sub_type}")
        for _ in range(20):
            problem = generator.generate(difficulty, sub_type, rng)

            assert problem.sub_type == sub_type
            assert problem.difficulty == difficulty
            assert problem.id.startswith("prob-")
            assert problem.expected_answer_time_ms == generator.game_config.expected_answer_time_ms(difficulty)
            assert problem.check(problem.correct_answer)
            for distractor in problem.distractors:
                assert not problem.check(distractor)

    @pytest.mark.parametrize("generator", ALL_GENERATORS, ids=lambda g: g.game_config.domain)
    def test_game_config_is_valid(self, generator):
        generator.game_config.validate()

    @pytest.mark.parametrize("generator", ALL_GENERATORS, ids=lambda g: g.game_config.domain)
    def test_unknown_sub_type_rejected(self, generator):
        with pytest.raises(ValueError):
            generator.generate("easy", "juggling", random.Random(0))

    def test_same_seed_same_problem(self):
        first = ArithmeticGenerator().generate("medium", "multiplication", random.Random(5))
        second = ArithmeticGenerator().generate("medium", "multiplication", random.Random(5))
        assert first.display_data == second.display_data
        assert first.distractors == second.distractors


class TestRegistry:
    def test_all_domains_registered(self):
        assert set(GENERATORS) == {"basic-arithmetic", "number-sequences", "time-clock", "money-math"}

    def test_get_generator(self):
        assert isinstance(get_generator("money-math"), MoneyGenerator)

    def test_unknown_domain(self):
        with pytest.raises(ConfigError):
            get_generator("chemistry")


class TestGameConfigValidation:
    def test_age_group_with_unknown_sub_type(self):
        cfg = ArithmeticGenerator.game_config
        bad_group = replace(cfg.age_groups["5-6"], sub_types=("addition", "calculus"))
        bad = replace(cfg, age_groups={**cfg.age_groups, "5-6": bad_group})
        with pytest.raises(ConfigError):
            bad.validate()

    def test_difficulty_without_sub_types(self):
        cfg = ArithmeticGenerator.game_config
        unlocked = {k: v for k, v in cfg.difficulty_sub_types.items() if k != "expert"}
        with pytest.raises(ConfigError):
            replace(cfg, difficulty_sub_types=unlocked).validate()

    def test_missing_default_age_group(self):
        with pytest.raises(ConfigError):
            replace(ArithmeticGenerator.game_config, default_age_group="9-10").validate()

    def test_eligible_sub_types_intersect_age_and_difficulty(self):
        cfg = ArithmeticGenerator.game_config
        assert cfg.eligible_sub_types("5-6", "beginner") == ["addition"]
        assert cfg.eligible_sub_types("5-6", "expert") == ["addition", "subtraction", "multiplication"]
        assert cfg.eligible_sub_types("3-4", "hard") == ["addition", "subtraction"]


class TestArithmetic:
    def test_answers_match_operands(self):
        rng = random.Random(3)
        gen = ArithmeticGenerator()
        for _ in range(50):
            add = gen.generate("hard", "addition", rng)
            assert add.correct_answer == sum(add.display_data["operands"])

            a, b = gen.generate("easy", "subtraction", rng).display_data["operands"]
            assert a >= b

            div = gen.generate("expert", "division", rng)
            dividend, divisor = div.display_data["operands"]
            assert dividend % divisor == 0
            assert div.correct_answer == dividend // divisor

    def test_equation_text(self):
        problem = ArithmeticGenerator().generate("beginner", "addition", random.Random(1))
        a, b = problem.display_data["operands"]
        assert problem.display_data["equation"] == f"{a} + {b} = ?"


class TestSequences:
    def test_blank_holds_answer(self):
        rng = random.Random(8)
        for sub_type in SequenceGenerator.game_config.sub_types:
            problem = SequenceGenerator().generate("hard", sub_type, rng)
            shown = problem.display_data["sequence"]
            blank = problem.display_data["blank_index"]
            assert shown[blank] is None
            assert shown.count(None) == 1

    def test_skip_counting_step(self):
        problem = SequenceGenerator().generate("beginner", "skip_counting", random.Random(2))
        values = [v for v in problem.display_data["sequence"] if v is not None]
        assert all(b - a == 2 for a, b in zip(values, values[1:]))
        assert problem.correct_answer == values[-1] + 2


class TestTimeClock:
    def test_format_time(self):
        assert format_time(15, 5) == "3:05 PM"
        assert format_time(0, 30) == "12:30 AM"
        assert format_time(12, 0) == "12:00 PM"

    def test_beginner_reads_whole_hours(self):
        rng = random.Random(4)
        for _ in range(20):
            problem = TimeGenerator().generate("beginner", "read_analog", rng)
            assert problem.display_data["minute"] == 0
            assert problem.correct_answer.endswith(":00 AM") or problem.correct_answer.endswith(":00 PM")

    def test_comparison_is_case_insensitive(self):
        problem = TimeGenerator().generate("easy", "time_comparison", random.Random(6))
        assert problem.comparison_rule.kind is ComparisonKind.CASE_INSENSITIVE
        assert problem.correct_answer in ("first", "second")
        assert problem.check(problem.correct_answer.upper())

    def test_comparison_terminates_on_constant_rng(self, scripted_rng):
        problem = TimeGenerator().generate("beginner", "time_comparison", scripted_rng([0.5]))
        first, second = problem.display_data["times"]
        assert first != second


class TestMoney:
    def test_optimal_coins(self):
        assert optimal_coins(41) == ["quarter", "dime", "nickel", "penny"]
        assert sum(COINS[c] for c in optimal_coins(99)) == 99

    def test_coin_counting_total(self):
        problem = MoneyGenerator().generate("medium", "coin_counting", random.Random(10))
        cents = sum(COINS[c] for c in problem.display_data["coins"])
        assert problem.correct_answer == pytest.approx(cents / 100)
        assert problem.comparison_rule.kind is ComparisonKind.NUMERIC_TOLERANCE

    def test_making_change(self):
        problem = MoneyGenerator().generate("easy", "making_change", random.Random(12))
        data = problem.display_data
        assert problem.correct_answer == pytest.approx(data["payment"] - data["price"], abs=0.001)
        assert problem.check(f"${problem.correct_answer:.2f}")

    def test_coin_combinations_index(self):
        problem = MoneyGenerator().generate("hard", "coin_combinations", random.Random(13))
        combos = problem.display_data["combinations"]
        assert combos[problem.correct_answer]["total"] == problem.display_data["target"]
        assert problem.check(str(problem.correct_answer))

    def test_price_comparison_terminates_on_constant_rng(self, scripted_rng):
        problem = MoneyGenerator().generate("beginner", "price_comparison", scripted_rng([0.5]))
        first, second = problem.display_data["items"]
        assert first["price"] != second["price"]


class TestHelpers:
    def test_rand_int_bounds(self, scripted_rng):
        assert rand_int(scripted_rng([0.0]), 3, 7) == 3
        assert rand_int(scripted_rng([0.999999]), 3, 7) == 7
        assert rand_int(scripted_rng([0.5]), 4, 4) == 4

    def test_shuffled_keeps_items(self):
        items = list(range(10))
        result = shuffled(random.Random(1), items)
        assert sorted(result) == items
        assert items == list(range(10))

    def test_numeric_distractors_distinct_and_non_negative(self):
        values = numeric_distractors(random.Random(0), 1)
        assert len(values) == 3
        assert len(set(values)) == 3
        assert 1 not in values
        assert all(v >= 0 for v in values)
