"""
Coin Counter: counting coins, making change, comparing prices, shopping
budgets and picking the right coin combination.

Amounts are built in whole cents and exposed to the learner in dollars.
Dollar answers are graded with a 0.01 tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..models.types import ComparisonRule, Problem, RandomSource
from .base import AgeGroup, GameConfig, choice, rand_int, shuffled

MONEY_TYPES = ("coin_counting", "price_comparison", "making_change", "shopping", "coin_combinations")

MONEY_CONFIG = GameConfig(
    domain="money-math",
    name="Coin Counter",
    sub_types=MONEY_TYPES,
    difficulty_sub_types={
        "beginner": ("coin_counting", "price_comparison"),
        "easy": ("coin_counting", "price_comparison", "making_change"),
        "medium": ("coin_counting", "price_comparison", "making_change", "shopping"),
        "hard": MONEY_TYPES,
        "expert": MONEY_TYPES,
    },
    age_groups={
        "3-4": AgeGroup("Early Learners", ("coin_counting", "price_comparison"), "beginner", 8, 0),
        "4-5": AgeGroup("Pre-K Explorers", ("coin_counting", "price_comparison"), "beginner", 10, 0),
        "5-6": AgeGroup(
            "Kindergarten Stars",
            ("coin_counting", "price_comparison", "making_change", "shopping"),
            "beginner",
            15,
            0,
        ),
        "6-7": AgeGroup("Advanced Learners", MONEY_TYPES, "easy", 20, 0),
    },
    default_age_group="5-6",
    answer_times_ms={
        "beginner": 30000,
        "easy": 27000,
        "medium": 24000,
        "hard": 20000,
        "expert": 18000,
    },
)

CURRENCY_TOLERANCE = 0.01

COINS: Dict[str, int] = {"penny": 1, "nickel": 5, "dime": 10, "quarter": 25}

# coin names, coin count range
COIN_COUNTING: Dict[str, Tuple[Tuple[str, ...], Tuple[int, int]]] = {
    "beginner": (("penny", "nickel"), (2, 4)),
    "easy": (("penny", "nickel", "dime"), (2, 5)),
    "medium": (("penny", "nickel", "dime", "quarter"), (3, 6)),
    "hard": (("penny", "nickel", "dime", "quarter"), (4, 8)),
    "expert": (("penny", "nickel", "dime", "quarter"), (5, 12)),
}

# payments offered (cents), price range (cents)
MAKING_CHANGE: Dict[str, Tuple[Tuple[int, ...], Tuple[int, int]]] = {
    "beginner": ((25, 50), (5, 24)),
    "easy": ((50, 100), (10, 49)),
    "medium": ((100, 200), (25, 99)),
    "hard": ((100, 500), (50, 199)),
    "expert": ((200, 1000), (100, 499)),
}

BUDGETS = (100, 200, 300, 500, 1000)


@dataclass(frozen=True)
class ShopItem:
    name: str
    min_cents: int
    max_cents: int


SHOP_ITEMS = (
    ShopItem("apple", 25, 100),
    ShopItem("banana", 15, 75),
    ShopItem("candy", 10, 50),
    ShopItem("toy car", 100, 500),
    ShopItem("pencil", 25, 100),
    ShopItem("eraser", 10, 75),
    ShopItem("sticker", 25, 100),
    ShopItem("cookie", 50, 200),
    ShopItem("juice box", 75, 200),
    ShopItem("ball", 200, 500),
)


def to_dollars(cents: int) -> float:
    return round(cents / 100, 2)


def optimal_coins(cents: int) -> List[str]:
    """Fewest coins making up an amount (greedy works for US coins)."""
    coins = []
    for name, value in sorted(COINS.items(), key=lambda kv: kv[1], reverse=True):
        count, cents = divmod(cents, value)
        coins.extend([name] * count)
    return coins


class MoneyGenerator:
    """Builds US-coin money problems."""

    game_config = MONEY_CONFIG

    def generate(self, difficulty: str, sub_type: str, rng: RandomSource) -> Problem:
        builders = {
            "coin_counting": self._coin_counting,
            "making_change": self._making_change,
            "price_comparison": self._price_comparison,
            "shopping": self._shopping,
            "coin_combinations": self._coin_combinations,
        }
        if sub_type not in builders:
            raise ValueError(f"Unsupported money sub-type: {sub_type}")

        problem = builders[sub_type](difficulty, rng)
        problem.expected_answer_time_ms = self.game_config.expected_answer_time_ms(difficulty)
        return problem

    def _dollar_distractors(self, cents: int, rng: RandomSource) -> List[float]:
        offsets = shuffled(rng, [-10, -5, -2, 2, 5, 10, 25])
        values = []
        for offset in offsets:
            candidate = cents + offset
            if candidate > 0 and to_dollars(candidate) not in values:
                values.append(to_dollars(candidate))
            if len(values) == 3:
                break
        return values

    def _price(self, item: ShopItem, rng: RandomSource) -> int:
        return rand_int(rng, item.min_cents, item.max_cents)

    def _coin_counting(self, difficulty: str, rng: RandomSource) -> Problem:
        coin_names, (low, high) = COIN_COUNTING[difficulty]
        coins = [choice(rng, coin_names) for _ in range(rand_int(rng, low, high))]
        total = sum(COINS[c] for c in coins)
        return Problem(
            sub_type="coin_counting",
            difficulty=difficulty,
            display_data={"coins": coins, "question": "How much money is there?"},
            correct_answer=to_dollars(total),
            distractors=self._dollar_distractors(total, rng),
            comparison_rule=ComparisonRule.numeric(CURRENCY_TOLERANCE),
            hints=["Start with the biggest coins", "Count on from each coin's value"],
        )

    def _making_change(self, difficulty: str, rng: RandomSource) -> Problem:
        payments, (low, high) = MAKING_CHANGE[difficulty]
        item = choice(rng, SHOP_ITEMS)
        price = rand_int(rng, low, high)
        payment = next((p for p in sorted(payments) if p > price), max(payments))
        change = payment - price
        return Problem(
            sub_type="making_change",
            difficulty=difficulty,
            display_data={
                "item": item.name,
                "price": to_dollars(price),
                "payment": to_dollars(payment),
                "question": "How much change do you get back?",
            },
            correct_answer=to_dollars(change),
            distractors=self._dollar_distractors(change, rng),
            comparison_rule=ComparisonRule.numeric(CURRENCY_TOLERANCE),
            hints=[f"Count up from {to_dollars(price):.2f} to {to_dollars(payment):.2f}"],
        )

    def _price_comparison(self, difficulty: str, rng: RandomSource) -> Problem:
        first, second = shuffled(rng, SHOP_ITEMS)[:2]
        price_a = self._price(first, rng)
        price_b = self._price(second, rng)
        # Prices at least 10 cents apart
        if abs(price_a - price_b) < 10:
            price_b = price_a + 10

        ask = choice(rng, ("more", "less"))
        a_is_more = price_a > price_b
        answer = first.name if (ask == "more") == a_is_more else second.name

        return Problem(
            sub_type="price_comparison",
            difficulty=difficulty,
            display_data={
                "items": [
                    {"name": first.name, "price": to_dollars(price_a)},
                    {"name": second.name, "price": to_dollars(price_b)},
                ],
                "question": f"Which costs {ask}?",
            },
            correct_answer=answer,
            distractors=[second.name if answer == first.name else first.name],
            comparison_rule=ComparisonRule.case_insensitive(),
            hints=["Compare the dollars first, then the cents"],
        )

    def _shopping(self, difficulty: str, rng: RandomSource) -> Problem:
        items = [choice(rng, SHOP_ITEMS) for _ in range(rand_int(rng, 2, 3))]
        priced = [{"name": item.name, "price": to_dollars(self._price(item, rng))} for item in items]
        total = sum(round(p["price"] * 100) for p in priced)

        # About 70% of baskets are affordable
        if rng.random() < 0.7:
            budget = next((b for b in BUDGETS if b >= total), BUDGETS[-1])
        else:
            budget = next((b for b in reversed(BUDGETS) if b < total), BUDGETS[0])
        answer = "yes" if budget >= total else "no"

        return Problem(
            sub_type="shopping",
            difficulty=difficulty,
            display_data={
                "items": priced,
                "budget": to_dollars(budget),
                "question": "Do you have enough money?",
            },
            correct_answer=answer,
            distractors=["no" if answer == "yes" else "yes"],
            comparison_rule=ComparisonRule.case_insensitive(),
            hints=["Add up all the prices", "Is the total less than your money?"],
        )

    def _coin_combinations(self, difficulty: str, rng: RandomSource) -> Problem:
        target = rand_int(rng, 10, 100)
        correct = {"coins": optimal_coins(target), "total": to_dollars(target)}

        wrong = []
        for i in range(3):
            delta = 5 * (i + 1) * (1 if rng.random() < 0.5 else -1)
            amount = target + delta if target + delta > 0 else target + abs(delta)
            wrong.append({"coins": optimal_coins(amount), "total": to_dollars(amount)})

        combinations = shuffled(rng, [correct, *wrong])
        index = combinations.index(correct)

        return Problem(
            sub_type="coin_combinations",
            difficulty=difficulty,
            display_data={
                "target": to_dollars(target),
                "combinations": combinations,
                "question": f"Which coins make {to_dollars(target):.2f}?",
            },
            correct_answer=index,
            distractors=[i for i in range(len(combinations)) if i != index],
            comparison_rule=ComparisonRule.index(),
            hints=["Add up the coins in each group", "Quarters are worth 25 cents"],
        )
