"""
Game domain plug-ins.

Each domain contributes a ProblemGenerator and its GameConfig:
- ArithmeticGenerator: Number Magic (basic-arithmetic)
- SequenceGenerator: Pattern Quest (number-sequences)
- TimeGenerator: Time Wizard (time-clock)
- MoneyGenerator: Coin Counter (money-math)
"""

from typing import Dict

from ..exceptions import ConfigError
from .arithmetic import ARITHMETIC_CONFIG, ArithmeticGenerator
from .base import AgeGroup, GameConfig, ProblemGenerator
from .money import MONEY_CONFIG, MoneyGenerator
from .sequences import SEQUENCES_CONFIG, SequenceGenerator
from .time_clock import TIME_CONFIG, TimeGenerator

GENERATORS: Dict[str, type] = {
    ARITHMETIC_CONFIG.domain: ArithmeticGenerator,
    SEQUENCES_CONFIG.domain: SequenceGenerator,
    TIME_CONFIG.domain: TimeGenerator,
    MONEY_CONFIG.domain: MoneyGenerator,
}


def get_generator(domain: str) -> ProblemGenerator:
    """Instantiate the generator registered for a domain id."""
    if domain not in GENERATORS:
        raise ConfigError(f"Unknown game domain '{domain}', expected one of {sorted(GENERATORS)}")
    return GENERATORS[domain]()


__all__ = [
    "AgeGroup",
    "GameConfig",
    "ProblemGenerator",
    "ArithmeticGenerator",
    "SequenceGenerator",
    "TimeGenerator",
    "MoneyGenerator",
    "GENERATORS",
    "get_generator",
]
