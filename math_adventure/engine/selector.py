"""
Weighted random selection of question sub-types.

Weaker skills are asked more often: a candidate's weight is
max(floor, 1 - success_rate), so a mastered skill keeps a small but nonzero
chance of being picked.
"""

from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence

from ..config import EngineConfig, config
from ..exceptions import NoCandidatesError
from ..models.mastery import SkillMastery
from ..models.types import RandomSource

MasteryLookup = Callable[[str], SkillMastery]


class WeightedSelector:
    """Cumulative-weight draw over candidate sub-types."""

    def __init__(self, rng: Optional[RandomSource] = None, engine_config: Optional[EngineConfig] = None):
        """
        Initialize selector.

        Args:
            rng: Random source (seeded random.Random from config if None)
            engine_config: Thresholds (defaults to global config)
        """
        self._config = engine_config or config.engine
        self.rng = rng if rng is not None else random.Random(self._config.random_seed)

    def weight(self, mastery: SkillMastery) -> float:
        return max(self._config.min_selection_weight, 1.0 - mastery.success_rate)

    def weights(self, candidates: Sequence[str], mastery_lookup: MasteryLookup) -> List[float]:
        return [self.weight(mastery_lookup(candidate)) for candidate in candidates]

    def select(self, candidates: Sequence[str], mastery_lookup: MasteryLookup) -> str:
        """
        Pick one candidate.

        Draws r in [0, total_weight) and walks the candidates subtracting
        each weight until r <= 0.

        Args:
            candidates: Eligible sub-types
            mastery_lookup: Sub-type -> SkillMastery

        Returns:
            The chosen sub-type

        Raises:
            NoCandidatesError: If candidates is empty
        """
        if not candidates:
            raise NoCandidatesError("No eligible sub-types to choose from")

        weights = self.weights(candidates, mastery_lookup)
        r = self.rng.random() * sum(weights)

        for candidate, weight in zip(candidates, weights):
            r -= weight
            if r <= 0:
                return candidate

        # Float rounding can leave r marginally above zero
        return candidates[-1]
