"""
Per-skill mastery tracking.

Each skill key (a domain sub-type such as "addition" or "making_change")
has lifetime counters and a derived integer level between 1 and the
configured cap. Counters never reset; levels never decrease.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from ..config import EngineConfig, config


@dataclass
class SkillMastery:
    """
    Lifetime record for one skill.

    Attributes:
        skill_key: Skill identifier
        attempts: Total graded answers
        successes: Total correct answers (<= attempts)
        level: Mastery level, 1..max level
    """

    skill_key: str
    attempts: int = 0
    successes: int = 0
    level: int = 1

    @property
    def success_rate(self) -> float:
        """successes / attempts, or 0.0 before the first attempt."""
        if self.attempts == 0:
            return 0.0
        return self.successes / self.attempts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill_key": self.skill_key,
            "attempts": self.attempts,
            "successes": self.successes,
            "level": self.level,
        }

    @classmethod
    def from_dict(cls, skill_key: str, data: Mapping[str, Any], max_level: int = 5) -> SkillMastery:
        """
        Build a record from saved data, clamping inconsistent values.

        Args:
            skill_key: Skill identifier (dict key in the saved map)
            data: Saved record
            max_level: Level cap

        Returns:
            A record satisfying 0 <= successes <= attempts and 1 <= level <= max_level
        """
        attempts = max(0, int(data.get("attempts", 0)))
        successes = min(attempts, max(0, int(data.get("successes", 0))))
        level = min(max_level, max(1, int(data.get("level", 1))))
        return cls(skill_key=skill_key, attempts=attempts, successes=successes, level=level)


class MasteryTracker:
    """
    Owns every SkillMastery record of one learner.

    Promotion rule: after each update, if success_rate >= 0.8 and
    attempts >= 10 the level goes up by one (capped). In the default
    "every_update" mode the check runs on every update, so a skill that stays
    above the threshold is promoted again on each later update until the cap.
    "crossing" mode only promotes when the threshold condition becomes true
    after having been false.
    """

    def __init__(
        self,
        skill_keys: Iterable[str] = (),
        records: Optional[Mapping[str, SkillMastery]] = None,
        engine_config: Optional[EngineConfig] = None,
    ):
        """
        Initialize tracker.

        Args:
            skill_keys: Skills to seed with default records
            records: Previously persisted records (merged over defaults)
            engine_config: Thresholds (defaults to global config)
        """
        self._config = engine_config or config.engine
        self._records: Dict[str, SkillMastery] = {
            key: SkillMastery(skill_key=key) for key in skill_keys
        }
        if records:
            self.merge(records)

    # ==================== Access ====================

    def get(self, skill_key: str) -> SkillMastery:
        """Get the record for a skill, creating a default one if unseen."""
        if skill_key not in self._records:
            self._records[skill_key] = SkillMastery(skill_key=skill_key)
        return self._records[skill_key]

    def success_rate(self, skill_key: str) -> float:
        record = self._records.get(skill_key)
        return record.success_rate if record else 0.0

    def __contains__(self, skill_key: str) -> bool:
        return skill_key in self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def skill_keys(self) -> list[str]:
        return list(self._records)

    # ==================== Mutation ====================

    def _meets_threshold(self, record: SkillMastery) -> bool:
        return (
            record.attempts >= self._config.promotion_min_attempts
            and record.success_rate >= self._config.promotion_success_rate
        )

    def update(self, skill_key: str, correct: bool) -> SkillMastery:
        """
        Record one graded answer for a skill.

        Args:
            skill_key: Skill identifier
            correct: Whether the answer was correct

        Returns:
            The updated record (same object held by the tracker)
        """
        record = self.get(skill_key)
        was_meeting = self._meets_threshold(record)

        record.attempts += 1
        if correct:
            record.successes += 1

        if self._meets_threshold(record):
            if self._config.promotion_mode == "crossing" and was_meeting:
                return record
            if record.level < self._config.max_mastery_level:
                record.level += 1
                logger.info(
                    f"Skill {skill_key} promoted to level {record.level} "
                    f"({record.successes}/{record.attempts})"
                )

        return record

    def merge(self, records: Mapping[str, Any]) -> None:
        """
        Merge saved records over the current ones.

        Accepts SkillMastery objects or plain dicts (as loaded from JSON).
        A merged level never lowers an existing level.
        """
        max_level = self._config.max_mastery_level
        for key, value in records.items():
            if isinstance(value, SkillMastery):
                incoming = SkillMastery.from_dict(key, value.to_dict(), max_level)
            else:
                incoming = SkillMastery.from_dict(key, value, max_level)

            existing = self._records.get(key)
            if existing is not None:
                incoming.level = max(incoming.level, existing.level)
            self._records[key] = incoming

    # ==================== Serialization ====================

    def snapshot(self) -> Dict[str, SkillMastery]:
        """Deep copy of all records, safe to hand to callers."""
        return deepcopy(self._records)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: record.to_dict() for key, record in self._records.items()}

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Mapping[str, Any]],
        skill_keys: Iterable[str] = (),
        engine_config: Optional[EngineConfig] = None,
    ) -> MasteryTracker:
        return cls(skill_keys=skill_keys, records=data, engine_config=engine_config)
