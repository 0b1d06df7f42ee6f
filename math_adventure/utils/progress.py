"""
Progress analytics helpers for session summaries and parent dashboards.

Provides:
- Summary statistics over skill success rates (mean, median, std, min, max)
- Response time statistics per sub-type
- Mastery level distribution
- End-of-session practice recommendations
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..models.mastery import SkillMastery
from ..models.types import Attempt

WEAK_SKILL_RATE = 0.6
WEAK_SKILL_MIN_ATTEMPTS = 3
HIGH_ACCURACY = 0.9
LOW_ACCURACY = 0.5


def _empty_stats() -> Dict[str, float]:
    return {"mean": 0.0, "median": 0.0, "min": 0.0, "max": 0.0, "std_dev": 0.0, "count": 0}


def _stats(values: List[float]) -> Dict[str, float]:
    if not values:
        return _empty_stats()
    arr = np.asarray(values, dtype=float)
    return {
        "mean": round(float(np.mean(arr)), 4),
        "median": round(float(np.median(arr)), 4),
        "min": round(float(np.min(arr)), 4),
        "max": round(float(np.max(arr)), 4),
        "std_dev": round(float(np.std(arr)), 4),
        "count": int(arr.size),
    }


def mastery_summary(records: Mapping[str, SkillMastery], include_unattempted: bool = False) -> Dict[str, float]:
    """
    Calculate summary statistics for skill success rates.

    Args:
        records: Skill records keyed by skill key
        include_unattempted: Count skills with zero attempts as 0.0

    Returns:
        Dict with mean, median, min, max, std_dev and count

    Example:
        >>> records = {"addition": SkillMastery("addition", 10, 9), "subtraction": SkillMastery("subtraction", 4, 2)}
        >>> mastery_summary(records)["mean"]
        0.7
    """
    rates = [
        record.success_rate
        for record in records.values()
        if include_unattempted or record.attempts > 0
    ]
    return _stats(rates)


def response_time_summary(history: Iterable[Attempt]) -> Dict[str, Dict[str, float]]:
    """
    Response time statistics (ms) per sub-type plus an "overall" entry.

    Args:
        history: Attempts of a session

    Returns:
        {sub_type: stats, ..., "overall": stats}
    """
    by_type: Dict[str, List[float]] = defaultdict(list)
    overall: List[float] = []
    for attempt in history:
        by_type[attempt.sub_type].append(attempt.time_taken_ms)
        overall.append(attempt.time_taken_ms)

    summary = {sub_type: _stats(times) for sub_type, times in sorted(by_type.items())}
    summary["overall"] = _stats(overall)
    return summary


def mastery_by_level(records: Mapping[str, SkillMastery], max_level: int = 5) -> Dict[int, int]:
    """
    Count skills per mastery level.

    Returns:
        {level: count} for every level 1..max_level (zero counts included)
    """
    levels = np.array([record.level for record in records.values()], dtype=int)
    counts = np.bincount(levels, minlength=max_level + 1) if levels.size else np.zeros(max_level + 1, dtype=int)
    return {level: int(counts[level]) for level in range(1, max_level + 1)}


def weakest_skills(records: Mapping[str, SkillMastery], n: int = 3) -> List[str]:
    """Attempted skills with the lowest success rate, weakest first."""
    attempted = [record for record in records.values() if record.attempts > 0]
    attempted.sort(key=lambda r: (r.success_rate, -r.attempts, r.skill_key))
    return [record.skill_key for record in attempted[:n]]


def generate_recommendations(records: Mapping[str, SkillMastery], accuracy: float) -> List[str]:
    """
    Practice suggestions shown with the session result.

    A skill is flagged once it has at least 3 attempts and a success rate
    below 0.6. Session accuracy of 0.9 or better suggests moving up;
    below 0.5 suggests slowing down.

    Args:
        records: Skill records keyed by skill key
        accuracy: Session accuracy in [0, 1]

    Returns:
        List of recommendation strings
    """
    recommendations = []

    for key, record in records.items():
        if record.attempts >= WEAK_SKILL_MIN_ATTEMPTS and record.success_rate < WEAK_SKILL_RATE:
            recommendations.append(f"Practice more {key.replace('_', ' ')} problems")

    if accuracy >= HIGH_ACCURACY:
        recommendations.append("Try a higher difficulty level")
    elif accuracy < LOW_ACCURACY:
        recommendations.append("Take your time and use the visual aids")

    return recommendations
