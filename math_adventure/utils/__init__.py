"""Utility modules: schema validation, persistence and progress analytics."""

from .persistence import JsonFilePersistence, MasteryStore
from .progress import generate_recommendations, mastery_summary, response_time_summary
from .validation import SchemaValidator, ValidationResult

__all__ = [
    "JsonFilePersistence",
    "MasteryStore",
    "SchemaValidator",
    "ValidationResult",
    "generate_recommendations",
    "mastery_summary",
    "response_time_summary",
]
