"""
Schema validation utilities for persisted engine data.

Validates learner mastery files and session results against JSON Schemas
before they are written and after they are read back.

Features:
- Format validation (datetime)
- Deep copy to prevent mutations
- Type coercion (strings to integers) and counter clamping on repair
- Removal of unknown keys
- Transparent repair tracking
"""

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError

from ..config import config


class ValidationResult:
    """
    Result of a validation attempt.

    Attributes:
        valid: Whether data passed validation
        errors: List of error messages
        data: The validated data (may be modified if repair was attempted)
        repairs: List of repairs applied (for transparency)
    """

    def __init__(
        self,
        valid: bool,
        errors: list[str],
        data: Any = None,
        repairs: Optional[list[str]] = None,
    ):
        self.valid = valid
        self.errors = errors
        self.data = data
        self.repairs = repairs or []

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid

    def __str__(self) -> str:
        if self.valid:
            msg = "Validation passed"
            if self.repairs:
                msg += f" (with {len(self.repairs)} repair(s))"
            return msg
        return f"Validation failed with {len(self.errors)} error(s):\n" + "\n".join(
            f"  - {error}" for error in self.errors
        )


class SchemaValidator:
    """
    JSON Schema validator with auto-repair capabilities.

    Usage:
        validator = SchemaValidator("path/to/schema.json")
        result = validator.validate(data)
        if not result:
            print(result.errors)
    """

    def __init__(self, schema_path: Path | str):
        self.schema_path = Path(schema_path)
        with open(self.schema_path, "r", encoding="utf-8") as f:
            self.schema = json.load(f)
        self.validator = Draft7Validator(self.schema, format_checker=FormatChecker())

    def validate(self, data: dict, auto_repair: bool = False) -> ValidationResult:
        """
        Validate data against schema.

        Args:
            data: Data to validate
            auto_repair: If True, attempt to fix common validation errors

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = [self._format_error(e) for e in self.validator.iter_errors(data)]
        errors.extend(self._semantic_errors(data))

        if errors:
            if auto_repair:
                repaired_data, repairs = self._attempt_repair(data)
                result = self.validate(repaired_data, auto_repair=False)
                result.repairs = repairs
                return result
            return ValidationResult(valid=False, errors=errors, data=data)

        return ValidationResult(valid=True, errors=[], data=data)

    def _format_error(self, error: ValidationError) -> str:
        path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        schema_path = "/".join(str(p) for p in error.schema_path)
        return f"At '{path}': {error.message} [validator={error.validator}, schema_path=/{schema_path}]"

    def _semantic_errors(self, data: Any) -> list[str]:
        """Checks JSON Schema cannot express. Overridden by subclasses."""
        return []

    def _attempt_repair(self, data: dict) -> tuple[dict, list[str]]:
        repaired = deepcopy(data)
        repairs: list[str] = []
        self._strip_additional_props(repaired, self.schema, repairs)
        return repaired, repairs

    def _strip_additional_props(self, obj: Any, schema: dict, repairs: list[str], path: str = "root"):
        """Recursively remove keys not allowed by schema (additionalProperties: false)."""
        if not isinstance(schema, dict) or not isinstance(obj, dict):
            return

        if "properties" in schema:
            allowed = set(schema["properties"])
            if schema.get("additionalProperties") is False:
                for key in [k for k in obj if k not in allowed]:
                    obj.pop(key, None)
                    repairs.append(f"Removed unknown key '{key}' at {path}")
            for key, subschema in schema["properties"].items():
                if key in obj:
                    self._strip_additional_props(obj[key], subschema, repairs, f"{path}.{key}")


def _check_counters(records: Any, path: str) -> list[str]:
    errors = []
    if not isinstance(records, dict):
        return errors
    for key, record in records.items():
        if not isinstance(record, dict):
            continue
        attempts, successes = record.get("attempts"), record.get("successes")
        if isinstance(attempts, int) and isinstance(successes, int) and successes > attempts:
            errors.append(f"At '{path} -> {key}': successes ({successes}) exceed attempts ({attempts})")
    return errors


class MasteryValidator(SchemaValidator):
    """Validator for persisted learner mastery files."""

    def __init__(self, schema_path: Optional[Path | str] = None):
        super().__init__(schema_path or config.paths.mastery_schema)

    def _semantic_errors(self, data: Any) -> list[str]:
        if not isinstance(data, dict):
            return []
        return _check_counters(data.get("skills"), "skills")

    def _attempt_repair(self, data: dict) -> tuple[dict, list[str]]:
        repaired, repairs = super()._attempt_repair(data)

        skills = repaired.get("skills") if isinstance(repaired, dict) else None
        if not isinstance(skills, dict):
            return repaired, repairs

        for key, record in skills.items():
            if not isinstance(record, dict):
                continue
            for field in ("attempts", "successes", "level"):
                value = record.get(field)
                if isinstance(value, str):
                    try:
                        record[field] = int(float(value))
                        repairs.append(f"Coerced skills.{key}.{field}: '{value}' -> {record[field]}")
                    except ValueError:
                        pass
            attempts = record.get("attempts")
            successes = record.get("successes")
            if isinstance(attempts, int) and isinstance(successes, int) and successes > attempts:
                record["successes"] = attempts
                repairs.append(f"Clamped skills.{key}.successes to {attempts}")
            level = record.get("level")
            if isinstance(level, int) and not 1 <= level <= config.engine.max_mastery_level:
                record["level"] = min(max(level, 1), config.engine.max_mastery_level)
                repairs.append(f"Clamped skills.{key}.level to {record['level']}")

        return repaired, repairs


class SessionResultValidator(SchemaValidator):
    """Validator for persisted session results."""

    def __init__(self, schema_path: Optional[Path | str] = None):
        super().__init__(schema_path or config.paths.session_result_schema)

    def _semantic_errors(self, data: Any) -> list[str]:
        if not isinstance(data, dict):
            return []
        errors = _check_counters(data.get("mastery"), "mastery")
        answered, correct = data.get("questions_answered"), data.get("correct_answers")
        if isinstance(answered, int) and isinstance(correct, int) and correct > answered:
            errors.append(f"correct_answers ({correct}) exceed questions_answered ({answered})")
        return errors


def validate_mastery(data: dict, auto_repair: bool = False) -> ValidationResult:
    """Convenience function to validate a mastery file payload."""
    return MasteryValidator().validate(data, auto_repair=auto_repair)


def validate_session_result(data: dict) -> ValidationResult:
    """Convenience function to validate a session result payload."""
    return SessionResultValidator().validate(data)
