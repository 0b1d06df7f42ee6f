"""
Unit tests for schema validation.

Tests:
- JSON Schema validation of mastery files and session results
- Counter consistency checks
- Auto-repair functionality
"""

import json

import pytest

from math_adventure.utils.validation import (
    MasteryValidator,
    SchemaValidator,
    SessionResultValidator,
    ValidationResult,
    validate_mastery,
)


class TestValidationResult:
    """Test suite for ValidationResult class."""

    def test_valid_result_is_truthy(self):
        assert bool(ValidationResult(valid=True, errors=[])) is True

    def test_invalid_result_is_falsy(self):
        assert bool(ValidationResult(valid=False, errors=["error"])) is False

    def test_str_representation_invalid(self):
        result = ValidationResult(valid=False, errors=["error1", "error2"])
        assert "2" in str(result)
        assert "error1" in str(result)

    def test_repairs_tracked(self):
        result = ValidationResult(valid=True, errors=[], repairs=["repair1", "repair2"])
        assert len(result.repairs) == 2
        assert "2 repair" in str(result)


class TestSchemaValidator:
    def test_custom_schema(self, tmp_path):
        schema_file = tmp_path / "test.schema.json"
        schema_file.write_text(
            json.dumps(
                {
                    "$schema": "http://json-schema.org/draft-07/schema#",
                    "type": "object",
                    "properties": {"test": {"type": "string"}},
                    "required": ["test"],
                }
            )
        )
        validator = SchemaValidator(schema_file)
        assert validator.validate({"test": "ok"})
        result = validator.validate({})
        assert not result
        assert "At 'root'" in result.errors[0]
        assert "validator=required" in result.errors[0]


class TestMasteryValidator:
    """Test suite for mastery file validation."""

    def test_valid_payload(self, valid_mastery_payload):
        assert validate_mastery(valid_mastery_payload).valid

    def test_missing_meta(self, valid_mastery_payload):
        del valid_mastery_payload["meta"]
        assert not validate_mastery(valid_mastery_payload)

    def test_level_out_of_range(self, valid_mastery_payload):
        valid_mastery_payload["skills"]["addition"]["level"] = 6
        result = validate_mastery(valid_mastery_payload)
        assert not result
        assert any("addition" in e for e in result.errors)

    def test_successes_above_attempts(self, valid_mastery_payload):
        valid_mastery_payload["skills"]["subtraction"]["successes"] = 9
        result = validate_mastery(valid_mastery_payload)
        assert not result
        assert any("exceed attempts" in e for e in result.errors)

    def test_repair_clamps_and_coerces(self, valid_mastery_payload):
        skills = valid_mastery_payload["skills"]
        skills["addition"]["attempts"] = "12"
        skills["subtraction"]["successes"] = 9
        skills["subtraction"]["level"] = 8

        result = MasteryValidator().validate(valid_mastery_payload, auto_repair=True)

        assert result.valid, result.errors
        assert result.data["skills"]["addition"]["attempts"] == 12
        assert result.data["skills"]["subtraction"]["successes"] == 4
        assert result.data["skills"]["subtraction"]["level"] == 5
        assert len(result.repairs) == 3

    def test_repair_strips_unknown_top_level_keys(self, valid_mastery_payload):
        valid_mastery_payload["favourite_colour"] = "green"
        result = MasteryValidator().validate(valid_mastery_payload, auto_repair=True)
        assert result.valid
        assert "favourite_colour" not in result.data

    def test_repair_does_not_mutate_input(self, valid_mastery_payload):
        valid_mastery_payload["skills"]["subtraction"]["successes"] = 9
        MasteryValidator().validate(valid_mastery_payload, auto_repair=True)
        assert valid_mastery_payload["skills"]["subtraction"]["successes"] == 9

    def test_unrepairable_payload(self):
        result = MasteryValidator().validate({"skills": []}, auto_repair=True)
        assert not result.valid


class TestSessionResultValidator:
    @pytest.fixture
    def result_payload(self):
        return {
            "session_id": "gs-1234",
            "user_id": "kid-1",
            "domain": "basic-arithmetic",
            "questions_answered": 4,
            "correct_answers": 3,
            "accuracy": 0.75,
            "longest_streak": 2,
            "final_difficulty": "medium",
            "elapsed_ms": 61000,
            "mastery": {"addition": {"attempts": 4, "successes": 3, "level": 1}},
            "completed_at": "2026-10-18T09:30:00+00:00",
        }

    def test_valid(self, result_payload):
        assert SessionResultValidator().validate(result_payload)

    def test_session_id_prefix(self, result_payload):
        result_payload["session_id"] = "1234"
        assert not SessionResultValidator().validate(result_payload)

    def test_correct_above_answered(self, result_payload):
        result_payload["correct_answers"] = 5
        result = SessionResultValidator().validate(result_payload)
        assert any("exceed questions_answered" in e for e in result.errors)

    def test_accuracy_bounds(self, result_payload):
        result_payload["accuracy"] = 1.5
        assert not SessionResultValidator().validate(result_payload)
