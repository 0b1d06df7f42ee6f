"""
Shared pytest fixtures and configuration for Math Adventure tests.

This file is automatically discovered by pytest and provides
fixtures available to all tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from loguru import logger

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))


class ScriptedRandom:
    """
    Random source replaying a fixed sequence of floats (cycled).

    Lets tests pin the exact value of every draw.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def data_dir(tmp_path):
    """
    Fixture providing an empty data directory.

    Returns:
        Path: Root data directory (mastery/ and results/ are created on write)
    """
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def valid_mastery_payload():
    """
    Fixture providing a valid persisted mastery file.

    Returns:
        dict: Payload that passes skill_mastery.schema.json
    """
    return {
        "meta": {
            "schema_version": 1,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        },
        "user_id": "kid-1",
        "skills": {
            "addition": {"skill_key": "addition", "attempts": 12, "successes": 11, "level": 3},
            "subtraction": {"skill_key": "subtraction", "attempts": 4, "successes": 1, "level": 1},
        },
    }


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# Pytest hooks for better test output


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests in unit/ directory as unit tests
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Mark tests in integration/ directory as integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
