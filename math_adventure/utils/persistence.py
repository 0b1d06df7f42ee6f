"""
Mastery and session-result persistence with validation.

Provides a JSON file store for learner mastery records and completed session
results. Every payload is validated against its JSON Schema before it is
written and after it is read back.

Layout:
    <data_dir>/mastery/<user_id>.json
    <data_dir>/results/sr-<uuid>.json
"""

from __future__ import annotations

import json
import re
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol

from loguru import logger

from ..config import config
from ..exceptions import PersistenceUnavailable
from ..models.mastery import SkillMastery
from ..models.types import SessionResult, utc_now
from .validation import MasteryValidator, SessionResultValidator

SCHEMA_VERSION = 1

_SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_.@-]+$")


class MasteryStore(Protocol):
    """Storage boundary used by the engine."""

    def load_mastery(self, user_id: str) -> Dict[str, Dict[str, Any]]:
        ...

    def save_mastery(self, user_id: str, records: Mapping[str, SkillMastery]) -> None:
        ...

    def save_session_result(self, result: SessionResult) -> str:
        ...


class JsonFilePersistence:
    """
    Handles persistence of mastery and session results with validation.

    Features:
    - Validate against skill_mastery.schema.json / session_result.schema.json
    - Auto-repair of loaded mastery files (clamped counters, coerced ints)
    - Every failure surfaces as PersistenceUnavailable
    """

    def __init__(self, data_dir: Path | str | None = None, auto_repair: bool = True):
        """
        Initialize persistence manager.

        Args:
            data_dir: Root data directory (default: config.paths.data_dir)
            auto_repair: Whether to repair loaded mastery files that fail validation
        """
        root = Path(data_dir) if data_dir else config.paths.data_dir
        self.mastery_dir = root / "mastery"
        self.results_dir = root / "results"
        self.auto_repair = auto_repair

        self.mastery_validator = MasteryValidator()
        self.result_validator = SessionResultValidator()

    def _mastery_path(self, user_id: str) -> Path:
        if not user_id or not _SAFE_USER_ID.match(user_id):
            raise PersistenceUnavailable(f"Invalid user id for file storage: {user_id!r}")
        return self.mastery_dir / f"{user_id}.json"

    # ==================== Mastery ====================

    def load_mastery(self, user_id: str) -> Dict[str, Dict[str, Any]]:
        """
        Load saved mastery records for a learner.

        Args:
            user_id: Learner identifier

        Returns:
            Mapping of skill key to record dict (empty if nothing saved yet)

        Raises:
            PersistenceUnavailable: If the file cannot be read or is invalid
        """
        filepath = self._mastery_path(user_id)
        if not filepath.exists():
            logger.debug(f"No saved mastery for {user_id}")
            return {}

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"Failed to load mastery for {user_id}: {e}") from e

        result = self.mastery_validator.validate(payload, auto_repair=self.auto_repair)
        if not result.valid:
            raise PersistenceUnavailable(
                f"Mastery file for {user_id} failed validation: " + "; ".join(result.errors)
            )
        for repair in result.repairs:
            logger.warning(f"Repaired mastery file for {user_id}: {repair}")

        return {key: dict(record) for key, record in result.data["skills"].items()}

    def save_mastery(self, user_id: str, records: Mapping[str, SkillMastery]) -> Path:
        """
        Save mastery records for a learner, replacing the previous file.

        Args:
            user_id: Learner identifier
            records: Skill records keyed by skill key

        Returns:
            Path of the written file

        Raises:
            PersistenceUnavailable: If validation or writing fails
        """
        filepath = self._mastery_path(user_id)
        payload = {
            "meta": {"schema_version": SCHEMA_VERSION, "updated_at": utc_now()},
            "user_id": user_id,
            "skills": {key: record.to_dict() for key, record in records.items()},
        }

        result = self.mastery_validator.validate(payload)
        if not result.valid:
            raise PersistenceUnavailable(
                f"Refusing to save invalid mastery for {user_id}: " + "; ".join(result.errors)
            )

        self._write(filepath, payload)
        logger.debug(f"Saved mastery for {user_id} ({len(records)} skills)")
        return filepath

    # ==================== Session results ====================

    def save_session_result(self, result: SessionResult) -> str:
        """
        Save a completed session result.

        Args:
            result: Session result to store

        Returns:
            Result id (sr-<uuid4>)

        Raises:
            PersistenceUnavailable: If validation or writing fails
        """
        payload = result.to_dict()
        validation = self.result_validator.validate(payload)
        if not validation.valid:
            raise PersistenceUnavailable(
                f"Refusing to save invalid session result {result.session_id}: "
                + "; ".join(validation.errors)
            )

        result_id = f"sr-{uuid.uuid4()}"
        payload["result_id"] = result_id
        self._write(self.results_dir / f"{result_id}.json", payload)
        logger.debug(f"Saved session result {result_id} for session {result.session_id}")
        return result_id

    def load_session_results(self, user_id: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Load stored session results.

        Unreadable or invalid files are skipped with a warning.

        Args:
            user_id: Only results for this learner (all results if None)
            limit: Maximum number of results to return (newest first)

        Returns:
            List of result dicts, sorted by completed_at (newest first)
        """
        results = []
        if not self.results_dir.exists():
            return results

        for filepath in self.results_dir.glob("sr-*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load {filepath}: {e}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed session result {filepath.name}")
                continue

            data.pop("result_id", None)
            if not self.result_validator.validate(data):
                logger.warning(f"Skipping invalid session result {filepath.name}")
                continue
            data["result_id"] = filepath.stem

            if user_id is None or data.get("user_id") == user_id:
                results.append(data)

        results.sort(key=lambda r: r.get("completed_at", ""), reverse=True)
        if limit:
            return results[:limit]
        return results

    # ==================== Internals ====================

    def _write(self, filepath: Path, payload: Dict[str, Any]) -> None:
        """Atomic write through a sibling temp file."""
        tmp_path = filepath.with_suffix(".json.tmp")
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            tmp_path.replace(filepath)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceUnavailable(f"Failed to write {filepath}: {e}") from e
