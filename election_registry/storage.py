# election_registry/storage.py
import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import StorageError
from .registry import RegistryState

logger = logging.getLogger(__name__)


class JsonStorage:
    """Keeps the registry state in a single JSON file."""

    def __init__(self, path: str):
        self.path = path
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def _read_db(self) -> Optional[Dict[str, Any]]:
        try:
            with open(self.path, "r") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Registry file {self.path} is not valid JSON: {e}")
            raise StorageError(f"Corrupted registry file {self.path}") from e

    def _write_db(self, data: Dict[str, Any]):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)

    def load_state(self) -> Optional[RegistryState]:
        data = self._read_db()
        if data is None:
            return None
        try:
            return RegistryState.model_validate(data)
        except ValidationError as e:
            logger.error(f"Registry file {self.path} has an invalid layout: {e}")
            raise StorageError(f"Invalid registry state in {self.path}") from e

    def save_state(self, state: RegistryState) -> None:
        try:
            self._write_db(state.model_dump(mode="json"))
        except OSError as e:
            logger.error(f"Failed to write registry file {self.path}: {e}")
            raise StorageError(f"Could not write {self.path}") from e
