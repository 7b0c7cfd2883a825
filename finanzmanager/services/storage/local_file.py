"""
Local File Storage Implementation

Keeps all slots in one JSON file: {"<slot name>": "<serialized value>"}.
This mirrors a browser's localStorage - one flat string map on disk.

Writes go to a temporary file next to the target and are moved into
place with os.replace, so a crash mid-write never leaves a truncated file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finanzmanager.services.storage.interface import (
    StateStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class LocalFileStateStorage(StateStorageInterface):
    """
    JSON-file backed key-value storage.

    The whole file is read on every access; it only ever holds a handful
    of slots.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}")
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Storage file {self._path} is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not hold a key-value map")
        return data

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    async def load_slot(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Slot {key} does not hold a string value")
        return value

    async def save_slot(self, key: str, value: str) -> bool:
        data = self._read_all()
        data[key] = value
        try:
            self._write_all(data)
        except OSError as e:
            logger.error("storage_write_failed", path=str(self._path), key=key, error=str(e))
            raise StorageError(f"Cannot write {self._path}: {e}")
        return True
