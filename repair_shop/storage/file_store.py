"""
File-backed record store: one JSON file per key under a data directory
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog

from .base import (
    RecordStore,
    StorageReadError,
    StorageWriteError,
    decode_value,
    encode_value,
)

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def key_to_filename(key: str) -> str:
    """'@it_service_manager/tickets' -> 'it_service_manager_tickets.json'"""
    name = _UNSAFE_CHARS.sub("_", key).strip("_")
    return f"{name or 'record'}.json"


class FileRecordStore(RecordStore):
    """
    Writes go to a temporary file in the same directory which then replaces
    the target with os.replace, so readers never see a half-written file.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, data_dir: str | os.PathLike):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / key_to_filename(key)

    async def connect(self) -> None:
        try:
            await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            logger.error("data_dir_create_failed", data_dir=str(self.data_dir), error=str(e))
            raise StorageWriteError(f"Cannot create data directory {self.data_dir}: {e}") from e
        logger.info("file_store_ready", data_dir=str(self.data_dir))

    async def read(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        try:
            raw = await asyncio.to_thread(self._read_text, path)
        except OSError as e:
            raise StorageReadError(f"Cannot read {path}: {e}", key=key) from e
        if raw is None:
            return None
        return decode_value(key, raw)

    async def write(self, key: str, value: Any) -> None:
        data = encode_value(key, value)
        path = self.path_for(key)
        try:
            await asyncio.to_thread(self._replace_text, path, data)
        except OSError as e:
            raise StorageWriteError(f"Cannot write {path}: {e}", key=key) from e

    async def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Cannot remove {path}: {e}", key=key) from e

    @staticmethod
    def _read_text(path: Path) -> Optional[str]:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def _replace_text(path: Path, data: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
