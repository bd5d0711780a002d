"""
Record Store: whole-value JSON storage under fixed logical keys

There is no indexing or querying. Callers read a whole collection, change it
in memory and write it back, so a single-record mutation costs O(collection).
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

TICKETS_KEY = "@it_service_manager/tickets"
SETTINGS_KEY = "@it_service_manager/settings"


class StorageError(Exception):
    """Base error of the record store"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StorageReadError(StorageError):
    """Backend unavailable or stored content is not valid JSON"""


class StorageWriteError(StorageError):
    """Backend unavailable, read-only or out of space"""


def encode_value(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageWriteError(f"Value for {key} is not JSON serializable: {e}", key=key) from e


def decode_value(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageReadError(f"Stored value for {key} is not valid JSON: {e}", key=key) from e


class RecordStore(ABC):
    """
    Abstract key -> JSON value store

    Implementations must make write() atomic from the caller's point of view:
    a concurrent read sees either the old or the new value, never a mix.
    """

    async def connect(self) -> None:
        """Open backend resources (no-op by default)"""

    async def close(self) -> None:
        """Release backend resources (no-op by default)"""

    @abstractmethod
    async def read(self, key: str) -> Optional[Any]:
        """
        Read the value stored under key

        Returns:
            Decoded JSON value or None if the key was never written

        Raises:
            StorageReadError: Backend failure or unparsable content
        """

    @abstractmethod
    async def write(self, key: str, value: Any) -> None:
        """
        Replace the whole value under key

        Raises:
            StorageWriteError: Backend failure
        """

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Delete key; a missing key is not an error

        Raises:
            StorageWriteError: Backend failure
        """

    async def health_check(self) -> bool:
        """True if the backend answers reads"""
        try:
            await self.read(SETTINGS_KEY)
            return True
        except StorageError:
            return False
