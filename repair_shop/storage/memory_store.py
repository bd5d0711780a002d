"""
In-process record store (tests, demos, ephemeral runs)
"""

from typing import Any, Dict, Optional

from .base import RecordStore, decode_value, encode_value


class MemoryRecordStore(RecordStore):
    """
    Keeps values as JSON text so callers never share mutable objects
    with the store, same as with the durable backends.
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    async def read(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return decode_value(key, raw)

    async def write(self, key: str, value: Any) -> None:
        self._data[key] = encode_value(key, value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def raw(self, key: str) -> Optional[str]:
        """Stored JSON text for key"""
        return self._data.get(key)

    def put_raw(self, key: str, raw: str) -> None:
        """Store text as-is, bypassing encoding"""
        self._data[key] = raw
