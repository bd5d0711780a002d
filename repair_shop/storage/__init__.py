"""
Record Store backends
"""

from .base import (
    SETTINGS_KEY,
    TICKETS_KEY,
    RecordStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from .factory import StorageBackend, create_record_store
from .file_store import FileRecordStore
from .memory_store import MemoryRecordStore
from .redis_store import RedisRecordStore

__all__ = [
    "SETTINGS_KEY",
    "TICKETS_KEY",
    "RecordStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "StorageBackend",
    "create_record_store",
    "FileRecordStore",
    "MemoryRecordStore",
    "RedisRecordStore",
]
