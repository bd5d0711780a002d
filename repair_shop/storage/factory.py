"""
Factory for record store backends
"""

from enum import Enum
from typing import Optional

from .base import RecordStore
from .file_store import FileRecordStore
from .memory_store import MemoryRecordStore
from .redis_store import RedisRecordStore
from ..config import Settings, settings as default_settings


class StorageBackend(str, Enum):
    """Supported record store backends"""
    FILE = "file"
    REDIS = "redis"
    MEMORY = "memory"


def create_record_store(config: Optional[Settings] = None) -> RecordStore:
    """
    Build the record store selected by config.storage_backend

    Raises:
        ValueError: Unknown backend name
    """
    config = config or default_settings

    try:
        backend = StorageBackend(config.storage_backend.lower())
    except ValueError:
        raise ValueError(
            f"Unknown storage backend '{config.storage_backend}'. "
            f"Available: {[b.value for b in StorageBackend]}"
        )

    if backend is StorageBackend.FILE:
        return FileRecordStore(config.data_dir)
    if backend is StorageBackend.REDIS:
        return RedisRecordStore(config.redis_url, key_prefix=config.redis_key_prefix)
    return MemoryRecordStore()
