"""
Pytest configuration and fixtures
"""

import os
import sys
from datetime import datetime, timezone

import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# Set test environment variables
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "console")

from repair_shop.models import ProductType, TicketDraft, TicketStatus  # noqa: E402
from repair_shop.services import ReportGenerator, SettingsRepository, TicketRepository  # noqa: E402
from repair_shop.storage import MemoryRecordStore, StorageWriteError  # noqa: E402


class FailingWriteStore(MemoryRecordStore):
    """Memory store whose writes and removals always fail"""

    async def write(self, key, value):
        raise StorageWriteError("disk full", key=key)

    async def remove(self, key):
        raise StorageWriteError("disk full", key=key)


@pytest.fixture
def failing_store():
    return FailingWriteStore()


@pytest.fixture
def memory_store():
    return MemoryRecordStore()


@pytest.fixture
def ticket_repo(memory_store):
    return TicketRepository(memory_store)


@pytest.fixture
def settings_repo(memory_store):
    return SettingsRepository(memory_store)


@pytest.fixture
def report_generator(ticket_repo):
    return ReportGenerator(ticket_repo)


@pytest.fixture
def make_draft():
    """Factory for valid ticket drafts; keyword arguments override defaults"""

    def _make(**overrides) -> TicketDraft:
        fields = {
            "client_name": "Ana Pop",
            "client_phone": "0722111222",
            "product_type": ProductType.LAPTOP,
            "product_model": "Dell XPS",
            "problem_description": "Nu pornește",
            "cost": 250,
            "status": TicketStatus.PENDING,
            "technician_name": "Ion",
            "date_received": datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return TicketDraft(**fields)

    return _make


@pytest.fixture
def mock_redis(mocker):
    """Mock Redis client"""
    mock = mocker.MagicMock()
    mock.get = mocker.AsyncMock(return_value=None)
    mock.set = mocker.AsyncMock(return_value=True)
    mock.delete = mocker.AsyncMock(return_value=1)
    mock.ping = mocker.AsyncMock(return_value=True)
    mock.aclose = mocker.AsyncMock()
    return mock
