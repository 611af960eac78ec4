"""Shared fixtures."""

import pytest

from jobbot.config import Config
from jobbot.models import ApplicationRecord
from jobbot.storage import MemoryStore, StorageError


class FailingStore:
    """Store whose writes fail and whose reads raise."""

    def __init__(self):
        self.attempts = 0

    def append(self, record: ApplicationRecord) -> bool:
        self.attempts += 1
        return False

    def list_all(self) -> list[ApplicationRecord]:
        raise StorageError("sheet unavailable")


@pytest.fixture
def config():
    return Config(spreadsheet_id="sheet-123")


@pytest.fixture
def unconfigured():
    return Config()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()
