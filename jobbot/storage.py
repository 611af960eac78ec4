"""Storage interface for tracked applications."""

import logging
from typing import Protocol

from .models import ApplicationRecord

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when applications cannot be read from the store."""


class ApplicationStore(Protocol):
    def append(self, record: ApplicationRecord) -> bool:
        """Persist a record. Returns False if the write failed."""
        ...

    def list_all(self) -> list[ApplicationRecord]:
        """Return every stored record in insertion order."""
        ...


class MemoryStore:
    """In-process store, used when no Google Sheet is configured."""

    def __init__(self) -> None:
        self._records: list[ApplicationRecord] = []

    def append(self, record: ApplicationRecord) -> bool:
        self._records.append(record)
        logger.info(f"Stored application in memory: {record.company} - {record.role}")
        return True

    def list_all(self) -> list[ApplicationRecord]:
        return list(self._records)
