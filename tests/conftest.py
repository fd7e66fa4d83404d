"""
Общие фикстуры для тестов учета бронирований.
"""
from typing import Any, List, Tuple

import pytest

from hotel_records.application import HotelApplicationService
from hotel_records.infrastructure import InMemoryRecordStore


class RecordingLogger:
    """Логгер, запоминающий сообщения вместо вывода в консоль."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str, dict]] = []

    def _record(self, level: str, message: str, **kwargs: Any) -> None:
        self.messages.append((level, message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._record("info", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._record("error", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._record("warning", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._record("debug", message, **kwargs)

    def levels(self) -> List[str]:
        return [level for level, _, _ in self.messages]


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Пустое хранилище."""
    return InMemoryRecordStore()


@pytest.fixture
def service(store: InMemoryRecordStore, logger: RecordingLogger) -> HotelApplicationService:
    """Сервис приложения с чистым хранилищем."""
    return HotelApplicationService(store, logger=logger)
