"""
Интерфейсы (порты) учета бронирований.
"""

from __future__ import annotations

from typing import Any, List, Protocol, Union

from .domain import BookingRecord, EditableField, RoomStatus


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IRecordStore(Protocol):
    """Интерфейс хранилища записей о бронировании, ключ - номер комнаты."""

    def status(self, room_no: int) -> RoomStatus: ...
    def create(
        self, room_no: int, name: str, address: str, phone: str, days: int
    ) -> BookingRecord: ...
    def get(self, room_no: int) -> BookingRecord: ...
    def list(self) -> List[BookingRecord]: ...
    def update_field(
        self,
        room_no: int,
        field: Union[EditableField, str],
        value: Union[int, str],
    ) -> BookingRecord: ...
    def add_food_charge(self, room_no: int, amount: int) -> BookingRecord: ...
    def remove(self, room_no: int) -> BookingRecord: ...
    def __len__(self) -> int: ...


class IRecordCodec(Protocol):
    """Интерфейс преобразования хранилища в байты и обратно."""

    def save(self, store: IRecordStore) -> bytes: ...
    def load(self, data: bytes) -> IRecordStore: ...
