"""
Прикладной слой учета бронирований.

Содержит сервис приложения, который координирует
взаимодействие между интерфейсом пользователя и хранилищем записей.
"""

from typing import List, Optional, Union

from pydantic import BaseModel

from . import interfaces as ports
from .domain import BookingRecord, EditableField, MealType, PricingPolicy, RoomStatus
from .infrastructure import ConsoleLogger

AFFIRMATIVE_ANSWERS = frozenset({"y", "yes"})


def is_affirmative(answer: str) -> bool:
    """Явное согласие: y или yes в любом регистре."""
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


# DTO (Data Transfer Objects) для входящих данных


class BookRoomRequest(BaseModel):
    """Запрос на бронирование номера."""

    room_no: int
    name: str = ""
    address: str = ""
    phone: str = ""
    days: int


class UpdateRecordRequest(BaseModel):
    """Запрос на изменение одного поля записи."""

    room_no: int
    field: EditableField
    value: Union[int, str]


class OrderFoodRequest(BaseModel):
    """Запрос на заказ еды в номер."""

    room_no: int
    meal: MealType
    people_count: int


# DTO для исходящих данных


class FoodOrderReceipt(BaseModel):
    """Результат заказа еды."""

    meal: MealType
    people_count: int
    charge: int
    record: BookingRecord


# Сервисы приложения


class HotelApplicationService:
    """Сервис приложения: бронирование, просмотр, изменение, выезд, питание."""

    def __init__(
        self, store: ports.IRecordStore, logger: Optional[ports.ILogger] = None
    ):
        """Инициализирует сервис."""
        self._store = store
        self._logger = logger or ConsoleLogger()

    def room_status(self, room_no: int) -> RoomStatus:
        return self._store.status(room_no)

    def book_room(self, request: BookRoomRequest) -> BookingRecord:
        """Бронирует свободный номер."""
        record = self._store.create(
            room_no=request.room_no,
            name=request.name,
            address=request.address,
            phone=request.phone,
            days=request.days,
        )
        self._logger.debug(
            f"Номер {record.room_no} забронирован",
            room_type=record.room_type.value,
            room_cost=record.room_cost,
        )
        return record

    def get_record(self, room_no: int) -> BookingRecord:
        """Возвращает запись о занятом номере."""
        return self._store.get(room_no)

    def list_records(self) -> List[BookingRecord]:
        """Возвращает все занятые номера, упорядоченные по номеру комнаты."""
        return sorted(self._store.list(), key=lambda record: record.room_no)

    def update_record(self, request: UpdateRecordRequest) -> BookingRecord:
        """Изменяет имя, адрес, телефон или срок проживания."""
        record = self._store.update_field(request.room_no, request.field, request.value)
        self._logger.debug(
            f"Запись номера {record.room_no} изменена", field=request.field.value
        )
        return record

    def checkout_preview(self, room_no: int) -> BookingRecord:
        """Данные для чека перед выездом."""
        return self._store.get(room_no)

    def checkout(self, room_no: int, confirmed: bool) -> Optional[BookingRecord]:
        """Оформляет выезд. Без подтверждения хранилище не меняется."""
        if not confirmed:
            # Проверяем, что номер занят, даже если выезд отменен
            self._store.get(room_no)
            return None

        record = self._store.remove(room_no)
        self._logger.debug(
            f"Номер {room_no} освобожден",
            room_cost=record.room_cost,
            food_bill=record.food_bill,
        )
        return record

    def order_food(self, request: OrderFoodRequest) -> FoodOrderReceipt:
        """Добавляет стоимость заказа к счету за питание."""
        # Номер должен быть занят до расчета стоимости
        self._store.get(request.room_no)
        charge = PricingPolicy.meal_charge(request.meal, request.people_count)
        record = self._store.add_food_charge(request.room_no, charge)
        self._logger.debug(
            f"Заказ в номер {record.room_no}",
            meal=request.meal.value,
            charge=charge,
            food_bill=record.food_bill,
        )
        return FoodOrderReceipt(
            meal=request.meal,
            people_count=request.people_count,
            charge=charge,
            record=record,
        )


def create_hotel_service(
    store: ports.IRecordStore, logger: Optional[ports.ILogger] = None
) -> HotelApplicationService:
    """Фабрика для создания сервиса приложения."""
    return HotelApplicationService(store=store, logger=logger)
