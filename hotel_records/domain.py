"""
Доменная модель учета бронирований отеля.

Содержит запись о бронировании номера, перечисления, ценовую политику
и иерархию доменных исключений.
"""

from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

MIN_ROOM_NO = 1
MAX_ROOM_NO = 100


# Перечисления


class RoomType(str, Enum):
    """Типы номеров, определяемые диапазоном номера комнаты."""

    DELUXE = "Deluxe"
    EXECUTIVE = "Executive"
    PRESIDENTIAL = "Presidential"


class MealType(str, Enum):
    """Приемы пищи в ресторане отеля."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class RoomStatus(str, Enum):
    """Состояние номера с точки зрения хранилища."""

    VACANT = "vacant"
    BOOKED = "booked"
    INVALID = "invalid"


class EditableField(str, Enum):
    """Поля записи, которые разрешено изменять после бронирования."""

    NAME = "name"
    ADDRESS = "address"
    PHONE = "phone"
    DAYS = "days"


# Исключения


class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class InvalidRoomException(DomainException):
    """Номер комнаты вне допустимого диапазона."""

    def __init__(self, room_no: int):
        super().__init__(
            f"Номер {room_no} не существует "
            f"(допустимый диапазон {MIN_ROOM_NO}-{MAX_ROOM_NO})"
        )
        self.room_no = room_no


class RoomOccupiedException(DomainException):
    """Попытка забронировать уже занятый номер."""

    def __init__(self, room_no: int):
        super().__init__(f"Номер {room_no} уже забронирован")
        self.room_no = room_no


class RecordNotFoundException(DomainException):
    """Операция над свободным или несуществующим номером."""

    def __init__(self, room_no: int):
        super().__init__(f"Номер {room_no} свободен или не существует")
        self.room_no = room_no


class CorruptDataException(DomainException):
    """Поток с сохраненными данными поврежден."""

    pass


def is_valid_room_no(room_no: int) -> bool:
    """Проверяет, входит ли номер комнаты в допустимый диапазон."""
    return MIN_ROOM_NO <= room_no <= MAX_ROOM_NO


class PricingPolicy:
    """Политика цен: стоимость проживания и питания."""

    # (первый номер, последний номер, тип, цена за сутки)
    ROOM_BANDS: Tuple[Tuple[int, int, RoomType, int], ...] = (
        (1, 50, RoomType.DELUXE, 10000),
        (51, 80, RoomType.EXECUTIVE, 12500),
        (81, 100, RoomType.PRESIDENTIAL, 15000),
    )

    # Цена на одного человека
    MEAL_RATES: Dict[MealType, int] = {
        MealType.BREAKFAST: 500,
        MealType.LUNCH: 1000,
        MealType.DINNER: 1200,
    }

    # Суммы хранятся в файле как знаковые 64-битные целые
    MAX_AMOUNT = 2**63 - 1
    MAX_DAYS = MAX_AMOUNT // max(rate for _, _, _, rate in ROOM_BANDS)

    @classmethod
    def room_type_and_rate(cls, room_no: int) -> Tuple[RoomType, int]:
        """Возвращает тип номера и цену за сутки по номеру комнаты."""
        for first, last, room_type, rate in cls.ROOM_BANDS:
            if first <= room_no <= last:
                return room_type, rate
        raise InvalidRoomException(room_no)

    @classmethod
    def validate_days(cls, days: int) -> None:
        """Проверяет, что срок проживания - положительное целое число."""
        if isinstance(days, bool) or not isinstance(days, int):
            raise BusinessRuleValidationException(
                "Количество дней должно быть целым числом"
            )
        if days < 1:
            raise BusinessRuleValidationException(
                "Минимальный срок проживания - 1 день"
            )
        if days > cls.MAX_DAYS:
            raise BusinessRuleValidationException(
                f"Максимальный срок проживания - {cls.MAX_DAYS} дней"
            )

    @classmethod
    def base_cost(cls, room_no: int, days: int) -> int:
        """Стоимость проживания: количество дней, умноженное на цену за сутки."""
        cls.validate_days(days)
        _, rate = cls.room_type_and_rate(room_no)
        return days * rate

    @classmethod
    def meal_rate(cls, meal: MealType) -> int:
        return cls.MEAL_RATES[MealType(meal)]

    @classmethod
    def meal_charge(cls, meal: MealType, people_count: int) -> int:
        """Стоимость заказа; заказ на 0 человек допустим и ничего не стоит."""
        if isinstance(people_count, bool) or not isinstance(people_count, int):
            raise BusinessRuleValidationException(
                "Количество человек должно быть целым числом"
            )
        if people_count < 0:
            raise BusinessRuleValidationException(
                "Количество человек не может быть отрицательным"
            )
        return people_count * cls.meal_rate(meal)


class BookingRecord(BaseModel):
    """Запись о бронировании номера.

    Номер комнаты служит ключом записи и не меняется после создания.
    Тип номера определяется диапазоном, в который попадает номер комнаты,
    а стоимость проживания всегда вычисляется из срока проживания.
    """

    model_config = ConfigDict(validate_assignment=True)

    room_no: int = Field(..., ge=MIN_ROOM_NO, le=MAX_ROOM_NO, frozen=True)
    room_type: RoomType = Field(..., frozen=True)
    name: str = ""
    address: str = ""
    phone: str = ""
    days: int = Field(..., gt=0, le=PricingPolicy.MAX_DAYS)
    food_bill: int = Field(0, ge=0, le=PricingPolicy.MAX_AMOUNT)

    @model_validator(mode="after")
    def room_type_matches_band(self) -> "BookingRecord":
        expected, _ = PricingPolicy.room_type_and_rate(self.room_no)
        if self.room_type != expected:
            raise ValueError(
                f"Номер {self.room_no} относится к типу {expected.value}, "
                f"а не {self.room_type.value}"
            )
        return self

    @computed_field  # type: ignore[misc]
    @property
    def room_cost(self) -> int:
        return PricingPolicy.base_cost(self.room_no, self.days)

    @property
    def total(self) -> int:
        """Итог к оплате: проживание плюс питание."""
        return self.room_cost + self.food_bill

    @classmethod
    def create(
        cls,
        room_no: int,
        name: str,
        address: str,
        phone: str,
        days: int,
    ) -> "BookingRecord":
        """Создает новую запись со свежим счетом за питание."""
        room_type, _ = PricingPolicy.room_type_and_rate(room_no)
        PricingPolicy.validate_days(days)
        return cls(
            room_no=room_no,
            room_type=room_type,
            name=name,
            address=address,
            phone=phone,
            days=days,
            food_bill=0,
        )

    def change_days(self, days: int) -> None:
        """Меняет срок проживания; стоимость пересчитывается автоматически."""
        PricingPolicy.validate_days(days)
        self.days = days

    def add_food_charge(self, amount: int) -> None:
        """Добавляет сумму к счету за питание. Счет только растет."""
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise BusinessRuleValidationException("Сумма должна быть целым числом")
        if amount < 0:
            raise BusinessRuleValidationException(
                "Сумма за питание не может быть отрицательной"
            )
        if self.food_bill + amount > PricingPolicy.MAX_AMOUNT:
            raise BusinessRuleValidationException(
                f"Счет за питание не может превышать {PricingPolicy.MAX_AMOUNT}"
            )
        self.food_bill += amount
