"""
Тесты сервиса приложения.
"""
import pytest

from hotel_records.application import (
    BookRoomRequest,
    HotelApplicationService,
    OrderFoodRequest,
    UpdateRecordRequest,
    create_hotel_service,
    is_affirmative,
)
from hotel_records.domain import (
    BusinessRuleValidationException,
    EditableField,
    InvalidRoomException,
    MealType,
    RecordNotFoundException,
    RoomOccupiedException,
    RoomStatus,
    RoomType,
)
from hotel_records.infrastructure import InMemoryRecordStore


def _book(service: HotelApplicationService, room_no: int, days: int, name: str = "Иван"):
    return service.book_room(
        BookRoomRequest(room_no=room_no, name=name, address="Москва", phone="123", days=days)
    )


def test_full_stay_scenario(service: HotelApplicationService):
    """Бронирование, два заказа еды и выезд."""
    record = _book(service, 1, 3)
    assert record.room_type == RoomType.DELUXE
    assert record.room_cost == 30000
    assert record.food_bill == 0

    receipt = service.order_food(
        OrderFoodRequest(room_no=1, meal=MealType.BREAKFAST, people_count=2)
    )
    assert receipt.charge == 1000
    assert receipt.record.food_bill == 1000

    receipt = service.order_food(
        OrderFoodRequest(room_no=1, meal=MealType.DINNER, people_count=1)
    )
    assert receipt.record.food_bill == 2200

    assert service.checkout_preview(1).total == 32200
    final = service.checkout(1, confirmed=True)
    assert final is not None
    assert final.total == 32200
    assert service.room_status(1) is RoomStatus.VACANT


def test_update_days_scenario(service: HotelApplicationService):
    record = _book(service, 55, 2)
    assert record.room_type == RoomType.EXECUTIVE
    assert record.room_cost == 25000

    record = service.update_record(
        UpdateRecordRequest(room_no=55, field=EditableField.DAYS, value=5)
    )

    assert record.room_cost == 62500
    assert record.room_type == RoomType.EXECUTIVE


def test_update_name(service: HotelApplicationService):
    _book(service, 20, 1)

    record = service.update_record(
        UpdateRecordRequest(room_no=20, field="name", value="Петр")
    )

    assert record.name == "Петр"
    assert service.get_record(20).name == "Петр"


@pytest.mark.parametrize("room_no", [0, 101])
def test_book_invalid_room(service: HotelApplicationService, room_no):
    with pytest.raises(InvalidRoomException):
        _book(service, room_no, 1)
    assert service.list_records() == []


def test_book_occupied_room(service: HotelApplicationService):
    _book(service, 7, 2, name="Иван")

    with pytest.raises(RoomOccupiedException):
        _book(service, 7, 5, name="Петр")

    record = service.get_record(7)
    assert record.name == "Иван"
    assert record.days == 2


def test_list_records_sorted(service: HotelApplicationService):
    for room_no in (90, 3, 51):
        _book(service, room_no, 1)

    assert [r.room_no for r in service.list_records()] == [3, 51, 90]


def test_checkout_without_confirmation_keeps_record(service: HotelApplicationService):
    _book(service, 5, 2)

    assert service.checkout(5, confirmed=False) is None
    assert service.room_status(5) is RoomStatus.BOOKED


def test_checkout_vacant_room(service: HotelApplicationService):
    with pytest.raises(RecordNotFoundException):
        service.checkout(5, confirmed=True)
    with pytest.raises(RecordNotFoundException):
        service.checkout(5, confirmed=False)


def test_order_food_for_vacant_room(service: HotelApplicationService):
    with pytest.raises(RecordNotFoundException):
        service.order_food(
            OrderFoodRequest(room_no=9, meal=MealType.LUNCH, people_count=1)
        )


def test_order_food_sum_of_orders(service: HotelApplicationService):
    """Счет за питание равен сумме всех заказов."""
    _book(service, 60, 1)
    orders = [
        (MealType.BREAKFAST, 3),
        (MealType.LUNCH, 0),
        (MealType.DINNER, 2),
        (MealType.LUNCH, 4),
    ]
    for meal, people in orders:
        service.order_food(OrderFoodRequest(room_no=60, meal=meal, people_count=people))

    assert service.get_record(60).food_bill == 3 * 500 + 2 * 1200 + 4 * 1000


def test_order_food_negative_people(service: HotelApplicationService):
    _book(service, 60, 1)
    with pytest.raises(BusinessRuleValidationException):
        service.order_food(
            OrderFoodRequest(room_no=60, meal=MealType.LUNCH, people_count=-2)
        )
    assert service.get_record(60).food_bill == 0


def test_actions_are_logged(service: HotelApplicationService, logger):
    _book(service, 1, 1)
    service.checkout(1, confirmed=True)

    assert logger.levels() == ["debug", "debug"]


def test_create_hotel_service():
    service = create_hotel_service(InMemoryRecordStore())
    assert service.room_status(1) is RoomStatus.VACANT


@pytest.mark.parametrize(
    "answer, expected",
    [("y", True), ("Y", True), (" yes ", True), ("n", False), ("", False), ("да", False)],
)
def test_is_affirmative(answer, expected):
    assert is_affirmative(answer) is expected


def test_order_food_beyond_storable_bill_is_rejected(service: HotelApplicationService):
    """Заказ, после которого счет не поместится в файл, отклоняется целиком."""
    _book(service, 60, 1)
    with pytest.raises(BusinessRuleValidationException):
        service.order_food(
            OrderFoodRequest(room_no=60, meal=MealType.DINNER, people_count=10**16)
        )
    assert service.get_record(60).food_bill == 0


def test_update_days_beyond_storable_limit_is_rejected(service: HotelApplicationService):
    _book(service, 90, 2)
    with pytest.raises(BusinessRuleValidationException):
        service.update_record(
            UpdateRecordRequest(room_no=90, field=EditableField.DAYS, value=10**15)
        )
    assert service.get_record(90).room_cost == 30000
