"""
Консольное меню учета бронирований.

Тонкий слой представления: читает ввод, вызывает сервис приложения
и печатает результат. Функции ввода и вывода можно подменить в тестах.
"""

from typing import Callable, Optional

from .application import (
    BookRoomRequest,
    HotelApplicationService,
    OrderFoodRequest,
    UpdateRecordRequest,
    create_hotel_service,
    is_affirmative,
)
from .bootstrap import bootstrap_app
from .config import HotelConfig
from .domain import (
    MAX_ROOM_NO,
    MIN_ROOM_NO,
    DomainException,
    EditableField,
    MealType,
    PricingPolicy,
    RoomStatus,
)

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]

MAIN_MENU = """
 ********* ГЛАВНОЕ МЕНЮ *********
 1. Забронировать номер
 2. Информация о госте
 3. Занятые номера
 4. Изменить данные гостя
 5. Заказать еду из ресторана
 6. Выход"""

EDIT_MENU = """
 МЕНЮ ИЗМЕНЕНИЙ:
 1. Изменить данные гостя
 2. Выезд гостя"""

MODIFY_MENU = """
 ЧТО ИЗМЕНИТЬ:
 1. Имя
 2. Адрес
 3. Телефон
 4. Количество дней проживания"""

MEAL_MENU = """
 МЕНЮ РЕСТОРАНА:
 1. Завтрак
 2. Обед
 3. Ужин"""

MODIFY_CHOICES = {
    1: EditableField.NAME,
    2: EditableField.ADDRESS,
    3: EditableField.PHONE,
    4: EditableField.DAYS,
}

MEAL_CHOICES = {
    1: MealType.BREAKFAST,
    2: MealType.LUNCH,
    3: MealType.DINNER,
}

FIELD_PROMPTS = {
    EditableField.NAME: " Новое имя: ",
    EditableField.ADDRESS: " Новый адрес: ",
    EditableField.PHONE: " Новый телефон: ",
    EditableField.DAYS: " Новое количество дней: ",
}

# Ширина колонок таблицы занятых номеров
LIST_COLUMNS = (
    ("Номер", 6),
    ("Гость", 17),
    ("Адрес", 16),
    ("Тип", 13),
    ("Телефон", 13),
    ("Дней", 5),
    ("Итого", 10),
)


class HotelConsole:
    """Интерактивное меню поверх сервиса приложения."""

    def __init__(
        self,
        service: HotelApplicationService,
        input_func: InputFunc = input,
        output_func: OutputFunc = print,
    ):
        self._service = service
        self._input = input_func
        self._output = output_func

    def run(self) -> None:
        """Главный цикл: работает до выбора пункта 'Выход'."""
        actions = {
            1: self.book_room,
            2: self.show_record,
            3: self.list_records,
            4: self.edit_record,
            5: self.order_food,
        }
        while True:
            self._output(MAIN_MENU)
            choice = self._ask_int(" Ваш выбор: ")
            if choice == 6:
                self._output(" Завершение работы. До свидания!")
                return
            action = actions.get(choice)
            if action is None:
                self._output(" Неверный выбор. Попробуйте еще раз.")
                continue
            try:
                action()
            except DomainException as exc:
                self._output(f" Ошибка: {exc}")

    def book_room(self) -> None:
        self._output(self._room_bands_table())
        room_no = self._ask_int(f" Номер комнаты ({MIN_ROOM_NO}-{MAX_ROOM_NO}): ")
        if room_no is None:
            return

        status = self._service.room_status(room_no)
        if status is RoomStatus.BOOKED:
            self._output(f" Извините, номер {room_no} уже забронирован.")
            return
        if status is RoomStatus.INVALID:
            self._output(self._invalid_room_message(room_no))
            return

        name = self._input(" Имя: ")
        address = self._input(" Адрес: ")
        phone = self._input(" Телефон: ")
        days = self._ask_int(" Количество дней: ")
        if days is None:
            return

        record = self._service.book_room(
            BookRoomRequest(
                room_no=room_no, name=name, address=address, phone=phone, days=days
            )
        )
        self._output(f" Номер {record.room_no} забронирован для {record.name}.")

    def show_record(self) -> None:
        room_no = self._ask_booked_room(" Номер комнаты: ")
        if room_no is None:
            return
        record = self._service.get_record(room_no)
        self._output(
            "\n".join(
                [
                    "",
                    " Данные гостя",
                    " ------------",
                    f" Номер комнаты: {record.room_no}",
                    f" Имя: {record.name}",
                    f" Адрес: {record.address}",
                    f" Телефон: {record.phone}",
                    f" Срок проживания: {record.days} дн.",
                    f" Тип номера: {record.room_type.value}",
                    f" Стоимость проживания: {record.room_cost}",
                    f" Счет за питание: {record.food_bill}",
                    f" Итого: {record.total}",
                ]
            )
        )

    def list_records(self) -> None:
        records = self._service.list_records()
        border = "+" + "+".join("-" * width for _, width in LIST_COLUMNS) + "+"
        lines = [
            "",
            " СПИСОК ЗАНЯТЫХ НОМЕРОВ",
            border,
            "|" + "|".join(title.ljust(width) for title, width in LIST_COLUMNS) + "|",
            border,
        ]
        if not records:
            lines.append(" Нет занятых номеров.")
        for record in records:
            values = (
                record.room_no,
                record.name,
                record.address,
                record.room_type.value,
                record.phone,
                record.days,
                record.total,
            )
            lines.append(
                "|"
                + "|".join(
                    str(value)[:width].rjust(width)
                    for value, (_, width) in zip(values, LIST_COLUMNS)
                )
                + "|"
            )
        lines.append(border)
        self._output("\n".join(lines))

    def edit_record(self) -> None:
        self._output(EDIT_MENU)
        choice = self._ask_int(" Ваш выбор: ")
        if choice == 1:
            self.modify_record()
        elif choice == 2:
            self.checkout()
        else:
            self._output(" Неверный выбор. Попробуйте еще раз.")

    def modify_record(self) -> None:
        self._output(MODIFY_MENU)
        field = MODIFY_CHOICES.get(self._ask_int(" Ваш выбор: "))  # type: ignore[arg-type]
        if field is None:
            self._output(" Неверный выбор. Попробуйте еще раз.")
            return

        # Номер должен быть занят до запроса нового значения
        room_no = self._ask_booked_room(" Номер комнаты: ")
        if room_no is None:
            return

        if field is EditableField.DAYS:
            value = self._ask_int(FIELD_PROMPTS[field])
            if value is None:
                return
        else:
            value = self._input(FIELD_PROMPTS[field])

        record = self._service.update_record(
            UpdateRecordRequest(room_no=room_no, field=field, value=value)
        )
        if field is EditableField.DAYS:
            self._output(
                f" Данные изменены. Новая стоимость проживания: {record.room_cost}."
            )
        else:
            self._output(" Данные изменены.")

    def checkout(self) -> None:
        room_no = self._ask_booked_room(" Номер комнаты для выезда: ")
        if room_no is None:
            return
        record = self._service.checkout_preview(room_no)
        self._output(
            "\n".join(
                [
                    f" Имя: {record.name}",
                    f" Адрес: {record.address}",
                    f" Телефон: {record.phone}",
                    f" Итого к оплате: {record.total}",
                ]
            )
        )
        answer = self._input(" Оформить выезд гостя (y/n): ")
        removed = self._service.checkout(room_no, confirmed=is_affirmative(answer))
        if removed is None:
            self._output(" Выезд отменен.")
        else:
            self._output(f" Гость выехал. Номер {room_no} свободен.")

    def order_food(self) -> None:
        # Без брони дальнейшие вопросы не задаем
        room_no = self._ask_booked_room(" Номер комнаты для заказа: ")
        if room_no is None:
            return

        self._output(MEAL_MENU)
        meal = MEAL_CHOICES.get(self._ask_int(" Ваш выбор: "))  # type: ignore[arg-type]
        if meal is None:
            self._output(" Неверный выбор блюда.")
            return
        people_count = self._ask_int(" Количество человек: ")
        if people_count is None:
            return

        receipt = self._service.order_food(
            OrderFoodRequest(room_no=room_no, meal=meal, people_count=people_count)
        )
        self._output(
            f" {receipt.charge} добавлено к счету ({receipt.meal.value}). "
            f"Счет за питание: {receipt.record.food_bill}."
        )

    def _ask_booked_room(self, prompt: str) -> Optional[int]:
        """Спрашивает номер комнаты и сообщает точную причину, если он не занят."""
        room_no = self._ask_int(prompt)
        if room_no is None:
            return None
        status = self._service.room_status(room_no)
        if status is RoomStatus.INVALID:
            self._output(self._invalid_room_message(room_no))
            return None
        if status is RoomStatus.VACANT:
            self._output(f" Извините, номер {room_no} свободен.")
            return None
        return room_no

    @staticmethod
    def _invalid_room_message(room_no: int) -> str:
        return (
            f" Извините, номера {room_no} не существует "
            f"(допустимый диапазон {MIN_ROOM_NO}-{MAX_ROOM_NO})."
        )

    def _ask_int(self, prompt: str) -> Optional[int]:
        raw = self._input(prompt)
        try:
            return int(raw.strip())
        except ValueError:
            self._output(" Ожидалось целое число.")
            return None

    @staticmethod
    def _room_bands_table() -> str:
        lines = [" +--------+--------------+-------------+"]
        lines.append(" | Номера  | Тип          | Цена/сутки  |")
        lines.append(" +--------+--------------+-------------+")
        for first, last, room_type, rate in PricingPolicy.ROOM_BANDS:
            lines.append(
                f" | {f'{first}-{last}':<6} | {room_type.value:<12} | {rate:<11} |"
            )
        lines.append(" +--------+--------------+-------------+")
        return "\n".join(lines)


def main(
    config: Optional[HotelConfig] = None,
    input_func: InputFunc = input,
    output_func: OutputFunc = print,
) -> int:
    """Точка входа: загрузка данных, меню, сохранение при любом выходе."""
    components = bootstrap_app(config)
    unit_of_work = components["unit_of_work"]

    with unit_of_work:
        service = create_hotel_service(unit_of_work.records, components["logger"])
        console = HotelConsole(service, input_func=input_func, output_func=output_func)
        try:
            console.run()
        except (EOFError, KeyboardInterrupt):
            output_func("\n Завершение работы.")
    return 0
