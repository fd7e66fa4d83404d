"""
Инфраструктурный слой учета бронирований.

Содержит хранилище записей в памяти, бинарный формат файла данных
и управление жизненным циклом хранилища (загрузка при старте,
сохранение при завершении).
"""
import json
import struct
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from . import interfaces as ports
from .domain import (
    BookingRecord,
    BusinessRuleValidationException,
    CorruptDataException,
    EditableField,
    InvalidRoomException,
    RecordNotFoundException,
    RoomOccupiedException,
    RoomStatus,
    RoomType,
    is_valid_room_no,
)


class ConsoleLogger(ports.ILogger):
    """Простая реализация логгера, выводящая сообщения в консоль."""

    def __init__(self, verbose: bool = False):
        self._verbose = verbose

    def _emit(self, level: str, message: str, stream: Any, **kwargs: Any) -> None:
        print(f"[{level}] {message}", file=stream, flush=True)
        if kwargs:
            print(
                "  Context:",
                json.dumps(kwargs, default=str, ensure_ascii=False, indent=2),
                file=stream,
                flush=True,
            )

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit("INFO", message, sys.stdout, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit("ERROR", message, sys.stderr, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit("WARNING", message, sys.stderr, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        if self._verbose:
            self._emit("DEBUG", message, sys.stderr, **kwargs)


class InMemoryRecordStore(ports.IRecordStore):
    """Хранилище записей о бронировании в памяти.

    Наружу отдаются только копии записей, поэтому изменить состояние
    хранилища можно лишь через его методы. Каждый метод сначала выполняет
    все проверки и только затем меняет словарь.
    """

    def __init__(self, records: Optional[Iterable[BookingRecord]] = None):
        self._records: Dict[int, BookingRecord] = {}
        for record in records or ():
            self.restore(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, room_no: object) -> bool:
        return room_no in self._records

    def status(self, room_no: int) -> RoomStatus:
        """Возвращает состояние номера: свободен, занят или не существует."""
        if not is_valid_room_no(room_no):
            return RoomStatus.INVALID
        if room_no in self._records:
            return RoomStatus.BOOKED
        return RoomStatus.VACANT

    def create(
        self, room_no: int, name: str, address: str, phone: str, days: int
    ) -> BookingRecord:
        status = self.status(room_no)
        if status is RoomStatus.INVALID:
            raise InvalidRoomException(room_no)
        if status is RoomStatus.BOOKED:
            raise RoomOccupiedException(room_no)

        record = BookingRecord.create(
            room_no=room_no, name=name, address=address, phone=phone, days=days
        )
        self._records[room_no] = record
        return record.model_copy()

    def restore(self, record: BookingRecord) -> None:
        """Добавляет ранее сохраненную запись вместе с ее счетом за питание."""
        if record.room_no in self._records:
            raise RoomOccupiedException(record.room_no)
        self._records[record.room_no] = record.model_copy()

    def get(self, room_no: int) -> BookingRecord:
        return self._get_existing(room_no).model_copy()

    def list(self) -> List[BookingRecord]:
        """Все занятые номера. Порядок не гарантируется."""
        return [record.model_copy() for record in self._records.values()]

    def update_field(
        self,
        room_no: int,
        field: Union[EditableField, str],
        value: Union[int, str],
    ) -> BookingRecord:
        record = self._get_existing(room_no)
        try:
            editable = EditableField(field)
        except ValueError:
            raise BusinessRuleValidationException(
                f"Поле {field!r} нельзя изменять"
            ) from None

        updated = record.model_copy()
        if editable is EditableField.DAYS:
            updated.change_days(value)  # type: ignore[arg-type]
        else:
            if not isinstance(value, str):
                raise BusinessRuleValidationException(
                    f"Значение поля {editable.value} должно быть строкой"
                )
            setattr(updated, editable.value, value)

        self._records[room_no] = updated
        return updated.model_copy()

    def add_food_charge(self, room_no: int, amount: int) -> BookingRecord:
        updated = self._get_existing(room_no).model_copy()
        updated.add_food_charge(amount)
        self._records[room_no] = updated
        return updated.model_copy()

    def remove(self, room_no: int) -> BookingRecord:
        """Удаляет запись и возвращает ее последнее состояние для чека."""
        record = self._get_existing(room_no)
        del self._records[room_no]
        return record

    def _get_existing(self, room_no: int) -> BookingRecord:
        if self.status(room_no) is not RoomStatus.BOOKED:
            raise RecordNotFoundException(room_no)
        return self._records[room_no]


class _ByteReader:
    """Последовательное чтение буфера с проверкой границ."""

    def __init__(self, data: bytes):
        self._data = memoryview(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise CorruptDataException(
                f"Неожиданный конец данных: нужно {size} байт, "
                f"доступно {self.remaining} (смещение {self._offset})"
            )
        chunk = bytes(self._data[self._offset:self._offset + size])
        self._offset += size
        return chunk

    def unpack(self, layout: struct.Struct) -> Tuple[Any, ...]:
        return layout.unpack(self.read(layout.size))


class BinaryRecordCodec(ports.IRecordCodec):
    """Бинарный формат файла данных.

    Формат (little-endian):
      заголовок: сигнатура b"HREC", версия формата u16, число записей u32
      запись:    room_no u16, тип номера u8, days i64, room_cost i64,
                 food_bill i64, затем name, address, phone -
                 каждая строка как длина u32 и байты UTF-8
    """

    MAGIC = b"HREC"
    FORMAT_VERSION = 1
    ENCODING = "utf-8"
    # Строки из терминала могут содержать одиночные суррогаты
    ENCODING_ERRORS = "surrogatepass"

    HEADER = struct.Struct("<4sHI")
    RECORD = struct.Struct("<HBqqq")
    TEXT_LENGTH = struct.Struct("<I")

    ROOM_TYPE_CODES: Dict[RoomType, int] = {
        RoomType.DELUXE: 1,
        RoomType.EXECUTIVE: 2,
        RoomType.PRESIDENTIAL: 3,
    }
    ROOM_TYPES_BY_CODE: Dict[int, RoomType] = {
        code: room_type for room_type, code in ROOM_TYPE_CODES.items()
    }

    def save(self, store: ports.IRecordStore) -> bytes:
        """Сериализует все хранилище; записи упорядочены по номеру комнаты."""
        records = sorted(store.list(), key=lambda record: record.room_no)
        chunks = [self.HEADER.pack(self.MAGIC, self.FORMAT_VERSION, len(records))]
        for record in records:
            chunks.append(
                self.RECORD.pack(
                    record.room_no,
                    self.ROOM_TYPE_CODES[record.room_type],
                    record.days,
                    record.room_cost,
                    record.food_bill,
                )
            )
            for text in (record.name, record.address, record.phone):
                raw = text.encode(self.ENCODING, self.ENCODING_ERRORS)
                chunks.append(self.TEXT_LENGTH.pack(len(raw)))
                chunks.append(raw)
        return b"".join(chunks)

    def load(self, data: bytes) -> InMemoryRecordStore:
        """Восстанавливает хранилище. Пустой поток - пустое хранилище."""
        store = InMemoryRecordStore()
        if not data:
            return store

        reader = _ByteReader(data)
        magic, version, count = reader.unpack(self.HEADER)
        if magic != self.MAGIC:
            raise CorruptDataException(f"Неизвестная сигнатура файла: {magic!r}")
        if version != self.FORMAT_VERSION:
            raise CorruptDataException(f"Неподдерживаемая версия формата: {version}")

        for index in range(count):
            record = self._read_record(reader, index)
            try:
                store.restore(record)
            except RoomOccupiedException:
                raise CorruptDataException(
                    f"Номер {record.room_no} встречается в файле дважды"
                ) from None

        if reader.remaining:
            raise CorruptDataException(
                f"После {count} записей остались лишние байты: {reader.remaining}"
            )
        return store

    def _read_record(self, reader: _ByteReader, index: int) -> BookingRecord:
        room_no, type_code, days, room_cost, food_bill = reader.unpack(self.RECORD)
        name, address, phone = [self._read_text(reader) for _ in range(3)]

        room_type = self.ROOM_TYPES_BY_CODE.get(type_code)
        if room_type is None:
            raise CorruptDataException(
                f"Запись #{index}: неизвестный код типа номера {type_code}"
            )

        try:
            record = BookingRecord(
                room_no=room_no,
                room_type=room_type,
                name=name,
                address=address,
                phone=phone,
                days=days,
                food_bill=food_bill,
            )
        except ValidationError as exc:
            raise CorruptDataException(
                f"Запись #{index} (номер {room_no}) повреждена: "
                f"{exc.error_count()} ошибок проверки"
            ) from exc

        if record.room_cost != room_cost:
            raise CorruptDataException(
                f"Запись #{index} (номер {room_no}): стоимость {room_cost} "
                f"не соответствует {days} дням"
            )
        return record

    def _read_text(self, reader: _ByteReader) -> str:
        (length,) = reader.unpack(self.TEXT_LENGTH)
        if length > reader.remaining:
            raise CorruptDataException(
                f"Длина строки {length} превышает остаток данных {reader.remaining}"
            )
        raw = reader.read(length)
        try:
            return raw.decode(self.ENCODING, self.ENCODING_ERRORS)
        except UnicodeDecodeError as exc:
            raise CorruptDataException(f"Некорректная строка UTF-8: {exc}") from exc


class RecordFile:
    """Файл данных: читается один раз при старте и перезаписывается при выходе."""

    def __init__(
        self,
        file_path: Union[str, Path],
        codec: Optional[BinaryRecordCodec] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        """
        Инициализирует файл данных.

        Args:
            file_path: Путь к файлу с записями
            codec: Формат файла (по умолчанию бинарный)
            logger: Логгер для сообщений о загрузке и сохранении
        """
        self._file_path = Path(file_path)
        self._codec = codec or BinaryRecordCodec()
        self._logger = logger or ConsoleLogger()

    @property
    def path(self) -> Path:
        return self._file_path

    def open_store(self) -> InMemoryRecordStore:
        """Загружает хранилище из файла.

        Отсутствие файла и поврежденные данные дают пустое хранилище.
        """
        if not self._file_path.exists():
            self._logger.info(
                f"Файл {self._file_path} не найден. Начинаем с пустыми данными."
            )
            return InMemoryRecordStore()

        data = self._file_path.read_bytes()
        try:
            store = self._codec.load(data)
        except CorruptDataException as exc:
            self._logger.warning(
                f"Файл {self._file_path} поврежден. Начинаем с пустыми данными.",
                error=str(exc),
            )
            return InMemoryRecordStore()

        self._logger.info(
            f"Данные загружены из {self._file_path}", records=len(store)
        )
        return store

    def close_store(self, store: ports.IRecordStore) -> bool:
        """Полностью перезаписывает файл текущим состоянием хранилища.

        Данные пишутся во временный файл рядом и затем заменяют прежний,
        поэтому сбой записи не портит предыдущее состояние. Любая ошибка
        сериализации или ввода-вывода логируется и не прерывает завершение.
        """
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            data = self._codec.save(store)
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as f:
                f.write(data)
            tmp_path.replace(self._file_path)
        except (OSError, struct.error, UnicodeEncodeError) as exc:
            if tmp_path.is_file():
                tmp_path.unlink()
            self._logger.error(
                f"Не удалось сохранить данные в {self._file_path}", error=str(exc)
            )
            return False

        self._logger.info(
            f"Данные сохранены в {self._file_path}", records=len(store)
        )
        return True


class HotelUnitOfWork:
    """Единица работы: открывает хранилище на время сеанса.

    При выходе из блока with данные сохраняются всегда, в том числе
    при исключении или прерывании с клавиатуры.
    """

    def __init__(
        self, record_file: RecordFile, logger: Optional[ports.ILogger] = None
    ):
        self._record_file = record_file
        self._logger = logger or ConsoleLogger()
        self._store: Optional[InMemoryRecordStore] = None

    @property
    def records(self) -> InMemoryRecordStore:
        if self._store is None:
            raise RuntimeError("Хранилище не открыто")
        return self._store

    def commit(self) -> bool:
        """Сбрасывает хранилище на диск."""
        return self._record_file.close_store(self.records)

    def __enter__(self) -> "HotelUnitOfWork":
        self._store = self._record_file.open_store()
        self._logger.debug("HotelUnitOfWork opened", records=len(self._store))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.commit()
        finally:
            self._store = None
            self._logger.debug("HotelUnitOfWork closed")
        return False  # Пробрасываем исключение дальше, если оно было
