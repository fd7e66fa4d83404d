"""
Учет бронирований номеров отеля.

Отвечает за:
- Бронирование номеров и хранение данных гостей
- Учет стоимости проживания и счета за питание
- Сохранение записей в файл между запусками
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    'application',
    'domain',
    'infrastructure',
    'interfaces',
]
