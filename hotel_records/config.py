"""
Настройки приложения учета бронирований.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class HotelConfig(BaseModel):
    """Конфигурация запуска."""

    data_file: Path = Field(
        default=Path("Record.DAT"), description="Файл с сохраненными записями"
    )
    verbose: bool = Field(default=False, description="Выводить отладочные сообщения")
