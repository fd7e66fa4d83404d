from typing import Any, Dict, Optional

from .config import HotelConfig
from .infrastructure import ConsoleLogger, HotelUnitOfWork, RecordFile


def bootstrap_app(config: Optional[HotelConfig] = None) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    config = config or HotelConfig()

    # 1. Логгер общий для всех компонентов
    logger = ConsoleLogger(verbose=config.verbose)

    # 2. Файл данных и единица работы поверх него
    record_file = RecordFile(config.data_file, logger=logger)
    unit_of_work = HotelUnitOfWork(record_file, logger=logger)

    return {
        "config": config,
        "logger": logger,
        "unit_of_work": unit_of_work,
    }
