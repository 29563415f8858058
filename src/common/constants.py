# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Имя корневого логгера приложения
APP_LOGGER_NAME = "trip_approval"

# Формат дат в query-параметрах фильтра поездок
QUERY_DATE_FORMAT = "%Y-%m-%d"
