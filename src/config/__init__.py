# src/config/__init__.py
"""
Модуль конфигурации.
Экспортирует настройки приложения (config/config.json + переменные окружения).
"""

from src.config.loader import AuthSettings, Settings, get_settings, settings

__all__ = ["AuthSettings", "Settings", "get_settings", "settings"]
