# src/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины — config/config.json.
Хосты, порты и секреты переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "trip_approval"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    COMPONENT_MODE: str = ""


class DeploymentSettings(BaseModel):
    """Настройки развертывания сервисов."""
    USERS_SERVICE_HOST: str = "0.0.0.0"
    USERS_SERVICE_PORT: int = 8084
    TRIP_SERVICE_HOST: str = "0.0.0.0"
    TRIP_SERVICE_PORT: int = 8085


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "trip_approval"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class RedisSettings(BaseModel):
    """Настройки Redis."""
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""
    REDIS_NAMESPACE: str = "trips"
    REDIS_MAX_CONNECTIONS: int = 50

    @field_validator("REDIS_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("REDIS_PASSWORD", "")
        return v

    @property
    def url(self) -> str:
        """Возвращает URL для подключения к Redis."""
        auth = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


class RabbitMQSettings(BaseModel):
    """Настройки RabbitMQ."""
    RABBITMQ_HOST: str = "localhost"
    RABBITMQ_PORT: int = 5672
    RABBITMQ_USER: str = "guest"
    RABBITMQ_PASSWORD: str = "guest"
    RABBITMQ_VHOST: str = "/"
    RABBITMQ_EXCHANGE: str = "trips.events"
    RABBITMQ_PREFETCH_COUNT: int = 10

    @field_validator("RABBITMQ_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        env_pass = os.getenv("RABBITMQ_PASSWORD", "")
        if env_pass:
            return env_pass
        return v

    @property
    def url(self) -> str:
        """Возвращает URL для подключения к RabbitMQ."""
        return (
            f"amqp://{self.RABBITMQ_USER}:{self.RABBITMQ_PASSWORD}"
            f"@{self.RABBITMQ_HOST}:{self.RABBITMQ_PORT}{self.RABBITMQ_VHOST}"
        )


class AuthSettings(BaseModel):
    """Настройки JWT и отзыва токенов."""
    JWT_SECRET_KEY: str = Field("default-secret", validate_default=True)
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 72
    REVOKED_TOKEN_FALLBACK_TTL: int = 86400

    @field_validator("JWT_SECRET_KEY", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Секрет всегда берётся из окружения, если он там задан."""
        env_secret = os.getenv("JWT_SECRET_KEY", "")
        if env_secret:
            return env_secret
        return v or "default-secret"


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    rabbitmq: RabbitMQSettings = Field(default_factory=RabbitMQSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_dict(cls, config_data: dict[str, Any]) -> "Settings":
        """
        Создаёт объект Settings из плоского словаря конфигурации.
        Хосты, порты и секреты переопределяются из переменных окружения.
        """
        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "trip_approval"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                LOG_LEVEL=data.get("LOG_LEVEL", "INFO"),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", data.get("COMPONENT_MODE", "")),
            ),
            deployment=DeploymentSettings(
                USERS_SERVICE_HOST=os.getenv("USERS_SERVICE_HOST", data.get("USERS_SERVICE_HOST", "0.0.0.0")),
                USERS_SERVICE_PORT=int(os.getenv("USERS_SERVICE_PORT", data.get("USERS_SERVICE_PORT", 8084))),
                TRIP_SERVICE_HOST=os.getenv("TRIP_SERVICE_HOST", data.get("TRIP_SERVICE_HOST", "0.0.0.0")),
                TRIP_SERVICE_PORT=int(os.getenv("TRIP_SERVICE_PORT", data.get("TRIP_SERVICE_PORT", 8085))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "INFO"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "trip_approval")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
            ),
            redis=RedisSettings(
                REDIS_HOST=os.getenv("REDIS_HOST", data.get("REDIS_HOST", "localhost")),
                REDIS_PORT=int(os.getenv("REDIS_PORT", data.get("REDIS_PORT", 6379))),
                REDIS_DB=data.get("REDIS_DB", 0),
                REDIS_PASSWORD=os.getenv("REDIS_PASSWORD", data.get("REDIS_PASSWORD", "")),
                REDIS_NAMESPACE=data.get("REDIS_NAMESPACE", "trips"),
                REDIS_MAX_CONNECTIONS=data.get("REDIS_MAX_CONNECTIONS", 50),
            ),
            rabbitmq=RabbitMQSettings(
                RABBITMQ_HOST=os.getenv("RABBITMQ_HOST", data.get("RABBITMQ_HOST", "localhost")),
                RABBITMQ_PORT=int(os.getenv("RABBITMQ_PORT", data.get("RABBITMQ_PORT", 5672))),
                RABBITMQ_USER=os.getenv("RABBITMQ_USER", data.get("RABBITMQ_USER", "guest")),
                RABBITMQ_PASSWORD=os.getenv("RABBITMQ_PASSWORD", data.get("RABBITMQ_PASSWORD", "guest")),
                RABBITMQ_VHOST=data.get("RABBITMQ_VHOST", "/"),
                RABBITMQ_EXCHANGE=data.get("RABBITMQ_EXCHANGE", "trips.events"),
                RABBITMQ_PREFETCH_COUNT=data.get("RABBITMQ_PREFETCH_COUNT", 10),
            ),
            auth=AuthSettings(
                JWT_SECRET_KEY=data.get("JWT_SECRET_KEY", ""),
                JWT_ALGORITHM=data.get("JWT_ALGORITHM", "HS256"),
                JWT_EXPIRATION_HOURS=int(os.getenv("JWT_EXPIRATION_HOURS", data.get("JWT_EXPIRATION_HOURS", 72))),
                REVOKED_TOKEN_FALLBACK_TTL=data.get("REVOKED_TOKEN_FALLBACK_TTL", 86400),
            ),
        )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """Создаёт объект Settings из config.json."""
        return cls.from_dict(load_config_json())


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
