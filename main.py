#!/usr/bin/env python3
# main.py
"""
Главная точка входа сервиса согласования поездок.
Запускает Users Service, Trip Service или воркер уведомлений в зависимости от аргументов.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Optional

from src.config import settings
from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import TypeMsg
from src.infra.database import init_db, close_db
from src.infra.redis_client import init_redis, close_redis
from src.infra.event_bus import init_event_bus, close_event_bus

VALID_MODES = ("users_service", "trip_service", "notification_worker", "worker", "all")

_shutdown_event: asyncio.Event | None = None
_running_tasks: list[asyncio.Task] = []


def setup_signal_handlers() -> None:
    """Настраивает обработчики сигналов для graceful shutdown."""
    global _shutdown_event
    _shutdown_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        if _shutdown_event and not _shutdown_event.is_set():
            print(f"\nПолучен сигнал остановки (sig={sig}), завершаем работу...")
            _shutdown_event.set()
            for task in _running_tasks:
                if not task.done():
                    task.cancel()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))
    except NotImplementedError:
        # Windows не поддерживает add_signal_handler
        signal.signal(signal.SIGINT, lambda s, f: signal_handler(s))
        signal.signal(signal.SIGTERM, lambda s, f: signal_handler(s))


async def init_infrastructure() -> None:
    """Инициализирует все подключения к инфраструктуре."""
    await log_info("Инициализация инфраструктуры...", type_msg=TypeMsg.INFO)

    await init_db()
    await init_redis()
    await init_event_bus()

    await log_info("Инфраструктура инициализирована", type_msg=TypeMsg.INFO)


async def close_infrastructure() -> None:
    """Закрывает все подключения."""
    await log_info("Закрытие подключений...", type_msg=TypeMsg.INFO)

    await close_event_bus()
    await close_redis()
    await close_db()

    await log_info("Подключения закрыты", type_msg=TypeMsg.INFO)


async def _serve(app_path: str, title: str, host: str, port: int) -> None:
    import uvicorn

    await log_info(f"Запуск {title} на {host}:{port}...", type_msg=TypeMsg.INFO)

    config = uvicorn.Config(
        app_path,
        host=host,
        port=port,
        log_level="debug" if settings.system.DEBUG else "info",
    )
    server = uvicorn.Server(config)

    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info(f"{title}: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_users_service() -> None:
    """Запускает Users Service (регистрация, вход, выход)."""
    await _serve(
        "src.services.users_service.app:app",
        "Users Service",
        settings.deployment.USERS_SERVICE_HOST,
        settings.deployment.USERS_SERVICE_PORT,
    )


async def run_trip_service() -> None:
    """Запускает Trip Service (жизненный цикл заявок)."""
    await _serve(
        "src.services.trip_service.app:app",
        "Trip Service",
        settings.deployment.TRIP_SERVICE_HOST,
        settings.deployment.TRIP_SERVICE_PORT,
    )


async def run_notification_worker() -> None:
    """Запускает NotificationWorker."""
    from src.worker.runner import run_workers

    # Шина уже подключена в init_infrastructure()
    await run_workers(init_infra=False)


async def run_all() -> None:
    """Запускает оба сервиса и воркер в одном процессе."""
    global _running_tasks

    _running_tasks = [
        asyncio.create_task(run_users_service()),
        asyncio.create_task(run_trip_service()),
        asyncio.create_task(run_notification_worker()),
    ]

    try:
        await asyncio.gather(*_running_tasks, return_exceptions=True)
    except asyncio.CancelledError:
        await log_info("Отмена всех компонентов...", type_msg=TypeMsg.INFO)
        for task in _running_tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*_running_tasks, return_exceptions=True)
        raise


def resolve_mode(mode: Optional[str]) -> str:
    """Аргумент командной строки, затем COMPONENT_MODE из конфига, иначе all."""
    if mode:
        return mode

    component_mode = settings.system.COMPONENT_MODE
    if component_mode in VALID_MODES:
        return component_mode

    return "all"


async def main(mode: Optional[str] = None) -> None:
    """Главная функция приложения."""
    setup_logging()
    setup_signal_handlers()

    mode = resolve_mode(mode)
    await log_info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION}: запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    try:
        await init_infrastructure()

        if mode == "users_service":
            await run_users_service()
        elif mode == "trip_service":
            await run_trip_service()
        elif mode in ("notification_worker", "worker"):
            await run_notification_worker()
        elif mode == "all":
            await run_all()
        else:
            await log_error(f"Неизвестный режим: {mode}")

    except asyncio.CancelledError:
        await log_info("Задача отменена, выполняется graceful shutdown", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        if _running_tasks:
            for task in _running_tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*_running_tasks, return_exceptions=True)
            _running_tasks.clear()

        try:
            await close_infrastructure()
        except Exception as e:
            await log_error(f"Ошибка при закрытии подключений: {e}")

        await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print("""
Trip Approval — согласование заявок на поездки

Использование:
    python main.py [mode]

Режимы:
    users_service          — Users Service (:8084)
    trip_service           — Trip Service (:8085)
    notification_worker    — воркер уведомлений (алиас: worker)
    all                    — все компоненты в одном процессе

Без аргумента режим берётся из COMPONENT_MODE, иначе all.
    """)


if __name__ == "__main__":
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in VALID_MODES:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
