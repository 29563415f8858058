# src/worker/runner.py
"""
Запускалка воркеров.
"""

from __future__ import annotations

import asyncio
from typing import List

from src.worker.base import BaseWorker
from src.worker.notifications import NotificationWorker
from src.infra.event_bus import init_event_bus, close_event_bus
from src.common.logger import log_info, log_error
from src.common.constants import TypeMsg


async def run_workers(init_infra: bool = True) -> None:
    """
    Запускает NotificationWorker и ждёт отмены.

    Args:
        init_infra: Если True, подключается к RabbitMQ самостоятельно.
                    main.py в режиме all передаёт False: шина уже подключена.
    """
    if init_infra:
        await init_event_bus()

    workers: List[BaseWorker] = [
        NotificationWorker(),
    ]

    try:
        for worker in workers:
            await worker.start()

        await log_info(f"Запущено воркеров: {len(workers)}", type_msg=TypeMsg.INFO)

        while True:
            await asyncio.sleep(1)

    except asyncio.CancelledError:
        await log_info("Получен сигнал остановки", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка воркеров: {e}", exc_info=True)
    finally:
        for worker in workers:
            await worker.stop()

        if init_infra:
            await close_event_bus()

        await log_info("Воркеры остановлены", type_msg=TypeMsg.INFO)
