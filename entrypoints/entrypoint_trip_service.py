#!/usr/bin/env python3
# entrypoint_trip_service.py
"""
Точка входа для Trip Service.
Порт: 8085
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

from main import main


if __name__ == "__main__":
    try:
        asyncio.run(main(mode="trip_service"))
    except KeyboardInterrupt:
        pass
