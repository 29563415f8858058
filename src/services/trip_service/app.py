from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.constants import TypeMsg
from src.common.logger import log_info, setup_logging
from src.config import settings
from src.infra.database import close_db, get_db, init_db
from src.infra.event_bus import close_event_bus, get_event_bus, init_event_bus
from src.infra.redis_client import close_redis, get_redis, init_redis
from src.services.errors import register_exception_handlers
from src.services.health import collect_health
from src.services.trip_service.routes import router
from src.shared.models.common import HealthStatus

SERVICE_NAME = "trip_service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await log_info("Starting Trip Service...", type_msg=TypeMsg.INFO)
    await init_db()
    await init_redis()
    await init_event_bus()

    yield

    await log_info("Shutting down Trip Service...", type_msg=TypeMsg.INFO)
    await close_event_bus()
    await close_redis()
    await close_db()


app = FastAPI(
    title="Trip Service",
    description="Заявки на поездки: создание, согласование, отмена",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(router, prefix="/api/v1")


@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    return await collect_health(
        SERVICE_NAME,
        settings.system.VERSION,
        {
            "postgres": get_db().health_check,
            "redis": get_redis().health_check,
            "rabbitmq": get_event_bus().health_check,
        },
    )
