from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.common.constants import TypeMsg
from src.common.logger import log_info, setup_logging
from src.config import settings
from src.infra.database import close_db, get_db, init_db
from src.infra.redis_client import close_redis, get_redis, init_redis
from src.services.errors import register_exception_handlers
from src.services.health import collect_health
from src.services.users_service.routes import router
from src.shared.models.common import HealthStatus

SERVICE_NAME = "users_service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    await log_info("Starting Users Service...", type_msg=TypeMsg.INFO)
    await init_db()
    await init_redis()

    yield

    # Shutdown
    await log_info("Shutting down Users Service...", type_msg=TypeMsg.INFO)
    await close_redis()
    await close_db()


app = FastAPI(
    title="Users Service",
    description="Регистрация, вход и выход пользователей",
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
        },
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.services.users_service.app:app",
        host=settings.deployment.USERS_SERVICE_HOST,
        port=settings.deployment.USERS_SERVICE_PORT,
    )
