from contextlib import asynccontextmanager

from fastapi import FastAPI

from infra.config.config import get_config
from infra.db.session import close_engine, create_database_schema
from infra.logging.config import configure_logging
from infra.web.routers.stats_router import router as stats_router
from infra.web.routers.status_router import router as status_router


def create_app() -> FastAPI:
    config = get_config()

    configure_logging(
        log_level=config.LOGGING_CONFIG.LEVEL,
        json_logs=config.LOGGING_CONFIG.JSON_FORMAT,
        service_name=config.APP_NAME,
        environment=config.ENVIRONMENT,
        library_log_levels=config.LOGGING_CONFIG.LIBRARY_LOG_LEVELS,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if config.STORAGE_CONFIG.DRIVER != "json" and config.ENVIRONMENT in ("loc", "dev"):
            await create_database_schema()

        yield

        await close_engine()

    app = FastAPI(
        title=config.APP_NAME,
        version=config.VERSION,
        root_path=config.ROOT_PATH,
        docs_url="/apidocs",
        lifespan=lifespan,
    )

    app.state.host = config.HOST
    app.state.port = config.PORT

    app.include_router(stats_router)
    app.include_router(status_router)

    return app
