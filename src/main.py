import asyncio
import sys

import httpx
import structlog
import uvicorn

from core.exceptions.configuration_error import ConfigurationError
from core.exceptions.storage_write_error import StorageWriteError
from infra.adapter.daily_record_repository_factory import get_daily_record_repository
from infra.adapter.local_scheduler import create_local_scheduler
from infra.config.config import Config, get_config
from infra.db.session import close_engine, create_database_schema
from infra.logging.config import configure_logging
from infra.services.monitor_service import MonitorService, create_monitor_service
from infra.web.app import create_app

logger = structlog.stdlib.get_logger("main")

MONITOR_JOB_KEY = "monitor_run"


def create_http_client(config: Config) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": config.MONITOR_CONFIG.USER_AGENT},
        follow_redirects=config.MONITOR_CONFIG.FOLLOW_REDIRECTS,
        # one connection per probe, fan-out is not capped
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=None),
    )


async def _run_forever(service: MonitorService, interval_seconds: int) -> None:
    scheduler = create_local_scheduler()
    scheduler.add_job(
        job_key=MONITOR_JOB_KEY,
        func=service.run_scheduled,
        interval_seconds=interval_seconds,
        job_name="Run health checks",
        run_immediately=True,
    )

    scheduler.start()
    logger.info(f"Monitor scheduled every {interval_seconds}s")

    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()


async def run_monitor(config: Config) -> int:
    repository = get_daily_record_repository()

    try:
        if config.STORAGE_CONFIG.DRIVER != "json":
            await create_database_schema()

        async with create_http_client(config) as http_client:
            service = create_monitor_service(config, http_client, repository)

            interval_seconds = config.MONITOR_CONFIG.SCHEDULE_INTERVAL_SECONDS
            if interval_seconds:
                await _run_forever(service, interval_seconds)
                return 0

            try:
                await service.run()
            except ConfigurationError as e:
                logger.error(f"Monitor failed, no checks were run: {e}")
                return 1
            except StorageWriteError as e:
                logger.error(f"Monitor failed: {e}")
                return 1

            return 0
    finally:
        await close_engine()


def main() -> int:
    config = get_config()

    configure_logging(
        log_level=config.LOGGING_CONFIG.LEVEL,
        json_logs=config.LOGGING_CONFIG.JSON_FORMAT,
        service_name=config.APP_NAME,
        environment=config.ENVIRONMENT,
        library_log_levels=config.LOGGING_CONFIG.LIBRARY_LOG_LEVELS,
    )

    return asyncio.run(run_monitor(config))


def serve() -> None:
    app = create_app()

    uvicorn.run(
        app=app,
        host=app.state.host,
        port=app.state.port,
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    sys.exit(main())
