import logging
import sys
from typing import Callable, Literal

import structlog
from structlog.types import EventDict, Processor

OFF_LOG_LEVEL = logging.CRITICAL + 1

# per-request and per-firing chatter; user overrides win
DEFAULT_LIBRARY_LOG_LEVELS: dict[str, str | int] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "apscheduler.executors.default": "WARNING",
}

# uvicorn loggers routed through the root handler; access logs stay muted
SERVER_LOGGER_PROPAGATION: dict[str, bool] = {
    "uvicorn": True,
    "uvicorn.error": True,
    "uvicorn.access": False,
}


def add_service_context(service_name: str, environment: str) -> Callable:
    def processor(logger: structlog.BoundLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("environment", environment)

        return event_dict

    return processor


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    event_dict.pop("color_message", None)
    return event_dict


def _normalize_log_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    normalized_level = level.strip().upper()

    if normalized_level == "OFF":
        return OFF_LOG_LEVEL

    level_map = logging.getLevelNamesMapping()

    if normalized_level in level_map:
        return level_map[normalized_level]

    raise ValueError(
        f"Invalid log level '{level}'. Supported values are DEBUG, INFO, WARNING, ERROR, CRITICAL, OFF, or an integer."
    )


def _apply_library_log_levels(library_log_levels: dict[str, str | int]) -> None:
    for logger_name, configured_level in library_log_levels.items():
        if not logger_name or not logger_name.strip():
            raise ValueError("Logger name in library_log_levels cannot be empty.")

        library_logger = logging.getLogger(logger_name)
        level = _normalize_log_level(configured_level)
        silenced = level == OFF_LOG_LEVEL

        library_logger.setLevel(level)
        library_logger.disabled = silenced
        library_logger.propagate = not silenced

        if silenced:
            library_logger.handlers.clear()


def _shared_processors(service_name: str, environment: str, json_logs: bool) -> list[Processor]:
    # run_id is bound per monitoring run and arrives through the contextvars
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context(service_name, environment),
    ]

    if json_logs:
        processors.append(structlog.processors.format_exc_info)

    return processors


def _build_handler(shared_processors: list[Processor], json_logs: bool) -> logging.Handler:
    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    return handler


def configure_logging(
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    service_name: str,
    environment: Literal["loc", "dev", "pre", "pro"],
    json_logs: bool,
    library_log_levels: dict[str, str | int] | None = None,
) -> None:
    shared_processors = _shared_processors(service_name, environment, json_logs)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(shared_processors, json_logs))
    root_logger.setLevel(log_level.upper())

    for logger_name, propagate in SERVER_LOGGER_PROPAGATION.items():
        server_logger = logging.getLogger(logger_name)
        server_logger.handlers.clear()
        server_logger.propagate = propagate

    _apply_library_log_levels({**DEFAULT_LIBRARY_LOG_LEVELS, **(library_log_levels or {})})

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        root_logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
