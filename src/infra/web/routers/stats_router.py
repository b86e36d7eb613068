import os
import time
from datetime import datetime, timezone
from typing import Any

import psutil
from fastapi import APIRouter, Response, status

from infra.adapter.daily_record_repository_factory import get_daily_record_repository
from infra.config.config import get_config
from infra.utils.formatters import format_bytes, format_time

router = APIRouter(prefix="/stats", tags=["Stats"])

_start_time: float = time.time()
_current_process: psutil.Process = psutil.Process(os.getpid())


@router.get(
    "/health",
    response_model=dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Get application health status",
)
async def get_health(response: Response):
    config = get_config()

    try:
        memory_info = _current_process.memory_full_info()
        stored_dates = await get_daily_record_repository().list_dates()

        return {
            "status": "UP",
            "uptime": format_time(time.time() - _start_time),
            "app_name": config.APP_NAME,
            "version": config.VERSION,
            "ram": format_bytes(memory_info.rss),
            "cpu_percent": _current_process.cpu_percent(interval=0.1),
            "storage_driver": config.STORAGE_CONFIG.DRIVER,
            "stored_days": len(stored_dates),
            "latest_day": stored_dates[-1].isoformat() if stored_dates else None,
            "timestamp": datetime.now(timezone.utc),
        }

    except Exception as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

        return {
            "status": "DEGRADED",
            "error": str(e),
            "timestamp": datetime.now(timezone.utc),
        }
