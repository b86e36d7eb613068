from functools import lru_cache

from core.port.daily_record_repository import DailyRecordRepository
from infra.adapter.json_daily_record_repository import JsonFileDailyRecordRepository
from infra.adapter.sql_daily_record_repository import SqlDailyRecordRepository
from infra.config.config import get_config
from infra.db.session import get_session_factory


@lru_cache
def get_daily_record_repository() -> DailyRecordRepository:
    storage_config = get_config().STORAGE_CONFIG

    if storage_config.DRIVER == "json":
        return JsonFileDailyRecordRepository(checks_dir=storage_config.CHECKS_DIR)

    return SqlDailyRecordRepository(session_factory=get_session_factory())
