from datetime import date

import structlog

from core.domain.check_result import CheckEntry
from core.domain.daily_record import DailyRecord
from core.port.daily_record_repository import DailyRecordRepository

logger = structlog.stdlib.get_logger(__name__)


class AggregateCheckEntryUseCase:
    def __init__(self, daily_record_repository: DailyRecordRepository) -> None:
        self.daily_record_repository = daily_record_repository

    async def execute(self, entry: CheckEntry, record_date: date) -> DailyRecord:
        record = await self.daily_record_repository.get(record_date)

        if record is None:
            logger.debug(f"Starting daily record for {record_date.isoformat()}")
            record = DailyRecord(date=record_date)

        record.checks.append(entry)

        for probe_id, result in entry.results.items():
            summary = record.summary_for(probe_id)
            summary.record(result.status)
            # full rescan, a day holds a few hundred entries at most
            summary.refresh_latency(record.response_times(probe_id))

        return await self.daily_record_repository.save(record)
