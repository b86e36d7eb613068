from datetime import date, timedelta

import structlog

from core.domain.run_report import RetentionReport
from core.port.daily_record_repository import DailyRecordRepository

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_RETENTION_DAYS = 90


class EnforceRetentionUseCase:
    def __init__(
        self,
        daily_record_repository: DailyRecordRepository,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> None:
        if retention_days < 1:
            raise ValueError(f"Retention window must be at least one day, got {retention_days}")

        self.daily_record_repository = daily_record_repository
        self.retention_days = retention_days

    async def execute(self, today: date) -> RetentionReport:
        report = RetentionReport()
        cutoff = today - timedelta(days=self.retention_days)

        for record_date in sorted(await self.daily_record_repository.list_dates()):
            if record_date >= cutoff:
                continue

            if await self.daily_record_repository.delete(record_date):
                report.deleted_dates.append(record_date)
                logger.info(f"Deleted daily record {record_date.isoformat()} (older than {cutoff.isoformat()})")

        yesterday = today - timedelta(days=1)
        record = await self.daily_record_repository.get(yesterday)

        if record is not None and record.compact():
            await self.daily_record_repository.save(record)
            report.compacted_date = yesterday
            logger.info(f"Compacted daily record {yesterday.isoformat()} (keeping summary)")

        return report
