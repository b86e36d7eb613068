from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

import httpx
import structlog
from structlog.contextvars import bound_contextvars

from core.domain.run_report import RunReport
from core.port.daily_record_repository import DailyRecordRepository
from core.port.monitor_definition_source import MonitorDefinitionSource
from infra.config.config import Config
from infra.config.monitor_definition_loader import JsonMonitorDefinitionSource
from infra.services.check_runner import CheckRunner
from use_cases.probe.resolve_probes_use_case import ResolveProbesUseCase
from use_cases.record.aggregate_check_entry_use_case import AggregateCheckEntryUseCase
from use_cases.record.enforce_retention_use_case import EnforceRetentionUseCase

logger = structlog.stdlib.get_logger(__name__)


class MonitorService:
    """One monitoring run: resolve probes, check them, record the day, prune.

    Configuration errors surface before any request is made and nothing is
    written in that case. Runs are expected never to overlap.
    """

    def __init__(
        self,
        definition_source: MonitorDefinitionSource,
        check_runner: CheckRunner,
        resolve_probes_use_case: ResolveProbesUseCase,
        aggregate_check_entry_use_case: AggregateCheckEntryUseCase,
        enforce_retention_use_case: EnforceRetentionUseCase,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.definition_source = definition_source
        self.check_runner = check_runner

        self.resolve_probes_use_case = resolve_probes_use_case
        self.aggregate_check_entry_use_case = aggregate_check_entry_use_case
        self.enforce_retention_use_case = enforce_retention_use_case

        self.clock = clock

    async def run(self) -> RunReport:
        with bound_contextvars(run_id=uuid4().hex[:12]):
            return await self._run()

    async def _run(self) -> RunReport:
        definition = self.definition_source.load()
        probes = self.resolve_probes_use_case.execute(definition)

        entry = await self.check_runner.run(probes)

        today = self.clock().astimezone(timezone.utc).date()
        record = await self.aggregate_check_entry_use_case.execute(entry, today)
        retention = await self.enforce_retention_use_case.execute(today)

        report = RunReport.from_entry(
            entry,
            record_date=record.date,
            checks_today=len(record.checks),
            retention=retention,
        )

        logger.info(
            f"Results: {report.up} up, {report.degraded} degraded, {report.down} down ({report.total} total); "
            f"{report.checks_today} checks recorded for {report.record_date.isoformat()}",
            deleted_records=[deleted.isoformat() for deleted in retention.deleted_dates],
            compacted_record=retention.compacted_date.isoformat() if retention.compacted_date else None,
        )

        return report

    async def run_scheduled(self) -> None:
        """Entry for the scheduler, which has nobody to report errors to but the log."""
        try:
            await self.run()
        except Exception as e:
            logger.exception(f"Monitoring run failed: {e}")


def create_monitor_service(
    config: Config,
    http_client: httpx.AsyncClient,
    daily_record_repository: DailyRecordRepository,
) -> MonitorService:
    monitor_config = config.MONITOR_CONFIG

    return MonitorService(
        definition_source=JsonMonitorDefinitionSource(monitor_config.DEFINITION_PATH),
        check_runner=CheckRunner(http_client),
        resolve_probes_use_case=ResolveProbesUseCase(),
        aggregate_check_entry_use_case=AggregateCheckEntryUseCase(daily_record_repository),
        enforce_retention_use_case=EnforceRetentionUseCase(
            daily_record_repository,
            retention_days=monitor_config.RETENTION_DAYS,
        ),
    )
