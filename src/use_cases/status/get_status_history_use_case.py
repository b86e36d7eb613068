from datetime import date, timedelta

from core.domain.check_status import CheckStatus
from core.domain.daily_record import DailyRecord
from core.domain.day_summary import round_half_up
from core.domain.status_history import ComponentStatus, DayPoint, GroupStatus, StatusHistory
from core.port.daily_record_repository import DailyRecordRepository
from core.port.monitor_definition_source import MonitorDefinitionSource

DAYS_TO_SHOW = 90
EXTERNAL_GROUP_ID = "external"
EXTERNAL_GROUP_NAME = "External Dependencies"
EXTERNAL_GROUP_DESCRIPTION = "Third-party services the platform depends on"


def _worst_status(statuses: list[CheckStatus]) -> CheckStatus:
    return max(statuses, key=lambda status: status.severity, default=CheckStatus.UP)


def _mean(values: list[float], default: float) -> float:
    return sum(values) / len(values) if values else default


class GetStatusHistoryUseCase:
    def __init__(
        self,
        daily_record_repository: DailyRecordRepository,
        definition_source: MonitorDefinitionSource,
        days_to_show: int = DAYS_TO_SHOW,
    ) -> None:
        self.daily_record_repository = daily_record_repository
        self.definition_source = definition_source
        self.days_to_show = days_to_show

    async def execute(self, today: date) -> StatusHistory:
        definition = self.definition_source.load()
        dates = [today - timedelta(days=offset) for offset in range(self.days_to_show - 1, -1, -1)]

        records: dict[date, DailyRecord] = {}
        for record_date in dates:
            record = await self.daily_record_repository.get(record_date)
            if record is not None:
                records[record_date] = record

        today_record = records.get(today)
        latest_entry = today_record.latest_entry() if today_record else None
        latest_statuses = {
            probe_id: result.status for probe_id, result in (latest_entry.results.items() if latest_entry else [])
        }

        def component_status(probe_id: str, name: str) -> ComponentStatus:
            return self._component_status(probe_id, name, dates, records, latest_statuses.get(probe_id))

        groups = [
            self._group_status(
                group.id,
                group.name,
                group.description,
                [component_status(component.id, component.name) for component in group.components],
            )
            for group in definition.groups
        ]

        if definition.external:
            groups.append(
                self._group_status(
                    EXTERNAL_GROUP_ID,
                    EXTERNAL_GROUP_NAME,
                    EXTERNAL_GROUP_DESCRIPTION,
                    [component_status(external.id, external.name) for external in definition.external],
                )
            )

        return StatusHistory(groups=groups)

    def _component_status(
        self,
        probe_id: str,
        name: str,
        dates: list[date],
        records: dict[date, DailyRecord],
        latest_status: CheckStatus | None,
    ) -> ComponentStatus:
        daily_data: list[DayPoint] = []

        for record_date in dates:
            record = records.get(record_date)
            summary = record.summary.get(probe_id) if record else None

            if summary is None:
                daily_data.append(
                    DayPoint(
                        date=record_date,
                        uptime_percent=-1,
                        avg_response_time_ms=0,
                        status=CheckStatus.UP,
                        total_checks=0,
                    )
                )
                continue

            daily_data.append(
                DayPoint(
                    date=record_date,
                    uptime_percent=summary.uptime_percent,
                    avg_response_time_ms=summary.avg_response_time_ms,
                    status=CheckStatus.from_uptime(summary.uptime_percent),
                    total_checks=summary.total_checks,
                )
            )

        days_with_data = [day for day in daily_data if day.has_data]
        uptime = _mean([day.uptime_percent for day in days_with_data], 100.0)
        avg_response_time = _mean([day.avg_response_time_ms for day in days_with_data], 0)

        return ComponentStatus(
            id=probe_id,
            name=name,
            status=latest_status or CheckStatus.from_uptime(uptime),
            uptime_percent=round_half_up(uptime, 2),
            avg_response_time_ms=int(round_half_up(avg_response_time)),
            daily_data=daily_data,
        )

    def _group_status(
        self,
        group_id: str,
        name: str,
        description: str,
        components: list[ComponentStatus],
    ) -> GroupStatus:
        uptime = _mean([component.uptime_percent for component in components], 100.0)

        return GroupStatus(
            id=group_id,
            name=name,
            description=description,
            uptime_percent=round_half_up(uptime, 2),
            status=_worst_status([component.status for component in components]),
            components=components,
        )
