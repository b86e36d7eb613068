from dataclasses import dataclass, field
from datetime import date

from core.domain.check_status import CheckStatus


@dataclass
class DayPoint:
    date: date
    uptime_percent: float
    avg_response_time_ms: int
    status: CheckStatus
    total_checks: int

    @property
    def has_data(self) -> bool:
        return self.uptime_percent >= 0 and self.total_checks > 0


@dataclass
class ComponentStatus:
    id: str
    name: str
    status: CheckStatus
    uptime_percent: float
    avg_response_time_ms: int
    daily_data: list[DayPoint] = field(default_factory=list)


@dataclass
class GroupStatus:
    id: str
    name: str
    description: str
    uptime_percent: float
    status: CheckStatus
    components: list[ComponentStatus] = field(default_factory=list)


@dataclass
class StatusHistory:
    groups: list[GroupStatus]

    @property
    def overall_status(self) -> CheckStatus:
        # degraded components are still operational for the headline
        has_down = any(
            component.status is CheckStatus.DOWN for group in self.groups for component in group.components
        )

        return CheckStatus.DOWN if has_down else CheckStatus.UP
