from datetime import date

from pydantic import Field

from core.domain.check_status import CheckStatus
from core.domain.status_history import StatusHistory
from infra.schemas import CamelModel

OVERALL_LABELS = {
    CheckStatus.UP: "All Systems Operational",
    CheckStatus.DOWN: "System Outage",
}


class DayPointResponseDTO(CamelModel):
    record_date: date = Field(alias="date")
    uptime_percent: float
    avg_response_time_ms: int = Field(alias="avgResponseTime")
    status: CheckStatus
    total_checks: int


class ComponentStatusResponseDTO(CamelModel):
    id: str
    name: str
    status: CheckStatus
    uptime_percent: float
    avg_response_time_ms: int = Field(alias="avgResponseTime")
    daily_data: list[DayPointResponseDTO] = Field(default_factory=list)


class GroupStatusResponseDTO(CamelModel):
    id: str
    name: str
    description: str
    uptime_percent: float
    status: CheckStatus
    components: list[ComponentStatusResponseDTO] = Field(default_factory=list)


class StatusHistoryResponseDTO(CamelModel):
    status: CheckStatus
    label: str
    groups: list[GroupStatusResponseDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, history: StatusHistory) -> "StatusHistoryResponseDTO":
        overall_status = history.overall_status

        return cls(
            status=overall_status,
            label=OVERALL_LABELS[overall_status],
            groups=[GroupStatusResponseDTO.model_validate(group) for group in history.groups],
        )
