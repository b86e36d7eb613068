from datetime import date, datetime, timezone

from pydantic import Field, field_serializer, field_validator

from core.domain.check_result import CheckEntry, CheckResult
from core.domain.check_status import CheckStatus
from core.domain.daily_record import DailyRecord
from core.domain.day_summary import DaySummary
from infra.schemas import CamelModel


class CheckResultDocument(CamelModel):
    status: CheckStatus
    response_time_ms: int = Field(default=0, ge=0, alias="responseTime")
    status_code: int = Field(default=0, alias="statusCode")

    def to_domain(self) -> CheckResult:
        return CheckResult(
            status=self.status,
            response_time_ms=self.response_time_ms,
            status_code=self.status_code,
        )


class CheckEntryDocument(CamelModel):
    timestamp: datetime
    results: dict[str, CheckResultDocument] = Field(default_factory=dict)

    @field_validator("timestamp", mode="after")
    @classmethod
    def assume_utc(cls, timestamp: datetime) -> datetime:
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)

        return timestamp

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_domain(self) -> CheckEntry:
        return CheckEntry(
            timestamp=self.timestamp,
            results={probe_id: result.to_domain() for probe_id, result in self.results.items()},
        )


class DaySummaryDocument(CamelModel):
    total_checks: int = Field(default=0, ge=0)
    up_checks: int = Field(default=0, ge=0)
    degraded_checks: int = Field(default=0, ge=0)
    down_checks: int = Field(default=0, ge=0)
    uptime_percent: float = Field(default=100.0, ge=0, le=100)
    avg_response_time_ms: int = Field(default=0, ge=0, alias="avgResponseTime")
    p95_response_time_ms: int = Field(default=0, ge=0, alias="p95ResponseTime")

    def to_domain(self) -> DaySummary:
        return DaySummary(
            total_checks=self.total_checks,
            up_checks=self.up_checks,
            degraded_checks=self.degraded_checks,
            down_checks=self.down_checks,
            uptime_percent=self.uptime_percent,
            avg_response_time_ms=self.avg_response_time_ms,
            p95_response_time_ms=self.p95_response_time_ms,
        )


class DailyRecordDocument(CamelModel):
    record_date: date = Field(alias="date")
    checks: list[CheckEntryDocument] = Field(default_factory=list)
    summary: dict[str, DaySummaryDocument] = Field(default_factory=dict)

    def to_domain(self) -> DailyRecord:
        return DailyRecord(
            date=self.record_date,
            checks=[entry.to_domain() for entry in self.checks],
            summary={probe_id: summary.to_domain() for probe_id, summary in self.summary.items()},
        )

    @classmethod
    def from_domain(cls, record: DailyRecord) -> "DailyRecordDocument":
        return cls(
            record_date=record.date,
            checks=[
                CheckEntryDocument(
                    timestamp=entry.timestamp,
                    results={
                        probe_id: CheckResultDocument(
                            status=result.status,
                            response_time_ms=result.response_time_ms,
                            status_code=result.status_code,
                        )
                        for probe_id, result in entry.results.items()
                    },
                )
                for entry in record.checks
            ],
            summary={
                probe_id: DaySummaryDocument(
                    total_checks=summary.total_checks,
                    up_checks=summary.up_checks,
                    degraded_checks=summary.degraded_checks,
                    down_checks=summary.down_checks,
                    uptime_percent=summary.uptime_percent,
                    avg_response_time_ms=summary.avg_response_time_ms,
                    p95_response_time_ms=summary.p95_response_time_ms,
                )
                for probe_id, summary in record.summary.items()
            },
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
