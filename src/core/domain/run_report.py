from dataclasses import dataclass, field
from datetime import date, datetime

from core.domain.check_result import CheckEntry
from core.domain.check_status import CheckStatus


@dataclass
class RetentionReport:
    deleted_dates: list[date] = field(default_factory=list)
    compacted_date: date | None = None

    @property
    def changed(self) -> bool:
        return bool(self.deleted_dates) or self.compacted_date is not None


@dataclass
class RunReport:
    timestamp: datetime
    record_date: date
    up: int
    degraded: int
    down: int
    checks_today: int
    retention: RetentionReport = field(default_factory=RetentionReport)

    @property
    def total(self) -> int:
        return self.up + self.degraded + self.down

    @classmethod
    def from_entry(
        cls,
        entry: CheckEntry,
        record_date: date,
        checks_today: int,
        retention: RetentionReport,
    ) -> "RunReport":
        return cls(
            timestamp=entry.timestamp,
            record_date=record_date,
            up=entry.count(CheckStatus.UP),
            degraded=entry.count(CheckStatus.DEGRADED),
            down=entry.count(CheckStatus.DOWN),
            checks_today=checks_today,
            retention=retention,
        )
