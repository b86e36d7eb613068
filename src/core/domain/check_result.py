from dataclasses import dataclass, field
from datetime import datetime

from core.domain.check_status import CheckStatus


@dataclass(frozen=True)
class CheckResult:
    status: CheckStatus
    response_time_ms: int
    status_code: int = 0

    def __post_init__(self):
        if self.response_time_ms < 0:
            raise ValueError(f"Response time must be non-negative, got {self.response_time_ms}")

        if self.status_code == 0 and self.status is not CheckStatus.DOWN:
            raise ValueError("A check without a status code can only be down")


@dataclass
class CheckEntry:
    timestamp: datetime
    results: dict[str, CheckResult] = field(default_factory=dict)

    def count(self, status: CheckStatus) -> int:
        return sum(1 for result in self.results.values() if result.status is status)
