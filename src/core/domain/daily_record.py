from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

from core.domain.check_result import CheckEntry
from core.domain.day_summary import DaySummary


@dataclass
class DailyRecord:
    date: date
    checks: list[CheckEntry] = field(default_factory=list)
    summary: dict[str, DaySummary] = field(default_factory=dict)

    @property
    def is_compacted(self) -> bool:
        return not self.checks

    def response_times(self, probe_id: str) -> Iterator[int]:
        for entry in self.checks:
            result = entry.results.get(probe_id)

            if result is not None:
                yield result.response_time_ms

    def summary_for(self, probe_id: str) -> DaySummary:
        return self.summary.setdefault(probe_id, DaySummary())

    def latest_entry(self) -> CheckEntry | None:
        return self.checks[-1] if self.checks else None

    def compact(self) -> bool:
        if not self.checks:
            return False

        self.checks = []
        return True
