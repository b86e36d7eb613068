import math
from dataclasses import dataclass
from typing import Iterable

from core.domain.check_status import CheckStatus

P95_QUANTILE = 0.95


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def nearest_rank_percentile(samples: list[int], quantile: float) -> int:
    if not samples:
        raise ValueError("Cannot compute a percentile of no samples")

    ordered = sorted(samples)
    index = max(0, math.ceil(quantile * len(ordered)) - 1)

    return ordered[index]


@dataclass
class DaySummary:
    total_checks: int = 0
    up_checks: int = 0
    degraded_checks: int = 0
    down_checks: int = 0
    uptime_percent: float = 100.0
    avg_response_time_ms: int = 0
    p95_response_time_ms: int = 0

    def record(self, status: CheckStatus) -> None:
        self.total_checks += 1

        if status is CheckStatus.UP:
            self.up_checks += 1
        elif status is CheckStatus.DEGRADED:
            self.degraded_checks += 1
        else:
            self.down_checks += 1

        available = self.up_checks + self.degraded_checks
        self.uptime_percent = round_half_up(available / self.total_checks * 100, 2)

    def refresh_latency(self, response_times_ms: Iterable[int]) -> None:
        """Recompute latency statistics from every positive sample of the day.

        Zero samples come from checks that never completed and are skipped.
        When nothing is left the previous values are kept.
        """
        samples = [sample for sample in response_times_ms if sample is not None and sample > 0]

        if not samples:
            return

        self.avg_response_time_ms = int(round_half_up(sum(samples) / len(samples)))
        self.p95_response_time_ms = nearest_rank_percentile(samples, P95_QUANTILE)
