import asyncio
import logging
from datetime import datetime, timezone
from time import perf_counter
from typing import Callable

import httpx
import structlog

from core.domain.check_result import CheckEntry, CheckResult
from core.domain.check_status import CheckStatus
from core.domain.probe_spec import ProbeSpec
from infra.utils.formatters import format_response_time

logger = structlog.stdlib.get_logger(__name__)


def _elapsed_ms(started_at: float) -> int:
    return max(0, round((perf_counter() - started_at) * 1_000))


class CheckRunner:
    """Runs every probe of a run at once and waits for all of them.

    Each probe gets its own deadline. A probe that fails, times out or raises
    is recorded as down without affecting the others.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.http_client = http_client
        self.clock = clock

    async def run(self, probes: list[ProbeSpec]) -> CheckEntry:
        entry = CheckEntry(timestamp=self.clock())

        logger.info(f"Running {len(probes)} health checks")

        outcomes = await asyncio.gather(
            *[self.execute(probe) for probe in probes],
            return_exceptions=True,
        )

        for probe, outcome in zip(probes, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome

                logger.error(f"Health check '{probe.name}' crashed: {outcome!r}")
                outcome = CheckResult(status=CheckStatus.DOWN, response_time_ms=0, status_code=0)

            entry.results[probe.id] = outcome

        return entry

    async def execute(self, probe: ProbeSpec) -> CheckResult:
        started_at = perf_counter()

        try:
            response = await asyncio.wait_for(
                self.http_client.get(probe.url, timeout=probe.timeout_seconds),
                timeout=probe.timeout_seconds,
            )
            response_time_ms = _elapsed_ms(started_at)

        except (asyncio.TimeoutError, httpx.TimeoutException):
            response_time_ms = _elapsed_ms(started_at)
            logger.error(f"Health check timeout for '{probe.name}' (timeout: {probe.timeout_ms}ms)")
            return self._down(probe, response_time_ms)

        except httpx.HTTPError as e:
            response_time_ms = _elapsed_ms(started_at)
            logger.error(f"Health check failed for '{probe.name}': {e!r}")
            return self._down(probe, response_time_ms)

        except Exception as e:
            response_time_ms = _elapsed_ms(started_at)
            logger.exception(f"Unexpected error checking '{probe.name}': {e}")
            return self._down(probe, response_time_ms)

        result = self.classify(probe, response, response_time_ms)
        self._log_result(probe, result)

        return result

    def classify(self, probe: ProbeSpec, response: httpx.Response, response_time_ms: int) -> CheckResult:
        status_code = response.status_code

        if not probe.accepts(status_code):
            return CheckResult(status=CheckStatus.DOWN, response_time_ms=response_time_ms, status_code=status_code)

        if probe.validation is not None:
            try:
                body = response.json()
            except ValueError:
                logger.warning(f"Health check '{probe.name}' returned a body that is not JSON")
                body = None

            if not probe.validation.matches(body):
                return CheckResult(
                    status=CheckStatus.DOWN,
                    response_time_ms=response_time_ms,
                    status_code=status_code,
                )

        status = CheckStatus.DEGRADED if response_time_ms > probe.degraded_threshold_ms else CheckStatus.UP

        return CheckResult(status=status, response_time_ms=response_time_ms, status_code=status_code)

    def _down(self, probe: ProbeSpec, response_time_ms: int) -> CheckResult:
        result = CheckResult(status=CheckStatus.DOWN, response_time_ms=response_time_ms, status_code=0)
        self._log_result(probe, result)

        return result

    def _log_result(self, probe: ProbeSpec, result: CheckResult) -> None:
        log_level = logging.INFO if result.status is CheckStatus.UP else logging.WARNING
        logger.log(
            log_level,
            f"Health check '{probe.name}': "
            f"status={result.status.value}, "
            f"response_time={format_response_time(result.response_time_ms)}, "
            f"status_code={result.status_code}",
            probe_id=probe.id,
        )
