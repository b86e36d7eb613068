import json
from datetime import date, datetime, timezone

import httpx
import pytest

from core.domain.check_result import CheckEntry
from core.domain.check_status import CheckStatus
from core.domain.daily_record import DailyRecord
from core.domain.monitor_definition import (
    ComponentDefinition,
    DirectSource,
    ExternalDefinition,
    GroupDefinition,
    MonitorDefinition,
    TemplatedSource,
)
from core.exceptions.configuration_error import ConfigurationError
from core.exceptions.duplicate_probe_id_error import DuplicateProbeIdError
from core.exceptions.storage_write_error import StorageWriteError
from infra.config.config import get_config
from infra.services.check_runner import CheckRunner
from infra.services.monitor_service import MonitorService, create_monitor_service
from tests.support.fakes import FakeDailyRecordRepository, FakeMonitorDefinitionSource, entry, result
from use_cases.probe.resolve_probes_use_case import ResolveProbesUseCase
from use_cases.record.aggregate_check_entry_use_case import AggregateCheckEntryUseCase
from use_cases.record.enforce_retention_use_case import EnforceRetentionUseCase

NOW = datetime(2026, 10, 18, 23, 59, 30, tzinfo=timezone.utc)
TODAY = date(2026, 10, 18)


def _definition(*components: ComponentDefinition, external: tuple[ExternalDefinition, ...] = ()) -> MonitorDefinition:
    return MonitorDefinition(
        base_url="https://api.example.com",
        test_lat=52.52,
        test_lon=13.4,
        groups=(GroupDefinition(id="core", name="Core", components=components),),
        external=external,
    )


def _service(
    http_client: httpx.AsyncClient,
    definition_source: FakeMonitorDefinitionSource,
    repository: FakeDailyRecordRepository,
) -> MonitorService:
    return MonitorService(
        definition_source=definition_source,
        check_runner=CheckRunner(http_client, clock=lambda: NOW),
        resolve_probes_use_case=ResolveProbesUseCase(),
        aggregate_check_entry_use_case=AggregateCheckEntryUseCase(repository),
        enforce_retention_use_case=EnforceRetentionUseCase(repository, retention_days=90),
        clock=lambda: NOW,
    )


@pytest.fixture
async def http_client():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "down.example.com":
            return httpx.Response(502)

        return httpx.Response(200, json={"status": "ok"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    try:
        yield client
    finally:
        await client.aclose()


async def test_run_records_entry_and_summarises_the_day(http_client) -> None:
    repository = FakeDailyRecordRepository()
    definition = _definition(
        ComponentDefinition(id="api", name="API", source=TemplatedSource(endpoint="/health")),
        ComponentDefinition(id="edge", name="Edge", source=DirectSource(url="https://down.example.com/")),
        external=(ExternalDefinition(id="cdn", name="CDN", url="https://cdn.example.com/"),),
    )
    service = _service(http_client, FakeMonitorDefinitionSource(definition), repository)

    report = await service.run()

    assert report.record_date == TODAY
    assert (report.up, report.degraded, report.down) == (2, 0, 1)
    assert report.total == 3
    assert report.checks_today == 1
    assert not report.retention.changed

    stored = repository.records[TODAY]
    assert len(stored.checks) == 1
    assert stored.checks[0].results["edge"].status_code == 502
    assert stored.summary["edge"].down_checks == 1
    assert stored.summary["edge"].uptime_percent == 0.0
    assert stored.summary["api"].uptime_percent == 100.0


async def test_consecutive_runs_append_to_the_same_day(http_client) -> None:
    repository = FakeDailyRecordRepository()
    definition = _definition(ComponentDefinition(id="api", name="API", source=TemplatedSource(endpoint="/health")))
    service = _service(http_client, FakeMonitorDefinitionSource(definition), repository)

    await service.run()
    report = await service.run()

    assert report.checks_today == 2
    assert repository.records[TODAY].summary["api"].total_checks == 2


async def test_run_enforces_retention(http_client) -> None:
    stale = DailyRecord(date=date(2026, 7, 1))
    yesterday = DailyRecord(
        date=date(2026, 10, 17),
        checks=[entry({"api": result(CheckStatus.UP, 120)}, at=datetime(2026, 10, 17, 8, tzinfo=timezone.utc))],
    )
    repository = FakeDailyRecordRepository([stale, yesterday])
    definition = _definition(ComponentDefinition(id="api", name="API", source=TemplatedSource(endpoint="/health")))
    service = _service(http_client, FakeMonitorDefinitionSource(definition), repository)

    report = await service.run()

    assert report.retention.deleted_dates == [date(2026, 7, 1)]
    assert report.retention.compacted_date == date(2026, 10, 17)
    assert date(2026, 7, 1) not in repository.records
    assert repository.records[date(2026, 10, 17)].checks == []


async def test_configuration_error_stops_before_any_request_or_write() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    repository = FakeDailyRecordRepository()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        service = _service(client, FakeMonitorDefinitionSource(error="missing file"), repository)

        with pytest.raises(ConfigurationError):
            await service.run()

    assert requests == []
    assert repository.save_calls == 0


async def test_duplicate_probe_ids_abort_the_run(http_client) -> None:
    repository = FakeDailyRecordRepository()
    definition = _definition(
        ComponentDefinition(id="api", name="API", source=TemplatedSource(endpoint="/health")),
        external=(ExternalDefinition(id="api", name="API mirror", url="https://mirror.example.com/"),),
    )
    service = _service(http_client, FakeMonitorDefinitionSource(definition), repository)

    with pytest.raises(DuplicateProbeIdError):
        await service.run()

    assert repository.records == {}


async def test_storage_failure_propagates(http_client) -> None:
    repository = FakeDailyRecordRepository()
    repository.fail_on_save = True
    definition = _definition(ComponentDefinition(id="api", name="API", source=TemplatedSource(endpoint="/health")))
    service = _service(http_client, FakeMonitorDefinitionSource(definition), repository)

    with pytest.raises(StorageWriteError):
        await service.run()


async def test_run_scheduled_logs_instead_of_raising(http_client) -> None:
    source = FakeMonitorDefinitionSource(error="broken definition")
    service = _service(http_client, source, FakeDailyRecordRepository())

    await service.run_scheduled()

    assert source.load_calls == 1


async def test_empty_definition_still_records_an_entry(http_client) -> None:
    repository = FakeDailyRecordRepository()
    service = _service(http_client, FakeMonitorDefinitionSource(_definition()), repository)

    report = await service.run()

    assert report.total == 0
    assert repository.records[TODAY].checks == [CheckEntry(timestamp=NOW, results={})]


async def test_create_monitor_service_reads_definition_from_config(tmp_path, http_client) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps(
            {
                "baseUrl": "https://api.example.com",
                "testLat": 0,
                "testLon": 0,
                "groups": [],
                "external": [{"id": "cdn", "name": "CDN", "url": "https://cdn.example.com/"}],
            }
        )
    )
    repository = FakeDailyRecordRepository()

    service = create_monitor_service(get_config(), http_client, repository)
    report = await service.run()

    assert service.enforce_retention_use_case.retention_days == 90
    assert report.up == 1
    assert report.record_date in repository.records
