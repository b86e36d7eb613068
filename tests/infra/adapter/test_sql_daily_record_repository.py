from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from core.domain.check_status import CheckStatus
from core.domain.daily_record import DailyRecord
from core.domain.day_summary import DaySummary
from core.exceptions.storage_write_error import StorageWriteError
from infra.adapter.sql_daily_record_repository import SqlDailyRecordRepository
from infra.db.models import DailyRecordModel
from tests.support.fakes import entry, result

DAY = date(2026, 10, 18)


def _record(record_date: date = DAY) -> DailyRecord:
    return DailyRecord(
        date=record_date,
        checks=[
            entry(
                {"api": result(CheckStatus.DEGRADED, 6_100), "db": result(CheckStatus.DOWN, 0)},
                at=datetime(2026, 10, 18, 6, 15, tzinfo=timezone.utc),
            )
        ],
        summary={
            "api": DaySummary(total_checks=1, degraded_checks=1, avg_response_time_ms=6_100, p95_response_time_ms=6_100),
            "db": DaySummary(total_checks=1, down_checks=1, uptime_percent=0.0),
        },
    )


@pytest.fixture
def repository(sqlite_session_factory) -> SqlDailyRecordRepository:
    return SqlDailyRecordRepository(sqlite_session_factory)


async def test_get_missing_day_returns_none(repository: SqlDailyRecordRepository) -> None:
    assert await repository.get(DAY) is None


async def test_save_then_get_returns_equal_record(repository: SqlDailyRecordRepository) -> None:
    record = _record()

    await repository.save(record)

    assert await repository.get(DAY) == record


async def test_save_overwrites_existing_day(repository: SqlDailyRecordRepository) -> None:
    record = _record()
    await repository.save(record)

    record.compact()
    await repository.save(record)

    stored = await repository.get(DAY)
    assert stored is not None
    assert stored.checks == []
    assert stored.summary["api"].degraded_checks == 1
    assert await repository.list_dates() == [DAY]


async def test_rows_hold_wire_format_json(repository: SqlDailyRecordRepository, sqlite_session_factory) -> None:
    await repository.save(_record())

    async with sqlite_session_factory() as session:
        model = await session.get(DailyRecordModel, DAY)

    assert model.checks[0]["timestamp"] == "2026-10-18T06:15:00.000Z"
    assert model.checks[0]["results"]["api"] == {"status": "degraded", "responseTime": 6100, "statusCode": 200}
    assert model.summary["db"]["downChecks"] == 1


async def test_unreadable_row_reads_as_none(repository: SqlDailyRecordRepository, sqlite_session_factory) -> None:
    async with sqlite_session_factory() as session:
        session.add(DailyRecordModel(record_date=DAY, checks=[{"timestamp": "yesterday"}], summary={}))
        await session.commit()

    assert await repository.get(DAY) is None


async def test_list_dates_sorted_and_delete(repository: SqlDailyRecordRepository) -> None:
    for record_date in (date(2026, 10, 18), date(2026, 7, 1), date(2026, 9, 30)):
        await repository.save(_record(record_date))

    assert await repository.list_dates() == [date(2026, 7, 1), date(2026, 9, 30), date(2026, 10, 18)]

    assert await repository.delete(date(2026, 7, 1)) is True
    assert await repository.delete(date(2026, 7, 1)) is False
    assert await repository.list_dates() == [date(2026, 9, 30), date(2026, 10, 18)]


async def test_database_failure_raises_storage_write_error() -> None:
    class BrokenSession:
        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, *_):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

    repository = SqlDailyRecordRepository(lambda: BrokenSession())

    with pytest.raises(StorageWriteError) as exc_info:
        await repository.save(_record())

    assert exc_info.value.record_date == DAY
