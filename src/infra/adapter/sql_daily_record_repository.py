from datetime import date
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.daily_record import DailyRecord
from core.exceptions.storage_write_error import StorageWriteError
from core.port.daily_record_repository import DailyRecordRepository
from infra.db.models import DailyRecordModel
from infra.schemas.daily_record import DailyRecordDocument

logger = structlog.stdlib.get_logger(__name__)


class SqlDailyRecordRepository(DailyRecordRepository):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._session_factory = session_factory

    async def get(self, record_date: date) -> Optional[DailyRecord]:
        async with self._session_factory() as session:
            model = await session.get(DailyRecordModel, record_date)

            if model is None:
                return None

            try:
                return self._to_domain(model)
            except ValueError as e:
                logger.error(f"Unreadable daily record {record_date.isoformat()}, starting the day over: {e}")
                return None

    async def save(self, record: DailyRecord) -> DailyRecord:
        payload = DailyRecordDocument.from_domain(record).model_dump(mode="json", by_alias=True)

        try:
            async with self._session_factory() as session:
                model = await session.get(DailyRecordModel, record.date)

                if model is None:
                    model = DailyRecordModel(record_date=record.date)
                    session.add(model)

                model.checks = payload["checks"]
                model.summary = payload["summary"]

                await session.commit()
        except SQLAlchemyError as e:
            raise StorageWriteError(record.date, str(e)) from e

        return record

    async def list_dates(self) -> list[date]:
        async with self._session_factory() as session:
            statement = select(DailyRecordModel.record_date).order_by(DailyRecordModel.record_date.asc())
            return list((await session.execute(statement)).scalars().all())

    async def delete(self, record_date: date) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(DailyRecordModel).where(DailyRecordModel.record_date == record_date))
            await session.commit()

            return result.rowcount > 0

    def _to_domain(self, model: DailyRecordModel) -> DailyRecord:
        document = DailyRecordDocument.model_validate(
            {
                "date": model.record_date,
                "checks": model.checks or [],
                "summary": model.summary or {},
            }
        )

        return document.to_domain()
