from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from core.domain.daily_record import DailyRecord


class DailyRecordRepository(ABC):
    @abstractmethod
    async def get(self, record_date: date) -> Optional[DailyRecord]:
        """Return the stored record, or None when it is missing or unreadable."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, record: DailyRecord) -> DailyRecord:
        raise NotImplementedError

    @abstractmethod
    async def list_dates(self) -> list[date]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, record_date: date) -> bool:
        raise NotImplementedError
