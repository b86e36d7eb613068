import os
import re
import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

import anyio
import structlog

from core.domain.daily_record import DailyRecord
from core.exceptions.storage_write_error import StorageWriteError
from core.port.daily_record_repository import DailyRecordRepository
from infra.schemas.daily_record import DailyRecordDocument

logger = structlog.stdlib.get_logger(__name__)

RECORD_SUFFIX = ".json"
QUARANTINE_SUFFIX = ".json.corrupt"

_RECORD_NAME = re.compile(r"^(\d{4}-\d{2}-\d{2})\.json(?:\.corrupt(?:\.\d+)?)?$")


class JsonFileDailyRecordRepository(DailyRecordRepository):
    """Stores one pretty-printed JSON document per UTC day.

    Files are named ``YYYY-MM-DD.json``. Reads never touch the disk state: an
    unreadable file is reported as missing and left in place. The next save
    for that day moves it aside to ``YYYY-MM-DD.json.corrupt`` (numbered when
    one already exists) before writing, and retention removes all of them.
    File IO runs in a worker thread.
    """

    def __init__(self, checks_dir: str | Path) -> None:
        self.checks_dir = Path(checks_dir)

    async def get(self, record_date: date) -> Optional[DailyRecord]:
        return await anyio.to_thread.run_sync(self._read, record_date)

    async def save(self, record: DailyRecord) -> DailyRecord:
        payload = DailyRecordDocument.from_domain(record).to_json()

        await anyio.to_thread.run_sync(self._write, record.date, payload)
        logger.debug(f"Wrote {self._path_for(record.date)} ({len(record.checks)} checks)")

        return record

    async def list_dates(self) -> list[date]:
        return await anyio.to_thread.run_sync(self._scan_dates)

    async def delete(self, record_date: date) -> bool:
        return await anyio.to_thread.run_sync(self._remove, record_date)

    def _read(self, record_date: date) -> Optional[DailyRecord]:
        path = self._path_for(record_date)

        if not path.is_file():
            return None

        record = self._parse(path)
        if record is None:
            return None

        if record.date != record_date:
            logger.warning(f"Daily record {path.name} declares date {record.date.isoformat()}, using file name")
            record.date = record_date

        return record

    def _parse(self, path: Path) -> Optional[DailyRecord]:
        try:
            return DailyRecordDocument.model_validate_json(path.read_bytes()).to_domain()
        except (OSError, ValueError) as e:
            logger.error(f"Unreadable daily record {path.name}: {e}")
            return None

    def _write(self, record_date: date, payload: str) -> None:
        path = self._path_for(record_date)

        try:
            self.checks_dir.mkdir(parents=True, exist_ok=True)

            if path.is_file() and self._parse(path) is None:
                self._quarantine(path, record_date)

            fd, tmp_name = tempfile.mkstemp(dir=self.checks_dir, prefix=f".{record_date.isoformat()}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                    tmp_file.write(payload)
                    tmp_file.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(record_date, str(e)) from e

    def _quarantine(self, path: Path, record_date: date) -> None:
        target = self.checks_dir / f"{record_date.isoformat()}{QUARANTINE_SUFFIX}"
        copy_number = 0

        while target.exists():
            copy_number += 1
            target = self.checks_dir / f"{record_date.isoformat()}{QUARANTINE_SUFFIX}.{copy_number}"

        os.rename(path, target)
        logger.warning(f"Moved unreadable daily record {path.name} aside to {target.name}")

    def _scan_dates(self) -> list[date]:
        if not self.checks_dir.is_dir():
            return []

        dates: set[date] = set()

        for path in self.checks_dir.iterdir():
            record_date = self._date_from_name(path.name)

            if record_date is not None:
                dates.add(record_date)

        return sorted(dates)

    def _remove(self, record_date: date) -> bool:
        if not self.checks_dir.is_dir():
            return False

        deleted = False
        prefix = record_date.isoformat()

        for path in self.checks_dir.glob(f"{prefix}{RECORD_SUFFIX}*"):
            if self._date_from_name(path.name) != record_date:
                continue

            try:
                path.unlink()
                deleted = True
            except FileNotFoundError:
                continue

        return deleted

    def _path_for(self, record_date: date) -> Path:
        return self.checks_dir / f"{record_date.isoformat()}{RECORD_SUFFIX}"

    def _date_from_name(self, name: str) -> Optional[date]:
        match = _RECORD_NAME.match(name)
        if match is None:
            return None

        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None
