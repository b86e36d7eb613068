from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.port.scheduler import Scheduler


class LocalScheduler(Scheduler):
    """In-process interval scheduler.

    Jobs never run concurrently with themselves: a run still in progress when
    the next one is due makes the scheduler skip that firing.
    """

    def __init__(self, scheduler: BaseScheduler) -> None:
        self.scheduler = scheduler
        self._jobs: dict[str, str] = {}

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.shutdown(wait=True)

    def add_job(
        self,
        job_key: str,
        func: Callable[[], Awaitable[None]],
        interval_seconds: int,
        job_name: Optional[str] = None,
        run_immediately: bool = False,
    ) -> str:
        if job_key in self._jobs:
            self.remove_job(job_key)

        job_options = {}
        if run_immediately:
            job_options["next_run_time"] = datetime.now(timezone.utc)

        job = self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id=job_key,
            name=job_name or job_key,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **job_options,
        )

        self._jobs[job_key] = job.id

        return job.id

    def remove_job(self, job_key: str) -> bool:
        if job_key not in self._jobs:
            return False

        job_id = self._jobs.pop(job_key)

        try:
            self.scheduler.remove_job(job_id)
            return True
        except JobLookupError:
            return False

    def has_job(self, job_key: str) -> bool:
        return job_key in self._jobs


def create_local_scheduler() -> Scheduler:
    return LocalScheduler(AsyncIOScheduler(timezone=timezone.utc))
