from __future__ import annotations

from typing import Callable, Optional

from apscheduler.job import Job
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from descomplicar.scheduler.jobs import run_expiration_triggers

JOB_ID = "expiration_triggers"
JOB_NAME = "Expiration Triggers"


class ExpirationTriggersJob:
    """Owns the one scheduled handle of the daily expiration scan.

    Runs every day at 00:00 server local time. ``start`` is a no-op while
    scheduled and ``stop`` is a no-op while idle. Stopping only cancels future
    ticks; a run already in progress finishes.
    """

    def __init__(
        self,
        scheduler: Optional[BaseScheduler] = None,
        func: Callable[[], object] = run_expiration_triggers,
    ):
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler()
        self.func = func
        self._job: Optional[Job] = None

    @property
    def running(self) -> bool:
        return self._job is not None

    def start(self) -> None:
        if self._job is not None:
            return

        if not self.scheduler.running:
            self.scheduler.start()

        # Every day at 00:00, server local time
        self._job = self.scheduler.add_job(
            self.func,
            CronTrigger(hour=0, minute=0),
            id=JOB_ID,
            name=JOB_NAME,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info("Expiration triggers job scheduled at midnight (0 0 * * *)")

    def stop(self) -> None:
        if self._job is None:
            return

        self._job.remove()
        self._job = None
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            # A shut down scheduler cannot take new work; start() gets a fresh one
            self.scheduler = BackgroundScheduler()
        logger.info("Expiration triggers job stopped")


def start_expiration_triggers_job(job: ExpirationTriggersJob) -> ExpirationTriggersJob:
    job.start()
    return job


def stop_expiration_triggers_job(job: ExpirationTriggersJob) -> None:
    job.stop()
