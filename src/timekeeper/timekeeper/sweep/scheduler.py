from __future__ import annotations

import atexit
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..core.constants import ABSENCE_SWEEP_HOUR, ABSENCE_SWEEP_MINUTE
from .service import AbsenceSweepService, SweepSummary

logger = logging.getLogger(__name__)

JOB_ID = "absence_sweep"


class AbsenceSweepScheduler:
    """Runs the absence sweep once a day at a fixed local time of the business timezone."""

    def __init__(
        self,
        sweep: AbsenceSweepService,
        *,
        timezone_name: str,
        hour: int = ABSENCE_SWEEP_HOUR,
        minute: int = ABSENCE_SWEEP_MINUTE,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._sweep = sweep
        self.timezone_name = timezone_name
        self.hour = int(hour)
        self.minute = int(minute)
        self.scheduler = scheduler or BackgroundScheduler(timezone=timezone_name)
        self.setup_jobs()

    def setup_jobs(self) -> None:
        self.scheduler.add_job(
            func=self._run_job,
            trigger=CronTrigger(hour=self.hour, minute=self.minute, timezone=self.timezone_name),
            id=JOB_ID,
            name="Mark absences for unattended schedules",
            replace_existing=True,
            misfire_grace_time=1800,
            coalesce=True,
            max_instances=1,
        )

    def _run_job(self) -> None:
        logger.info("Scheduled absence sweep triggered")
        try:
            self._sweep.run()
        except Exception:
            logger.exception("Scheduled absence sweep failed")

    def start(self) -> None:
        self.scheduler.start()
        for job in self.scheduler.get_jobs():
            logger.info("Job '%s' next run: %s", job.name, job.next_run_time)
        atexit.register(self.stop)

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            logger.info("Absence sweep scheduler stopped")

    def run_now(self) -> SweepSummary:
        """Manual trigger, e.g. from an admin endpoint."""
        logger.info("Manual absence sweep triggered")
        return self._sweep.run()

    def status(self) -> dict:
        job = self.scheduler.get_job(JOB_ID)
        next_run = getattr(job, "next_run_time", None) if job else None
        return {
            "running": bool(self.scheduler.running),
            "timezone": self.timezone_name,
            "schedule": f"{self.hour:02d}:{self.minute:02d}",
            "nextRun": next_run.isoformat() if next_run else None,
        }
