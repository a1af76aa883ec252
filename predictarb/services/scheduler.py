"""
Polling loop for `predictarb --watch`.

Each evaluation cycle runs as an APScheduler interval job: the first run
fires immediately, later runs are spread by random jitter, and a cycle
that is still running when the next one is due is never doubled up.
"""

from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from predictarb.core.config import Settings, get_settings, load_yaml_config
from predictarb.core.logging import get_logger
from predictarb.core.timeutil import now_utc

logger = get_logger("scheduler")

CYCLE_JOB_ID = "evaluation_cycle"
DEFAULT_POLL_INTERVAL_SECONDS = 60
DEFAULT_POLL_JITTER_SECONDS = 10


class SchedulerService:
    """Owns the background scheduler that drives evaluation cycles."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        config: Optional[dict] = None,
    ):
        self.settings = settings or get_settings()
        if config is None:
            try:
                config = load_yaml_config()
            except FileNotFoundError:
                config = {}
        self.poll_config: dict[str, Any] = config.get("scheduler") or {}
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def scheduler(self) -> BackgroundScheduler:
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone=self.settings.timezone)
        return self._scheduler

    def add_interval_job(
        self,
        name: str,
        func: Callable[[], Any],
        seconds: int,
        jitter: int = 0,
    ) -> str:
        """
        Schedule func every `seconds` seconds, first run now.

        Args:
            name: Job id; an existing job with the same id is replaced
            func: Zero-argument callable
            seconds: Interval between runs
            jitter: Each run is shifted by up to this many seconds

        Returns:
            Job ID
        """
        if seconds <= 0:
            raise ValueError(f"Interval must be positive: {seconds}")

        job = self.scheduler.add_job(
            func,
            "interval",
            seconds=seconds,
            jitter=jitter or None,
            id=name,
            name=name,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=now_utc(),
        )
        logger.info(f"Scheduled {name} every {seconds}s (jitter {jitter}s)")
        return job.id

    def setup_from_config(self, cycle_func: Callable[[], Any]) -> str:
        """Schedule the evaluation cycle from the `scheduler:` config section."""
        return self.add_interval_job(
            CYCLE_JOB_ID,
            cycle_func,
            seconds=self.poll_config.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS),
            jitter=self.poll_config.get("poll_jitter_seconds", DEFAULT_POLL_JITTER_SECONDS),
        )

    def get_jobs(self) -> list[dict[str, Any]]:
        """Scheduled jobs with their next fire time, for display."""
        jobs = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": next_run.isoformat() if next_run else None,
            })
        return jobs

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")


def create_scheduler_service(
    settings: Optional[Settings] = None,
    config: Optional[dict] = None,
) -> SchedulerService:
    """Create scheduler service."""
    return SchedulerService(settings=settings, config=config)
