# workers/scheduler.py
"""Load the registered periodic jobs into an APScheduler BackgroundScheduler."""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from config import SCHEDULER_TIMEZONE
from workers.registry import SCHEDULED_JOBS

logger = logging.getLogger(__name__)

_scheduler: Optional[BackgroundScheduler] = None


def build_scheduler(timezone: str = SCHEDULER_TIMEZONE) -> BackgroundScheduler:
     """Create a scheduler with every registered job added, not yet started."""
     import workers.jobs  # noqa: F401  registers the jobs

     scheduler = BackgroundScheduler(timezone=timezone)
     for job in SCHEDULED_JOBS:
          func = job["func"]
          trigger = CronTrigger(timezone=timezone, **job["trigger_args"])
          scheduler.add_job(
               func,
               trigger=trigger,
               id=func.__name__,
               name=func.__name__,
               coalesce=True,
               misfire_grace_time=600,
               max_instances=1,
               replace_existing=True,
          )
          logger.info("Registered job: %s (%s, %s)", func.__name__, job["trigger"], job["trigger_args"])
     return scheduler


def start_scheduler() -> BackgroundScheduler:
     global _scheduler
     if _scheduler is not None and _scheduler.running:
          logger.warning("Scheduler already running, skipping duplicate start")
          return _scheduler

     _scheduler = build_scheduler()
     _scheduler.start()
     for job in _scheduler.get_jobs():
          logger.info("%s next run at %s", job.name, job.next_run_time)
     return _scheduler


def shutdown_scheduler() -> None:
     global _scheduler
     if _scheduler is not None and _scheduler.running:
          _scheduler.shutdown(wait=False)
          logger.info("Scheduler stopped")
     _scheduler = None
