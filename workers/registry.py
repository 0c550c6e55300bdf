# workers/registry.py
from typing import Any, Callable, Dict, List

# Global registry of scheduled jobs
SCHEDULED_JOBS: List[Dict[str, Any]] = []


def _register_job(func: Callable, trigger: str, **trigger_args):
     """Internal: Register the decorated function and its schedule."""
     SCHEDULED_JOBS.append({
          "func": func,
          "trigger": trigger,
          "trigger_args": trigger_args,
     })
     return func


def run_cron(expr: str):
     """Cron expression in UTC, e.g. run_cron('0 2 * * *')"""
     parts = expr.strip().split()
     if len(parts) != 5:
          raise ValueError("Invalid cron expression (expected 5 fields)")
     minute, hour, day, month, day_of_week = parts

     def wrapper(func: Callable):
          return _register_job(
               func, "cron",
               minute=minute, hour=hour, day=day, month=month, day_of_week=day_of_week,
          )
     return wrapper
