"""Scheduler for the daily notification triggers.

Schedule overview:
  - 00:00 daily  - Expiration triggers (subscription_expiring / subscription_expired)
"""
from descomplicar.scheduler.runner import (
    ExpirationTriggersJob,
    start_expiration_triggers_job,
    stop_expiration_triggers_job,
)

__all__ = [
    "ExpirationTriggersJob",
    "start_expiration_triggers_job",
    "stop_expiration_triggers_job",
]
