"""cotask scheduler.

The cooperative scheduler and the backend interface the sugar layer drives.
"""

from cotask.scheduler.base import SchedulerBackend, validate_backend
from cotask.scheduler.scheduler import Scheduler

__all__ = [
    "Scheduler",
    "SchedulerBackend",
    "validate_backend",
]
