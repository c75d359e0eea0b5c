"""cotask data models.

Task, the handle contract consumed by the sugar layer, and the snapshot and
counter models returned by the scheduler.
"""

from cotask.data_models.handle import TaskHandle
from cotask.data_models.snapshot import SchedulerSnapshot, TaskInfo
from cotask.data_models.stats import SchedulerStats
from cotask.data_models.task import TERMINAL_STATUSES, Task, TaskStatus, drive, suspend

__all__ = [
    "Task",
    "TaskStatus",
    "TERMINAL_STATUSES",
    "TaskHandle",
    "TaskInfo",
    "SchedulerSnapshot",
    "SchedulerStats",
    "drive",
    "suspend",
]
