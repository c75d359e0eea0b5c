"""cotask - Cooperative tick-driven task scheduler with a sync/async sugar layer."""

# Data models
from cotask.data_models.handle import TaskHandle
from cotask.data_models.snapshot import SchedulerSnapshot, TaskInfo
from cotask.data_models.stats import SchedulerStats
from cotask.data_models.task import Task

# Configuration and errors
from cotask.config import SchedulerConfig
from cotask.errors import BackendError, CotaskError, TaskCancelledError, TaskUsageError

# Scheduler
from cotask.scheduler.base import SchedulerBackend
from cotask.scheduler.scheduler import Scheduler

# Sugar layer
from cotask.sugar import AsyncSugar

# Module-level API
from cotask.api import (
    advance,
    all_,
    await_,
    call,
    cancel_all,
    defer,
    get_default_scheduler,
    get_default_sugar,
    race,
    reset_default_scheduler,
    run,
    sleep,
    sleep_steps,
    spawn,
    step,
    use,
)

__version__ = "0.1.0"

__all__ = [
    # Data models
    "Task",
    "TaskHandle",
    "TaskInfo",
    "SchedulerSnapshot",
    "SchedulerStats",
    # Configuration and errors
    "SchedulerConfig",
    "CotaskError",
    "TaskUsageError",
    "TaskCancelledError",
    "BackendError",
    # Scheduler
    "Scheduler",
    "SchedulerBackend",
    # Sugar layer
    "AsyncSugar",
    # Module-level API
    "spawn",
    "sleep",
    "advance",
    "step",
    "cancel_all",
    "use",
    "run",
    "await_",
    "call",
    "sleep_steps",
    "defer",
    "all_",
    "race",
    "get_default_scheduler",
    "get_default_sugar",
    "reset_default_scheduler",
]
