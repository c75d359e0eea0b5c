"""cotask configuration constants.

This module contains the defaults used by the scheduler and the sugar layer.
Users can override the per-scheduler values by passing a SchedulerConfig.
"""

from pydantic import BaseModel, Field

# Scheduling defaults
FIRST_TICK_WAIT = -1.0
"""Initial wait of a freshly spawned task. Negative so it runs on the first advance."""

DEFAULT_STEP_DT = 1.0 / 60.0
"""Time slice (seconds) consumed by one Scheduler.step() call."""

DEFAULT_SLEEP_STEPS = 1
"""Number of ticks yielded by the sugar layer's sleep() when no count is given."""

# Logging
LOGGER_NAME = "cotask"
"""Root logger name. Module loggers are children of it (cotask.scheduler, ...)."""


class SchedulerConfig(BaseModel):
    """Validated scheduler configuration."""

    name: str = Field(default="default", description="Label used in log messages")
    step_dt: float = Field(
        default=DEFAULT_STEP_DT,
        gt=0,
        description="Seconds advanced by each step() call",
    )
    report_errors: bool = Field(
        default=True,
        description="Log task body failures at ERROR level with traceback",
    )
