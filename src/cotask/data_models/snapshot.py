"""Snapshot data models for scheduler introspection."""

from pydantic import BaseModel, Field


class TaskInfo(BaseModel):
    """Copy of a task's observable state at one point in time."""

    id: int = Field(ge=1, description="Task identifier")
    name: str | None = Field(default=None, description="Task label")
    status: str = Field(description="Lifecycle status")
    wait: float = Field(description="Remaining seconds before the task is due")
    paused: bool = Field(default=False, description="Whether the task is paused")
    cancelled: bool = Field(default=False, description="Whether cancellation was requested")

    def __str__(self) -> str:
        """Human-readable string representation."""
        flags = "".join(
            flag for flag, on in ((" paused", self.paused), (" cancelled", self.cancelled)) if on
        )
        return f"TaskInfo(#{self.id} {self.name}, {self.status}, wait={self.wait:.3f}{flags})"


class SchedulerSnapshot(BaseModel):
    """
    Observable scheduler state.

    Built by Scheduler.observe(). Mutating it has no effect on the scheduler.
    """

    name: str = Field(description="Scheduler label")
    ticks: int = Field(ge=0, description="Number of advance() calls so far")
    elapsed: float = Field(ge=0, description="Total seconds advanced so far")
    tasks: list[TaskInfo] = Field(default_factory=list, description="Live tasks in visit order")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"SchedulerSnapshot({self.name}, ticks={self.ticks}, "
            f"elapsed={self.elapsed:.3f}, live={len(self.tasks)})"
        )
