"""Counters describing what a scheduler has done so far."""

from pydantic import BaseModel, Field


class SchedulerStats(BaseModel):
    """Lifetime counters of one scheduler."""

    spawned: int = Field(default=0, ge=0, description="Tasks spawned")
    completed: int = Field(default=0, ge=0, description="Tasks whose body returned")
    failed: int = Field(default=0, ge=0, description="Tasks whose body raised")
    cancelled: int = Field(default=0, ge=0, description="Tasks removed by cancellation")
    resumes: int = Field(default=0, ge=0, description="Body resumptions performed")
    ticks: int = Field(default=0, ge=0, description="advance() calls")
    elapsed: float = Field(default=0.0, ge=0, description="Total seconds advanced")
    live: int = Field(default=0, ge=0, description="Tasks currently in the live set")

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"SchedulerStats(live={self.live}, spawned={self.spawned}, "
            f"done={self.completed}, failed={self.failed}, "
            f"cancelled={self.cancelled}, ticks={self.ticks})"
        )
