"""Counters accumulator for tracking scheduler activity."""

from cotask.data_models.stats import SchedulerStats


class StatsAccumulator:
    """
    Tracks scheduler activity over its lifetime.

    Counters:
    1. Task outcomes - spawned, completed, failed, cancelled
    2. Resumptions - how many times task bodies were entered
    3. Time - advance() calls and total seconds advanced

    The scheduler records into it; finalize() turns it into a SchedulerStats.
    """

    def __init__(self):
        """Initialize counters."""
        self.spawned = 0
        self.completed = 0
        self.failed = 0
        self.cancelled = 0
        self.resumes = 0

        self.ticks = 0
        self.elapsed = 0.0

    def record_tick(self, dt: float) -> None:
        """
        Record one advance() call.

        Args:
            dt: Seconds advanced by the call
        """
        self.ticks += 1
        self.elapsed += dt

    def record_spawn(self) -> None:
        self.spawned += 1

    def record_resume(self) -> None:
        self.resumes += 1

    def record_outcome(self, status: str) -> None:
        """
        Record a task reaching a terminal status.

        Args:
            status: One of "done", "failed", "cancelled"
        """
        if status == "done":
            self.completed += 1
        elif status == "failed":
            self.failed += 1
        elif status == "cancelled":
            self.cancelled += 1

    def finalize(self, live: int) -> SchedulerStats:
        """
        Build the counters model.

        Args:
            live: Current size of the live task set

        Returns:
            SchedulerStats with all counters
        """
        return SchedulerStats(
            spawned=self.spawned,
            completed=self.completed,
            failed=self.failed,
            cancelled=self.cancelled,
            resumes=self.resumes,
            ticks=self.ticks,
            elapsed=self.elapsed,
            live=live,
        )
