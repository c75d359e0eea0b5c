"""Scheduler - Core cooperative task scheduler for cotask."""

import logging
from collections.abc import Callable, Generator
from numbers import Real
from typing import Any

from cotask import context
from cotask.config import SchedulerConfig
from cotask.data_models.snapshot import SchedulerSnapshot
from cotask.data_models.stats import SchedulerStats
from cotask.data_models.task import Task, suspend
from cotask.errors import TaskCancelledError, TaskUsageError
from cotask.metrics.accumulator import StatsAccumulator
from cotask.scheduler.base import SchedulerBackend

logger = logging.getLogger("cotask.scheduler")

ErrorCallback = Callable[[Task, BaseException], None]


def _is_wait(value: Any) -> bool:
    """True if a yielded value is a wait duration (bool is not)."""
    return isinstance(value, Real) and not isinstance(value, bool)


class Scheduler(SchedulerBackend):
    """
    Cooperative single-threaded task scheduler.

    Owns the live task set and is the only thing that resumes tasks. The host
    calls advance(dt) once per tick; each due task runs until its next
    ``yield``, which hands control back here.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        """
        Initialize an empty scheduler.

        Args:
            config: Scheduler configuration (defaults if None)
            on_error: Called with (task, exception) for every task body failure
        """
        self.config = config or SchedulerConfig()
        self.on_error = on_error

        # Live tasks in spawn order
        self._tasks: list[Task] = []

        self._stats = StatsAccumulator()

    @property
    def name(self) -> str:
        """Name from the scheduler config, used in log messages."""
        return self.config.name

    @property
    def tasks(self) -> list[Task]:
        """Copy of the live task list."""
        return list(self._tasks)

    @property
    def current(self) -> Task | None:
        """The innermost running task owned by this scheduler, if any."""
        for task in reversed(context.task_stack()):
            if task.owner is self:
                return task
        return None

    @property
    def stats(self) -> SchedulerStats:
        """Lifetime counters, with the current live task count."""
        return self._stats.finalize(live=len(self._tasks))

    def spawn(
        self,
        fn: Callable[..., Any],
        *args: Any,
        name: str | None = None,
        **kwargs: Any,
    ) -> Task:
        """
        Create a task running ``fn(*args, **kwargs)`` and add it to the live set.

        The task does not run until the next advance().

        Args:
            fn: Generator function (suspendable) or plain callable
            name: Optional label for logs and snapshots

        Returns:
            The new task
        """
        task = Task.new(fn, *args, owner=self, name=name, **kwargs)
        self._tasks.append(task)
        self._stats.record_spawn()
        logger.debug(f"[{self.name}] Spawned {task}")
        return task

    def sleep(self, seconds: float) -> Generator[Any, None, None]:
        """
        Suspend the running task for ``seconds``; use as ``yield from scheduler.sleep(s)``.

        Raises:
            TaskUsageError: If no task of this scheduler is running
        """
        task = context.current_task()
        if task is None or task.owner is not self:
            raise TaskUsageError("Scheduler.sleep must be called inside one of its tasks")
        return suspend(seconds)

    def advance(self, dt: float) -> None:
        """
        Advance every live task by ``dt`` seconds, resuming the ones that are due.

        Process flow for each task, in spawn order:
        1. Running further up the stack (nested advance) -> skipped
        2. Cancelled -> removed, never resumed; paused -> skipped
        3. wait -= dt; still positive -> stays suspended
        4. Otherwise resumed until its next yield:
           - raised -> failed, error reported, removed
           - returned -> done, removed
           - yielded a number -> that number becomes the new wait
           - yielded anything else -> due again next tick

        Tasks spawned while the pass runs are first visited by the next call.

        Args:
            dt: Elapsed time since the previous tick, in seconds

        Raises:
            ValueError: If dt is negative
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        dt = float(dt)
        self._stats.record_tick(dt)

        # Iterate a snapshot; removal happens in _compact() after the pass
        for task in list(self._tasks):
            if task.finished:
                # Resolved by a nested advance() or cancel_all() during this pass
                continue

            if task.running:
                # Its own resumption further up the stack finalizes it
                continue

            if task.cancelled:
                self._cancel(task)
                continue

            if task.paused:
                continue

            task.wait -= dt
            if task.wait > 0:
                continue

            self._resume(task)

        self._compact()

    def step(self) -> None:
        """Advance by the configured step_dt."""
        self.advance(self.config.step_dt)

    def cancel_all(self) -> None:
        """
        Remove every live task without resuming it.

        Tasks are marked cancelled so anything awaiting them stops waiting.
        A task running further up the stack is only flagged; it is marked
        cancelled as soon as it suspends.
        """
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            if task.finished:
                continue
            task.cancelled = True
            if not task.running:
                self._cancel(task)
        logger.debug(f"[{self.name}] Cancelled all ({len(tasks)} tasks)")

    def _resume(self, task: Task) -> None:
        """
        Run a due task until it yields, returns or raises.

        Args:
            task: The task to resume
        """
        task.status = "running"
        self._stats.record_resume()
        try:
            with context.running(task):
                done, value = task.send()
        except Exception as exc:
            self._fail(task, exc)
            return
        except BaseException as exc:
            # KeyboardInterrupt and friends still end the task, then propagate
            if not task.finished:
                self._finish(task, "failed", error=exc)
            raise

        if task.finished:
            return

        if done:
            self._finish(task, "done", result=value)
            logger.debug(f"[{self.name}] {task} finished")
            return

        if task.cancelled:
            # Cancelled from inside its own body
            self._cancel(task)
            return

        task.status = "suspended"
        task.wait = float(value) if _is_wait(value) else 0.0

    def _fail(self, task: Task, exc: Exception) -> None:
        """
        Record a task body failure and report it.

        Failures never stop the scheduler; other tasks keep running.
        """
        if task.finished:
            return
        self._finish(task, "failed", error=exc)
        if self.config.report_errors:
            logger.error(f"[{self.name}] Task error in {task}: {exc!r}", exc_info=exc)
        if self.on_error is not None:
            self.on_error(task, exc)

    def _cancel(self, task: Task) -> None:
        self._finish(task, "cancelled", error=TaskCancelledError(task))
        logger.debug(f"[{self.name}] Cancelled {task}")

    def _finish(
        self,
        task: Task,
        status: str,
        result: Any = None,
        error: BaseException | None = None,
    ) -> None:
        task.finish(status, result=result, error=error)
        self._stats.record_outcome(status)

    def _compact(self) -> None:
        """Drop finished tasks from the live set, keeping the order of the rest."""
        self._tasks = [task for task in self._tasks if not task.finished]

    def observe(self) -> SchedulerSnapshot:
        """
        Build a snapshot of the current scheduler state.

        Returns:
            SchedulerSnapshot with a copy of every live task's state
        """
        return SchedulerSnapshot(
            name=self.name,
            ticks=self._stats.ticks,
            elapsed=self._stats.elapsed,
            tasks=[task.info() for task in self._tasks if not task.finished],
        )

    def get_state_summary(self) -> dict[str, int]:
        """
        Get a summary of current state counts.

        Returns:
            Dictionary with counts of live tasks in each state
        """
        live = [task for task in self._tasks if not task.finished]
        return {
            "ticks": self._stats.ticks,
            "live": len(live),
            "pending": sum(1 for task in live if task.status == "pending"),
            "suspended": sum(1 for task in live if task.status == "suspended"),
            "running": sum(1 for task in live if task.running),
            "paused": sum(1 for task in live if task.paused),
            "cancel_requested": sum(1 for task in live if task.cancelled),
        }

    def __len__(self) -> int:
        return sum(1 for task in self._tasks if not task.finished)

    def __contains__(self, task: object) -> bool:
        return any(live is task and not live.finished for live in self._tasks)

    def __repr__(self) -> str:
        return f"Scheduler(name={self.name!r}, live={len(self)})"
