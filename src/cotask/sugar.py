"""Blocking-style composition API built on a spawn/step backend.

Every blocking operation here is a loop around ``backend.step()``; nothing
blocks the scheduler itself. Awaiting a task that never finishes loops
forever, there is no timeout.
"""

import logging
from collections.abc import Callable, Generator, Iterable
from typing import Any

from cotask.config import DEFAULT_SLEEP_STEPS
from cotask.context import current_task, in_task, task_stack
from cotask.data_models.handle import TaskHandle
from cotask.data_models.task import drive
from cotask.errors import TaskUsageError
from cotask.scheduler.base import validate_backend

logger = logging.getLogger("cotask.sugar")


def _check_handle(task: Any, operation: str) -> None:
    if not isinstance(task, TaskHandle):
        raise TypeError(f"{operation} expects a task handle, got {type(task).__name__}")


def _outcome(task: TaskHandle) -> Any:
    """Re-raise the recorded error of a finished task, or return its result."""
    if task.error is not None:
        raise task.error
    return task.result


def _yield_steps(steps: int) -> Generator[None, None, None]:
    for _ in range(steps):
        yield None


class AsyncSugar:
    """
    Sync/async sugar over a pluggable backend.

    The backend is anything with ``spawn(fn, *args, **kwargs)`` returning a
    TaskHandle and ``step()``. It defaults to the process-wide scheduler from
    cotask.api and is validated the first time it is used.
    """

    def __init__(self, backend: Any = None) -> None:
        """
        Initialize the sugar layer.

        Args:
            backend: spawn/step backend (default scheduler if None)
        """
        self._backend = backend
        self._validated = False

    def use(self, backend: Any) -> None:
        """Swap the backend. It is validated at its first use."""
        self._backend = backend
        self._validated = False
        logger.debug(f"Sugar backend set to {type(backend).__name__}")

    @property
    def backend(self) -> Any:
        """
        The active backend.

        Raises:
            BackendError: If the backend lacks spawn() or step()
        """
        if self._backend is None:
            from cotask.api import get_default_scheduler

            self._backend = get_default_scheduler()
        if not self._validated:
            validate_backend(self._backend)
            self._validated = True
        return self._backend

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Spawn ``fn`` on the backend and return its task handle."""
        return self.backend.spawn(fn, *args, **kwargs)

    def await_(self, task: TaskHandle) -> Any:
        """
        Step the backend until ``task`` finishes.

        Args:
            task: Handle returned by run()/spawn()

        Returns:
            The task's result (None if it has none)

        Raises:
            TypeError: If task is not a task handle
            TaskUsageError: If a task awaits itself or a task that is running
                further up the stack
            Exception: The task's recorded error, re-raised
        """
        _check_handle(task, "await_")
        if task is current_task():
            raise TaskUsageError(f"{task} cannot await itself")
        if any(running is task for running in task_stack()):
            raise TaskUsageError(f"{task} is running further up the stack and cannot finish")

        backend = self.backend
        while not task.finished:
            backend.step()

        return _outcome(task)

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call ``fn`` inline inside a task, or spawn and await it outside one.

        Inside a task nothing is spawned and no tick passes; whatever ``fn``
        returns is returned as is (a generator function's generator can be
        driven with ``yield from``).
        """
        if in_task():
            return fn(*args, **kwargs)
        return self.await_(self.run(fn, *args, **kwargs))

    def sleep(self, steps: int = DEFAULT_SLEEP_STEPS) -> Generator[None, None, None]:
        """
        Yield for ``steps`` ticks; use as ``yield from sugar.sleep(n)``.

        This counts ticks, not seconds.

        Raises:
            TaskUsageError: If called outside a task
            ValueError: If steps is negative
        """
        if not in_task():
            raise TaskUsageError("sleep() must be called inside a task")
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")
        return _yield_steps(steps)

    def defer(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Spawn a task that lets one tick pass before running ``fn``."""

        def deferred() -> Generator[Any, None, Any]:
            yield None
            return (yield from drive(fn, *args, **kwargs))

        deferred.__qualname__ = f"defer({getattr(fn, '__qualname__', repr(fn))})"
        return self.run(deferred)

    def all(self, tasks: Iterable[TaskHandle]) -> list[Any]:
        """
        Await every task, in order.

        Returns:
            Results in the same order as ``tasks``

        Raises:
            Exception: The first error met; tasks not awaited yet keep running
        """
        return [self.await_(task) for task in tasks]

    def race(self, tasks: Iterable[TaskHandle]) -> Any:
        """
        Step the backend until any task finishes.

        Tasks are checked in the given order before every step, so when
        several are finished the first one listed wins. The others keep
        running.

        Returns:
            The winning task's result

        Raises:
            ValueError: If tasks is empty
            Exception: The winning task's error
        """
        tasks = list(tasks)
        if not tasks:
            raise ValueError("race() needs at least one task")
        for task in tasks:
            _check_handle(task, "race")

        backend = self.backend
        while True:
            for task in tasks:
                if task.finished:
                    return _outcome(task)
            backend.step()
