"""Module-level API backed by a process-wide default scheduler.

Host code that only needs one scheduler can drive everything from here:

    import cotask

    def blink():
        while True:
            toggle_light()
            yield from cotask.sleep(0.5)

    cotask.spawn(blink)
    while running:
        cotask.advance(frame_dt)
"""

import logging
from collections.abc import Callable, Generator, Iterable
from typing import Any

from cotask.config import DEFAULT_SLEEP_STEPS, SchedulerConfig
from cotask.context import current_task
from cotask.data_models.handle import TaskHandle
from cotask.data_models.task import Task, suspend
from cotask.errors import TaskUsageError
from cotask.scheduler.scheduler import Scheduler
from cotask.sugar import AsyncSugar

logger = logging.getLogger("cotask.api")

_default_scheduler: Scheduler | None = None
_default_sugar: AsyncSugar | None = None


def get_default_scheduler() -> Scheduler:
    """Return the process-wide scheduler, creating it on first use."""
    global _default_scheduler
    if _default_scheduler is None:
        _default_scheduler = Scheduler(SchedulerConfig(name="default"))
    return _default_scheduler


def get_default_sugar() -> AsyncSugar:
    """Return the process-wide sugar layer (bound to the default scheduler unless use() was called)."""
    global _default_sugar
    if _default_sugar is None:
        _default_sugar = AsyncSugar()
    return _default_sugar


def reset_default_scheduler(config: SchedulerConfig | None = None) -> Scheduler:
    """
    Replace the default scheduler and sugar layer with fresh ones.

    Live tasks of the old scheduler are cancelled. A backend set with use()
    is forgotten.

    Args:
        config: Configuration for the new scheduler

    Returns:
        The new default scheduler
    """
    global _default_scheduler, _default_sugar
    if _default_scheduler is not None:
        _default_scheduler.cancel_all()
    _default_scheduler = Scheduler(config or SchedulerConfig(name="default"))
    _default_sugar = None
    logger.debug("Default scheduler reset")
    return _default_scheduler


# Scheduler side


def spawn(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Task:
    """Spawn ``fn`` on the default scheduler. It first runs on the next advance()."""
    return get_default_scheduler().spawn(fn, *args, **kwargs)


def sleep(seconds: float) -> Generator[Any, None, None]:
    """
    Suspend the running task for ``seconds``; use as ``yield from cotask.sleep(s)``.

    ``seconds <= 0`` resumes on the next tick.

    Raises:
        TaskUsageError: If called outside a task
    """
    if current_task() is None:
        raise TaskUsageError("cotask.sleep must be called inside a task")
    return suspend(seconds)


def advance(dt: float) -> None:
    """Advance the default scheduler by ``dt`` seconds."""
    get_default_scheduler().advance(dt)


def step() -> None:
    """Advance the default scheduler by its configured step."""
    get_default_scheduler().step()


def cancel_all() -> None:
    """Remove every live task of the default scheduler without resuming it."""
    get_default_scheduler().cancel_all()


# Sugar side


def use(backend: Any) -> None:
    """Make the default sugar layer drive ``backend`` instead of the default scheduler."""
    get_default_sugar().use(backend)


def run(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Spawn ``fn`` through the default sugar layer and return its handle."""
    return get_default_sugar().run(fn, *args, **kwargs)


def await_(task: TaskHandle) -> Any:
    """Step the default backend until ``task`` finishes and return its outcome."""
    return get_default_sugar().await_(task)


def call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call ``fn`` inline inside a task, or spawn and await it outside one."""
    return get_default_sugar().call(fn, *args, **kwargs)


def sleep_steps(steps: int = DEFAULT_SLEEP_STEPS) -> Generator[None, None, None]:
    """Yield for ``steps`` ticks; use as ``yield from cotask.sleep_steps(n)``."""
    return get_default_sugar().sleep(steps)


def defer(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Spawn a task that runs ``fn`` after one tick."""
    return get_default_sugar().defer(fn, *args, **kwargs)


def all_(tasks: Iterable[TaskHandle]) -> list[Any]:
    """Await every task and return their results in input order."""
    return get_default_sugar().all(tasks)


def race(tasks: Iterable[TaskHandle]) -> Any:
    """Return the outcome of the first of ``tasks`` to finish."""
    return get_default_sugar().race(tasks)
