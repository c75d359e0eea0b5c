"""Task data model for cotask."""

import itertools
from collections.abc import Callable, Generator
from inspect import isgenerator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cotask.config import FIRST_TICK_WAIT
from cotask.context import current_task
from cotask.data_models.snapshot import TaskInfo
from cotask.errors import TaskUsageError

TaskStatus = Literal["pending", "running", "suspended", "done", "failed", "cancelled"]

TERMINAL_STATUSES = frozenset({"done", "failed", "cancelled"})

_task_ids = itertools.count(1)


def suspend(value: Any = None) -> Generator[Any, None, None]:
    """Hand a single suspension request to the scheduler.

    Used with ``yield from``: a number is the new wait in seconds, anything
    else means "resume on the next tick".
    """
    yield value


def drive(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Generator[Any, None, Any]:
    """Run ``fn`` as a task body.

    Generator functions are delegated to so their yields reach the scheduler;
    plain functions complete without suspending.
    """
    out = fn(*args, **kwargs)
    if isgenerator(out):
        out = yield from out
    return out


class Task(BaseModel):
    """
    Represents one suspendable unit of work.

    A task is created by a scheduler's spawn(), runs for the first time on
    the next advance(), and ends in exactly one terminal status: done
    (body returned), failed (body raised) or cancelled. A finished task is
    never resumed again and its result/error never change.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int = Field(default_factory=lambda: next(_task_ids), description="Unique task identifier")
    name: str | None = Field(default=None, description="Optional label, defaults to the body name")
    wait: float = Field(
        default=FIRST_TICK_WAIT, description="Seconds left before the task is due again"
    )
    cancelled: bool = Field(default=False, description="Cancellation was requested")
    paused: bool = Field(default=False, description="Task is skipped while paused")
    status: TaskStatus = Field(default="pending", description="Current lifecycle status")
    result: Any = Field(default=None, description="Return value of the body once done")
    error: BaseException | None = Field(
        default=None, description="Failure of the body, or the cancellation error"
    )
    resumes: int = Field(default=0, ge=0, description="Number of times the body was resumed")

    _body: Generator[Any, None, Any] | None = PrivateAttr(default=None)
    _owner: Any = PrivateAttr(default=None)

    @classmethod
    def new(
        cls,
        fn: Callable[..., Any],
        *args: Any,
        owner: Any = None,
        name: str | None = None,
        **kwargs: Any,
    ) -> "Task":
        """
        Create a task whose execution context runs ``fn(*args, **kwargs)``.

        Args:
            fn: Generator function or plain callable
            owner: Scheduler that will drive the task
            name: Optional label (defaults to ``fn.__qualname__``)

        Returns:
            A pending task. Nothing runs until the owner resumes it.
        """
        if not callable(fn):
            raise TypeError(f"Task body must be callable, got {type(fn).__name__}")
        task = cls(name=name or getattr(fn, "__qualname__", None) or repr(fn))
        task._body = drive(fn, *args, **kwargs)
        task._owner = owner
        return task

    @property
    def finished(self) -> bool:
        """True once the task is done, failed or cancelled."""
        return self.status in TERMINAL_STATUSES

    @property
    def running(self) -> bool:
        """True while the body is executing."""
        return self.status == "running"

    @property
    def owner(self) -> Any:
        """The scheduler that spawned this task, if any."""
        return self._owner

    def cancel(self) -> None:
        """Request removal at the next tick boundary."""
        if not self.finished:
            self.cancelled = True

    def pause(self) -> None:
        """Skip this task on every tick until resume() is called."""
        self.paused = True

    def resume(self) -> None:
        """Clear the paused flag."""
        self.paused = False

    def sleep(self, seconds: float) -> Generator[Any, None, None]:
        """
        Suspend this task for ``seconds``; use as ``yield from task.sleep(s)``.

        Raises:
            TaskUsageError: If called while this task is not the running task
        """
        if current_task() is not self:
            raise TaskUsageError(f"Task.sleep must be called from its own task ({self})")
        return suspend(seconds)

    def send(self) -> tuple[bool, Any]:
        """
        Resume the execution context once.

        Returns:
            (finished, value): the return value when the body finished,
            otherwise the value it yielded

        Raises:
            Whatever the body raises.
        """
        if self._body is None:
            raise RuntimeError(f"{self} has no execution context to resume")
        self.resumes += 1
        try:
            return False, self._body.send(None)
        except StopIteration as stop:
            return True, stop.value

    def finish(
        self,
        status: TaskStatus,
        result: Any = None,
        error: BaseException | None = None,
    ) -> None:
        """Move the task into a terminal status. Only the owning scheduler calls this."""
        if self.finished:
            raise RuntimeError(f"{self} already finished as {self.status}")
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"Not a terminal status: {status!r}")
        self.status = status
        self.result = result
        self.error = error
        self._body = None

    def info(self) -> TaskInfo:
        """Snapshot of the observable state."""
        return TaskInfo(
            id=self.id,
            name=self.name,
            status=self.status,
            wait=self.wait,
            paused=self.paused,
            cancelled=self.cancelled,
        )

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"Task(#{self.id} {self.name}, {self.status})"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return (
            f"Task(id={self.id}, name={self.name!r}, status={self.status!r}, "
            f"wait={self.wait}, paused={self.paused}, cancelled={self.cancelled}, "
            f"result={self.result!r}, error={self.error!r})"
        )
