"""Base backend interface for cotask."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from cotask.data_models.handle import TaskHandle
from cotask.errors import BackendError


class SchedulerBackend(ABC):
    """
    Base interface for schedulers that drive the sugar layer.

    AsyncSugar only ever calls these two methods. Scheduler implements them;
    a custom backend may extend this class or simply provide both methods.

    Example:
        ```python
        from cotask import AsyncSugar, Scheduler

        class FixedStepBackend:
            def __init__(self):
                self.inner = Scheduler()

            def spawn(self, fn, *args, **kwargs):
                return self.inner.spawn(fn, *args, **kwargs)

            def step(self):
                self.inner.advance(0.1)

        sugar = AsyncSugar(FixedStepBackend())
        ```
    """

    @abstractmethod
    def spawn(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> TaskHandle:
        """
        Register ``fn`` as a new task and return its handle.

        The task must not run before the next step().
        """
        pass

    @abstractmethod
    def step(self) -> None:
        """
        Make one bounded unit of scheduling progress.

        Note:
            - Must always make progress; await_() and race() call it in a loop
            - May resume any number of unrelated tasks
        """
        pass


def validate_backend(backend: Any) -> Any:
    """
    Check that ``backend`` provides callable spawn() and step().

    Args:
        backend: Object to check (an instance, a module, ...)

    Returns:
        The backend, unchanged

    Raises:
        BackendError: If either method is missing or not callable
    """
    missing = [attr for attr in ("spawn", "step") if not callable(getattr(backend, attr, None))]
    if missing:
        raise BackendError(backend, missing)
    return backend
