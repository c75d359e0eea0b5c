"""Task handle contract shared by the scheduler and injected backends."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TaskHandle(Protocol):
    """
    What the sugar layer needs from a spawned task.

    Task implements it. A custom backend's spawn() must return objects that
    expose the same members. Once ``finished`` is True, ``result`` and
    ``error`` must not change again.
    """

    result: Any
    error: BaseException | None

    @property
    def finished(self) -> bool:
        """True once the task reached a terminal state."""
        ...

    def cancel(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...
