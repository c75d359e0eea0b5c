"""Exceptions raised by cotask."""

from __future__ import annotations

from typing import Any


class CotaskError(Exception):
    """Base class for all cotask errors."""


class TaskUsageError(CotaskError, RuntimeError):
    """Raised when a task-scoped operation is used outside its task."""


class TaskCancelledError(CotaskError):
    """Raised to awaiters of a task that was cancelled before finishing."""

    def __init__(self, task: Any) -> None:
        self.task = task
        super().__init__(f"Task was cancelled: {task}")


class BackendError(CotaskError, TypeError):
    """Raised when an injected backend does not provide spawn() and step()."""

    def __init__(self, backend: Any, missing: list[str]) -> None:
        self.backend = backend
        self.missing = missing
        super().__init__(
            f"Backend {type(backend).__name__} is missing callable "
            f"{', '.join(missing)}\n"
            f"Hint: a backend must implement spawn(fn, *args) and step()"
        )


__all__ = ["CotaskError", "TaskUsageError", "TaskCancelledError", "BackendError"]
