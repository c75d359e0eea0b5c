"""Tracking of the task whose body is currently executing.

Schedulers push a task before resuming it and pop it afterwards. The stack is
deeper than one only when a task body drives a scheduler itself (for example
by awaiting another task), which resumes other tasks while it is running.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

_stack: list[Any] = []


def current_task() -> Any | None:
    """Return the innermost running task, or None outside any task."""
    return _stack[-1] if _stack else None


def in_task() -> bool:
    """True while some task body is executing."""
    return bool(_stack)


def task_stack() -> tuple[Any, ...]:
    """Running tasks, outermost first."""
    return tuple(_stack)


@contextmanager
def running(task: Any) -> Iterator[Any]:
    """Mark ``task`` as the running task for the duration of the block."""
    _stack.append(task)
    try:
        yield task
    finally:
        _stack.pop()
