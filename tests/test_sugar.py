"""Tests for AsyncSugar."""

import pytest

from cotask.config import SchedulerConfig
from cotask.errors import BackendError, TaskCancelledError, TaskUsageError
from cotask.scheduler.base import SchedulerBackend
from cotask.scheduler.scheduler import Scheduler
from cotask.sugar import AsyncSugar


@pytest.fixture
def scheduler():
    """Create a scheduler with a 0.1 second step."""
    return Scheduler(SchedulerConfig(name="sugar", step_dt=0.1))


@pytest.fixture
def sugar(scheduler):
    """Create a sugar layer bound to the scheduler fixture."""
    return AsyncSugar(scheduler)


def forever():
    while True:
        yield


def returns_after(steps, value):
    for _ in range(steps):
        yield
    return value


class CountingBackend(SchedulerBackend):
    """Backend that wraps a Scheduler and counts step() calls."""

    def __init__(self):
        self.inner = Scheduler()
        self.steps = 0

    def spawn(self, fn, *args, **kwargs):
        return self.inner.spawn(fn, *args, **kwargs)

    def step(self):
        self.steps += 1
        self.inner.advance(0.5)


def test_await_returns_result(sugar):
    """Test await_(run(fn)) returns fn's return value."""
    assert sugar.await_(sugar.run(returns_after, 3, "value")) == "value"


def test_await_plain_function(sugar):
    """Test awaiting a plain function body."""
    assert sugar.await_(sugar.run(lambda a, b: a * b, 6, 7)) == 42


def test_await_returns_none_without_result(sugar):
    """Test awaiting a body that returns nothing."""
    assert sugar.await_(sugar.run(returns_after, 1, None)) is None


def test_await_reraises_task_error(sugar):
    """Test that a body failure is re-raised to the awaiting caller."""

    def body():
        yield
        raise KeyError("missing")

    task = sugar.run(body)
    with pytest.raises(KeyError) as excinfo:
        sugar.await_(task)

    assert excinfo.value is task.error


def test_await_finished_task_does_not_step(sugar, scheduler):
    """Test that awaiting an already finished task returns immediately."""
    task = sugar.run(lambda: "done")
    scheduler.advance(0)
    ticks = scheduler.stats.ticks

    assert sugar.await_(task) == "done"
    assert scheduler.stats.ticks == ticks


def test_await_steps_until_sleep_elapses(sugar, scheduler):
    """Test that await_ keeps stepping through a timed sleep."""

    def body():
        yield from scheduler.sleep(1.0)
        return "awake"

    assert sugar.await_(sugar.run(body)) == "awake"
    assert scheduler.stats.elapsed >= 1.0


def test_await_cancelled_task_raises(sugar):
    """Test that awaiting a cancelled task raises TaskCancelledError."""
    task = sugar.run(forever)
    task.cancel()

    with pytest.raises(TaskCancelledError) as excinfo:
        sugar.await_(task)

    assert excinfo.value.task is task


def test_await_rejects_non_handle(sugar):
    """Test that await_ checks its argument."""
    with pytest.raises(TypeError):
        sugar.await_("not a task")


def test_await_self_raises(sugar):
    """Test that a task awaiting itself fails loudly."""
    me = []

    def body():
        sugar.await_(me[0])

    me.append(sugar.run(body))
    with pytest.raises(TaskUsageError):
        sugar.await_(me[0])


def test_await_parent_from_child_raises(sugar):
    """Test that a child cannot await the task that is awaiting it."""
    parent = []

    def child():
        sugar.await_(parent[0])

    def body():
        return sugar.await_(sugar.run(child))

    parent.append(sugar.run(body))
    with pytest.raises(TaskUsageError):
        sugar.await_(parent[0])


def test_await_inside_task(sugar):
    """Test awaiting another task from inside a task body."""

    def inner():
        yield from sugar.sleep(2)
        return 7

    def outer():
        child = sugar.run(inner)
        return sugar.await_(child) + 1

    assert sugar.await_(sugar.run(outer)) == 8


def test_call_outside_task_spawns_and_awaits(sugar, scheduler):
    """Test that call() outside a task costs at least one step."""
    ticks = scheduler.stats.ticks

    assert sugar.call(lambda x: x + 1, 1) == 2
    assert scheduler.stats.ticks > ticks
    assert scheduler.stats.spawned == 1


def test_call_inside_task_runs_inline(sugar, scheduler):
    """Test that call() inside a task neither spawns nor ticks."""

    def add(a, b):
        return a + b

    def body():
        ticks = scheduler.stats.ticks
        spawned = scheduler.stats.spawned
        value = sugar.call(add, 2, 3)
        return value, scheduler.stats.ticks - ticks, scheduler.stats.spawned - spawned

    assert sugar.await_(sugar.run(body)) == (5, 0, 0)


def test_call_inside_task_with_generator_function(sugar):
    """Test that call() inside a task hands back a generator to drive."""

    def inner():
        yield
        return "inner"

    def body():
        value = yield from sugar.call(inner)
        return value

    assert sugar.await_(sugar.run(body)) == "inner"


def test_sleep_counts_ticks(sugar, scheduler):
    """Test that sleep(n) yields exactly n ticks."""
    log = []

    def body():
        log.append("start")
        yield from sugar.sleep(2)
        log.append("end")

    sugar.run(body)
    scheduler.advance(0)
    scheduler.advance(0)
    assert log == ["start"]

    scheduler.advance(0)
    assert log == ["start", "end"]


def test_sleep_defaults_to_one_tick(sugar, scheduler):
    """Test the default sleep length."""
    log = []

    def body():
        yield from sugar.sleep()
        log.append("end")

    sugar.run(body)
    scheduler.advance(0)
    assert log == []
    scheduler.advance(0)
    assert log == ["end"]


def test_sleep_ignores_elapsed_time(sugar, scheduler):
    """Test that a tick sleep does not care how large dt is."""
    log = []

    def body():
        yield from sugar.sleep(3)
        log.append("end")

    sugar.run(body)
    scheduler.advance(100)
    scheduler.advance(100)
    scheduler.advance(100)
    assert log == []
    scheduler.advance(0)
    assert log == ["end"]


def test_sleep_outside_task_raises(sugar):
    """Test that the tick sleep needs a task."""
    with pytest.raises(TaskUsageError):
        sugar.sleep(1)


def test_sleep_negative_steps_raises(sugar):
    """Test that negative step counts are rejected."""

    def body():
        yield from sugar.sleep(-1)

    with pytest.raises(ValueError):
        sugar.await_(sugar.run(body))


def test_defer_runs_after_one_tick(sugar, scheduler):
    """Test that defer() waits one tick before running fn."""
    log = []
    task = sugar.defer(log.append, "deferred")

    scheduler.advance(0)
    assert log == []

    scheduler.advance(0)
    assert log == ["deferred"]
    assert task.status == "done"


def test_defer_returns_result_of_generator(sugar):
    """Test that defer() drives generator functions."""
    assert sugar.await_(sugar.defer(returns_after, 2, "later")) == "later"


def test_all_preserves_input_order(sugar):
    """Test that all() returns results in input order, not finish order."""
    slow = sugar.run(returns_after, 5, "slow")
    fast = sugar.run(returns_after, 1, "fast")

    assert sugar.all([slow, fast]) == ["slow", "fast"]


def test_all_empty(sugar):
    """Test all() with no tasks."""
    assert sugar.all([]) == []


def test_all_propagates_error_and_leaves_others_running(sugar, scheduler):
    """Test that the first error escapes all() and other tasks survive."""

    def fails():
        yield
        raise RuntimeError("first")

    failing = sugar.run(fails)
    survivor = sugar.run(forever)

    with pytest.raises(RuntimeError):
        sugar.all([failing, survivor])

    assert not survivor.finished
    assert survivor in scheduler


def test_race_returns_first_finisher(sugar, scheduler):
    """Test that race() returns as soon as one task finishes."""
    quick = sugar.run(returns_after, 1, "quick")
    slow = sugar.run(forever)

    assert sugar.race([slow, quick]) == "quick"
    assert not slow.finished
    assert slow.cancelled is False
    assert slow in scheduler


def test_race_propagates_error(sugar):
    """Test that a failing winner raises from race()."""

    def fails():
        raise LookupError("lost")

    with pytest.raises(LookupError):
        sugar.race([sugar.run(forever), sugar.run(fails)])


def test_race_prefers_iteration_order(sugar, scheduler):
    """Test that when several tasks are finished the first listed wins."""
    first = sugar.run(lambda: "first")
    second = sugar.run(lambda: "second")
    scheduler.advance(0)

    assert sugar.race([second, first]) == "second"


def test_race_empty_raises(sugar):
    """Test that race() needs tasks."""
    with pytest.raises(ValueError):
        sugar.race([])


def test_custom_backend():
    """Test injecting a custom spawn/step backend."""
    backend = CountingBackend()
    sugar = AsyncSugar()
    sugar.use(backend)

    assert sugar.await_(sugar.run(returns_after, 3, "custom")) == "custom"
    assert backend.steps >= 3
    assert sugar.backend is backend


def test_duck_typed_backend():
    """Test that a backend does not need to subclass SchedulerBackend."""
    inner = Scheduler()

    class Duck:
        def spawn(self, fn, *args, **kwargs):
            return inner.spawn(fn, *args, **kwargs)

        def step(self):
            inner.advance(1)

    sugar = AsyncSugar(Duck())
    assert sugar.call(lambda: "quack") == "quack"


def test_malformed_backend_detected_at_first_use():
    """Test that a backend without spawn/step fails when first used."""
    sugar = AsyncSugar()
    sugar.use(object())

    with pytest.raises(BackendError) as excinfo:
        sugar.run(lambda: None)

    assert excinfo.value.missing == ["spawn", "step"]
    assert isinstance(excinfo.value, TypeError)
