import threading

import pytest

from corokit.sync_wait import CoroutineHandle, sync_wait
from corokit.thread_pool import ThreadPool, ThreadPoolOptions, ThreadPoolShutdownError
from corokit.when_all import when_all, when_all_range


@pytest.fixture
def pool():
    tp = ThreadPool(ThreadPoolOptions(thread_count=1))
    yield tp
    tp.shutdown()


def test_one_worker_one_task(pool):
    async def func():
        await pool.schedule()
        return 42

    assert sync_wait(func()) == 42


def test_one_worker_many_tasks_tuple(pool):
    async def f():
        await pool.schedule()
        return 50

    tasks = sync_wait(when_all(f(), f(), f(), f(), f()))
    assert len(tasks) == 5
    assert sum(t.return_value() for t in tasks) == 250


def test_one_worker_many_tasks_vector(pool):
    async def f():
        await pool.schedule()
        return 50

    output_tasks = sync_wait(when_all_range([f(), f(), f()]))
    assert len(output_tasks) == 3
    assert sum(t.return_value() for t in output_tasks) == 150


def test_n_workers_100k_tasks():
    iterations = 100_000
    with ThreadPool() as tp:

        async def make_task():
            await tp.schedule()
            return 1

        output_tasks = sync_wait(when_all_range(make_task() for _ in range(iterations)))
        assert len(output_tasks) == iterations
        assert sum(t.return_value() for t in output_tasks) == iterations


def test_task_spawns_another_task(pool):
    async def f2():
        await pool.schedule()
        return 5

    async def f1():
        await pool.schedule()
        return 1 + await f2()

    assert sync_wait(f1()) == 6


def test_shutdown(pool):
    async def f():
        try:
            await pool.schedule()
        except ThreadPoolShutdownError:
            return True
        return False

    pool.shutdown()
    assert sync_wait(f()) is True


def test_schedule_functor(pool):
    def f():
        return 1

    assert sync_wait(pool.schedule(f)) == 1
    pool.shutdown()
    with pytest.raises(ThreadPoolShutdownError):
        sync_wait(pool.schedule(f))


def test_schedule_functor_returning_none(pool):
    counter = []

    def f(c):
        c.append(1)

    assert sync_wait(pool.schedule(f, counter)) is None
    assert len(counter) == 1
    pool.shutdown()
    with pytest.raises(ThreadPoolShutdownError):
        sync_wait(pool.schedule(f, counter))
    assert len(counter) == 1


def test_schedule_runs_on_worker_thread():
    idents = []
    with ThreadPool(ThreadPoolOptions(thread_count=2, on_thread_start=lambda i: idents.append(threading.get_ident()))) as tp:

        async def f():
            await tp.schedule()
            return threading.get_ident()

        ran_on = sync_wait(f())
    assert ran_on in idents
    assert threading.get_ident() not in idents


def test_thread_callbacks():
    starts = []
    stops = []
    tp = ThreadPool(ThreadPoolOptions(thread_count=2, on_thread_start=starts.append, on_thread_stop=stops.append))
    tp.shutdown()
    assert sorted(starts) == [0, 1]
    assert sorted(stops) == [0, 1]
    assert tp.thread_count() == 2


def test_resume_handle_on_pool():
    idents = []
    tp = ThreadPool(ThreadPoolOptions(thread_count=1, on_thread_start=lambda i: idents.append(threading.get_ident())))

    async def body():
        return threading.get_ident()

    handle = CoroutineHandle(body())
    tp.resume(handle)
    tp.shutdown()
    assert handle.done()
    assert handle.result() in idents
    assert tp.empty()


def test_resume_none_does_nothing(pool):
    pool.resume(None)
    assert pool.size() == 0
    assert pool.empty()


def test_size_counts_pending_work():
    tp = ThreadPool(ThreadPoolOptions(thread_count=0))
    tp.schedule()
    assert tp.size() == 1
    assert not tp.empty()
    tp.shutdown()


def test_context_manager_shuts_down():
    with ThreadPool(ThreadPoolOptions(thread_count=1)) as tp:
        assert tp.thread_count() == 1
    with pytest.raises(ThreadPoolShutdownError):
        tp.schedule()


def test_shutdown_twice():
    tp = ThreadPool(ThreadPoolOptions(thread_count=1))
    tp.shutdown()
    tp.shutdown()
    with pytest.raises(ThreadPoolShutdownError):
        tp.schedule()


def test_negative_thread_count():
    with pytest.raises(ValueError):
        ThreadPoolOptions(thread_count=-1)