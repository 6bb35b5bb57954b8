import os
import threading

import pytest

from parallel import batch_plan, n_workers, parallel_for, resolve_workers


@pytest.mark.parametrize("workers", [1, 2, 4, 7])
@pytest.mark.parametrize("n_items", [0, 1, 5, 1000])
def test_every_index_runs_once(workers, n_items):
    seen = [[] for _ in range(workers)]

    used = parallel_for(n_items, lambda i, worker: seen[worker].append(i), workers=workers)

    assert used == workers
    assert sorted(i for indices in seen for i in indices) == list(range(n_items))


def test_single_worker_runs_in_order_on_calling_thread():
    calls = []
    caller = threading.get_ident()

    parallel_for(10, lambda i, worker: calls.append((i, worker, threading.get_ident())), workers=1)

    assert [i for i, _, _ in calls] == list(range(10))
    assert {worker for _, worker, _ in calls} == {0}
    assert {ident for _, _, ident in calls} == {caller}


def test_worker_error_is_reraised_after_join():
    done = []
    error = ValueError("bad item")

    def work(i, worker):
        if i == 37:
            raise error
        done.append(i)

    with pytest.raises(ValueError) as info:
        parallel_for(200, work, workers=4)

    assert info.value is error
    assert 37 not in done


def test_sequential_error_is_reraised():
    def work(i, worker):
        raise KeyError(i)

    with pytest.raises(KeyError):
        parallel_for(3, work, workers=1)


def test_batch_plan():
    assert batch_plan(1000, 4) == (15, 66)
    assert batch_plan(10, 4) == (4, 2)
    assert batch_plan(0, 4) == (4, 1)
    assert batch_plan(3, 8) == (8, 1)


def test_resolve_workers():
    assert resolve_workers(3) == 3
    assert resolve_workers(None) == n_workers()
    with pytest.raises(ValueError):
        resolve_workers(0)


def test_n_workers_environment_override(monkeypatch):
    monkeypatch.setenv("MAZE_WORKERS", "3")
    assert n_workers() == 3

    monkeypatch.setenv("MAZE_WORKERS", "0")
    assert n_workers() == 1

    monkeypatch.setenv("MAZE_WORKERS", "many")
    assert n_workers() == max(os.cpu_count() or 1, 1)
