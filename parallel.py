#Batched fork-join helper used for the all-pairs visibility scan
#Workers pull fixed-size batches of indices until the range is exhausted

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)

MIN_BATCH = 64  # large ranges get n_items // MIN_BATCH batches
WORKERS_ENV = "MAZE_WORKERS"


def n_workers():
    """Number of available workers: $MAZE_WORKERS if set, else the CPU count."""
    value = os.environ.get(WORKERS_ENV)
    if value:
        try:
            return max(int(value), 1)
        except ValueError:
            logger.warning("ignoring non-integer %s=%r", WORKERS_ENV, value)
    return max(os.cpu_count() or 1, 1)


def resolve_workers(workers=None):
    """Validate an explicit worker count, or fall back to n_workers()."""
    if workers is None:
        return n_workers()
    if workers < 1:
        raise ValueError(f"worker count must be at least 1, got {workers}")
    return int(workers)


def batch_plan(n_items, workers):
    """
    Split n_items into batches so there are at least as many batches as workers.

    :return: (batch_count, batch_size)
    """
    batch_count = max(workers, n_items // MIN_BATCH)
    batch_size = max(n_items // batch_count, 1)
    return batch_count, batch_size


def parallel_for(n_items, worker_fn, workers=None):
    """
    Call worker_fn(index, worker) for every index in range(n_items).

    worker is the ordinal (0 .. workers - 1) of the thread running the call,
    so callers can keep one private accumulator per worker. The first exception
    raised by any worker is re-raised once every worker has finished.

    :param n_items: Number of independent work items
    :param worker_fn: Callable taking (index, worker)
    :param workers: Worker count, defaults to n_workers()
    :return: The number of worker ordinals that may have been used
    """
    workers = resolve_workers(workers)

    # Sequential fallback runs the same calls on worker 0
    if workers <= 1:
        for i in range(n_items):
            worker_fn(i, 0)
        return 1

    _, batch_size = batch_plan(n_items, workers)
    logger.debug("parallel_for: %d items, %d workers, batch size %d",
                 n_items, workers, batch_size)

    lock = threading.Lock()
    cursor = [0]
    failure = []

    def next_batch():
        with lock:
            if failure:
                return n_items
            begin = cursor[0]
            cursor[0] += batch_size
            return begin

    def run(worker):
        try:
            while True:
                begin = next_batch()
                if begin >= n_items:
                    break
                for i in range(begin, min(begin + batch_size, n_items)):
                    worker_fn(i, worker)
        except Exception as exc:
            logger.error("worker %d failed: %r", worker, exc)
            with lock:
                if not failure:
                    failure.append(exc)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        for worker in range(workers):
            executor.submit(run, worker)

    if failure:
        raise failure[0]
    return workers
