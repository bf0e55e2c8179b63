"""
Tests for the parallel processing module.

Tests cover:
- ExecutorStrategy implementations (ThreadPool, Sequential)
- create_strategy selection from max_concurrency
- ParallelTaskRunner per-task error capture and timing
- Consecutive batches and cancellation
"""

import sys
import threading
import time
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from batch_summarizer.parallel import (
    ParallelTaskRunner,
    SequentialStrategy,
    ThreadPoolStrategy,
    create_strategy,
)


class TestStrategies:

    def test_sequential_submit_runs_immediately(self):
        future = SequentialStrategy().submit(lambda x: x + 1, 41)
        assert future.done()
        assert future.result() == 42

    def test_sequential_submit_captures_exceptions(self):
        def explode(_):
            raise ValueError("bad document")

        future = SequentialStrategy().submit(explode, None)
        with pytest.raises(ValueError, match="bad document"):
            future.result()

    def test_threadpool_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            ThreadPoolStrategy(max_workers=0)

    def test_threadpool_submit_processes_all_items(self):
        with ThreadPoolStrategy(max_workers=2) as strategy:
            futures = [strategy.submit(lambda x: x * 3, i) for i in [1, 2, 3]]
            assert sorted(f.result() for f in futures) == [3, 6, 9]

    @pytest.mark.parametrize("concurrency, expected", [
        (1, SequentialStrategy),
        (3, ThreadPoolStrategy),
    ])
    def test_create_strategy(self, concurrency, expected):
        strategy = create_strategy(concurrency)
        assert isinstance(strategy, expected)
        assert strategy.max_workers == concurrency
        strategy.shutdown()


class TestParallelTaskRunner:

    def test_failures_are_isolated(self):
        def maybe_fail(x):
            if x == "b":
                raise RuntimeError("failed on b")
            return x.upper()

        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        results = runner.run(maybe_fail, [("a", "a"), ("b", "b"), ("c", "c")])

        by_id = {r.task_id: r for r in results}
        assert by_id["a"].result == "A"
        assert by_id["c"].result == "C"
        assert not by_id["b"].success
        assert isinstance(by_id["b"].error, RuntimeError)

    def test_results_record_elapsed_time(self):
        def slow(x):
            time.sleep(0.02)
            return x

        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        (result,) = runner.run(slow, [("a", 1)])

        assert result.success
        assert result.elapsed_seconds >= 0.01

    def test_empty_items(self):
        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        assert runner.run(lambda x: x, []) == []
        assert runner.run_in_batches(lambda x: x, []) == []


class TestBatches:

    def test_batches_do_not_overlap(self):
        active = 0
        max_active = 0
        batch_of_start = []
        lock = threading.Lock()

        def task(x):
            nonlocal active, max_active
            with lock:
                active += 1
                max_active = max(max_active, active)
                batch_of_start.append(x // 2)
            time.sleep(0.03)
            with lock:
                active -= 1
            return x

        with ThreadPoolStrategy(max_workers=2) as strategy:
            runner = ParallelTaskRunner(strategy=strategy)
            results = runner.run_in_batches(task, [(str(i), i) for i in range(5)], batch_size=2)

        assert len(results) == 5
        assert max_active <= 2
        assert batch_of_start == sorted(batch_of_start)

    def test_batch_size_defaults_to_strategy_workers(self):
        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        results = runner.run_in_batches(lambda x: x, [("a", 1), ("b", 2)])
        assert [r.task_id for r in results] == ["a", "b"]


class TestCancellation:

    def test_cancel_stops_new_submissions(self):
        cancel_event = threading.Event()
        started = []

        def task(x):
            started.append(x)
            if x == 2:
                cancel_event.set()
            return x

        runner = ParallelTaskRunner(strategy=SequentialStrategy(), cancel_event=cancel_event)
        results = runner.run(task, [(str(i), i) for i in range(1, 6)])

        assert started == [1, 2]
        assert len(results) == 2
        assert runner.is_cancelled

    def test_cancel_between_batches(self):
        cancel_event = threading.Event()
        runner = ParallelTaskRunner(strategy=SequentialStrategy(), cancel_event=cancel_event)

        def task(x):
            cancel_event.set()
            return x

        results = runner.run_in_batches(task, [("a", 1), ("b", 2), ("c", 3)], batch_size=1)

        assert [r.task_id for r in results] == ["a"]
