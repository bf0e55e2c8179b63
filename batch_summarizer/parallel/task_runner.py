"""
Task runner for batch document processing.

Feeds (task_id, payload) items to an ExecutorStrategy and turns every task
into a TaskResult, so one failing document never takes its siblings down.

run() waits for every submitted task. run_in_batches() slices the items
into consecutive groups and drains each group before submitting the next,
which caps the number of requests in flight against the generation
backend.

Usage:
    runner = ParallelTaskRunner(ThreadPoolStrategy(max_workers=2))
    for outcome in runner.run_in_batches(process_file, [("a.pdf", doc_a), ("b.txt", doc_b)]):
        if not outcome.success:
            print(outcome.task_id, outcome.error)
"""

import threading
import time
from concurrent.futures import Future, as_completed
from dataclasses import dataclass
from typing import Any, Callable

from batch_summarizer.logging_config import debug_log

from .executor_strategy import ExecutorStrategy

TaskFn = Callable[[Any], Any]


@dataclass
class TaskResult:
    """
    Outcome of one task.

    Attributes:
        task_id: Item identifier (the document filename).
        success: False if the task function raised.
        result: Return value of the task function.
        error: The exception the task raised, if any.
        elapsed_seconds: Time from submission to completion.
    """
    task_id: str
    success: bool
    result: Any = None
    error: Exception | None = None
    elapsed_seconds: float = 0.0


class ParallelTaskRunner:
    """
    Runs a task function over items on an ExecutorStrategy.

    Args:
        strategy: Where tasks execute (thread pool or inline).
        cancel_event: Once set, nothing new is submitted. Pass the caller's
            event to share one cancellation token.
    """

    def __init__(
        self,
        strategy: ExecutorStrategy,
        cancel_event: threading.Event | None = None
    ):
        self.strategy = strategy
        self._cancel_event = cancel_event or threading.Event()

    def run(self, fn: TaskFn, items: list[tuple[str, Any]]) -> list[TaskResult]:
        """
        Submit items until cancelled, then wait for everything submitted.

        Returns:
            One TaskResult per submitted item, in completion order.
        """
        pending = self._submit(fn, items)
        results = []
        for future in as_completed(pending):
            task_id, started = pending[future]
            results.append(self._collect(task_id, future, started))
        return results

    def run_in_batches(
        self,
        fn: TaskFn,
        items: list[tuple[str, Any]],
        batch_size: int | None = None
    ) -> list[TaskResult]:
        """
        Run items in consecutive batches.

        A batch starts only after every task of the previous one has
        finished, successfully or not. Batches are not refilled as slots
        free up.

        Args:
            batch_size: Items per batch; strategy.max_workers when omitted.
        """
        size = batch_size or self.strategy.max_workers
        batches = [items[i:i + size] for i in range(0, len(items), size)]
        results: list[TaskResult] = []

        for number, batch in enumerate(batches, 1):
            if self.is_cancelled:
                debug_log(f"[RUNNER] Cancelled; {len(batches) - number + 1} batches not started")
                break
            debug_log(f"[RUNNER] Batch {number}/{len(batches)}: {', '.join(task_id for task_id, _ in batch)}")
            results.extend(self.run(fn, batch))

        return results

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _submit(self, fn: TaskFn, items: list[tuple[str, Any]]) -> dict[Future, tuple[str, float]]:
        submitted = {}
        for task_id, payload in items:
            if self.is_cancelled:
                debug_log(f"[RUNNER] Not submitting {task_id}: cancelled")
                break
            started = time.time()
            submitted[self.strategy.submit(fn, payload)] = (task_id, started)
        return submitted

    def _collect(self, task_id: str, future: Future, started: float) -> TaskResult:
        try:
            value = future.result()
        except Exception as e:
            debug_log(f"[RUNNER] {task_id} raised {type(e).__name__}: {e}")
            return TaskResult(task_id, False, error=e, elapsed_seconds=time.time() - started)

        return TaskResult(task_id, True, result=value, elapsed_seconds=time.time() - started)
