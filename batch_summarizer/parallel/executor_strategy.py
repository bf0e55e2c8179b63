"""
Execution strategies for batch document processing.

Separates "what runs" (one document through the summarizer) from "how it
runs" (one at a time, or several overlapping in a thread pool). The batch
driver receives a strategy, so tests can swap in SequentialStrategy for
deterministic, single-threaded runs.

Usage:
    # Concurrent documents (I/O bound: waiting on Ollama and the disk)
    strategy = ThreadPoolStrategy(max_workers=4)

    # Strictly sequential
    strategy = SequentialStrategy()

    # Both run the same way:
    future = strategy.submit(process_func, item)
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, TypeVar

from batch_summarizer.config import MAX_CONCURRENCY

T = TypeVar('T')
R = TypeVar('R')


class ExecutorStrategy(ABC):
    """
    Abstract strategy for executing document tasks.

    Attributes:
        max_workers: Number of tasks that may overlap (1 for sequential).
    """

    max_workers: int

    @abstractmethod
    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """
        Submit a single task for execution.

        Returns:
            Future object that will contain the result.
        """

    @abstractmethod
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """
        Shutdown the executor and release resources.

        Args:
            wait: If True, wait for pending tasks to complete.
            cancel_futures: If True, cancel futures that have not started.
        """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
        return False


class ThreadPoolStrategy(ExecutorStrategy):
    """
    Thread-based concurrent execution strategy.

    Document processing spends nearly all its time blocked on HTTP calls
    to Ollama or on file I/O, both of which release the GIL, so threads
    overlap that waiting without any CPU parallelism.

    Args:
        max_workers: Maximum concurrent threads. Defaults to MAX_CONCURRENCY.

    Example:
        with ThreadPoolStrategy(max_workers=2) as strategy:
            futures = [strategy.submit(process_doc, doc) for doc in documents]
    """

    def __init__(self, max_workers: int | None = None):
        if max_workers is None:
            max_workers = MAX_CONCURRENCY
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="summarizer"
        )
        self.max_workers = max_workers

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        return self._executor.submit(fn, item)

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)


class SequentialStrategy(ExecutorStrategy):
    """
    Sequential execution strategy.

    Runs each task to completion at submit time, in submission order.
    Used for max_concurrency == 1 and for deterministic tests.
    """

    def __init__(self):
        self.max_workers = 1

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """Execute function synchronously and return a completed Future."""
        future: Future = Future()
        try:
            result = fn(item)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """No-op for sequential strategy (no resources to release)."""


def create_strategy(max_concurrency: int) -> ExecutorStrategy:
    """Pick the strategy matching a configured concurrency level."""
    if max_concurrency <= 1:
        return SequentialStrategy()
    return ThreadPoolStrategy(max_workers=max_concurrency)
