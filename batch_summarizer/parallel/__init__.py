"""
Parallel processing utilities for the Batch Summarizer.

Components:
    ExecutorStrategy - Abstract base class defining the execution interface
    ThreadPoolStrategy - Thread-based concurrent execution
    SequentialStrategy - One task at a time, in order
    ParallelTaskRunner - Task orchestration with batching and cancellation
    TaskResult - Dataclass for task execution results

Testing Example:
    from batch_summarizer.parallel import SequentialStrategy, ParallelTaskRunner

    runner = ParallelTaskRunner(strategy=SequentialStrategy())
    results = runner.run_in_batches(process_file, items)
    assert len(results) == len(items)
"""

from .executor_strategy import (
    ExecutorStrategy,
    SequentialStrategy,
    ThreadPoolStrategy,
    create_strategy,
)
from .task_runner import ParallelTaskRunner, TaskResult

__all__ = [
    'ExecutorStrategy',
    'ThreadPoolStrategy',
    'SequentialStrategy',
    'create_strategy',
    'ParallelTaskRunner',
    'TaskResult',
]
