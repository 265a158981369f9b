from __future__ import annotations

"""
Bounded Worker Pool.

Runs the independent per-node tasks of a build stage (page writes, image
renders, PDF conversions) concurrently on a fixed number of threads, and
reports completions as they happen. The stage returns only once every task
has finished; the first task failure is re-raised to the caller.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, TypeVar

from treedocs.domain.pipeline_models import CounterCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 4


class WorkerPool:
    """
    Executes batches of callables with an explicit concurrency limit.

    Attributes:
        max_workers: Upper bound of tasks running at the same time.
        name: Thread name prefix, for diagnostics.
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS, name: str = "TreedocsWorker") -> None:
        self.max_workers = max(1, int(max_workers))
        self.name = name

    def run(
            self,
            tasks: Sequence[Callable[[], T]],
            on_progress: Optional[CounterCallback] = None,
    ) -> List[T]:
        """
        Execute every task and wait for all of them.

        Completion order is not guaranteed, so the progress callback may fire
        in any task order; the returned list, however, follows task order.

        Args:
            tasks: Zero-argument callables.
            on_progress: Called with (completed, total) after each task.

        Returns:
            List[T]: Task results, in submission order.

        Raises:
            Exception: The first failure raised by a task. Remaining tasks
                       are cancelled if not yet started.
        """
        total = len(tasks)
        if total == 0:
            return []

        results: List[Optional[T]] = [None] * total
        completed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix=self.name) as executor:
            futures = {executor.submit(task): index for index, task in enumerate(tasks)}
            try:
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
                    completed += 1
                    if on_progress:
                        on_progress(completed, total)
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise

        logger.debug(f"{self.name}: {total} tasks completed")
        return results  # type: ignore[return-value]
