"""Bounded thread pool for independent per-object S3 calls."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from threading import Event
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class TaskResult(Generic[T, R]):
    """Outcome of one task: either ``value`` or the exception it raised."""

    item: T
    value: R | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class PoolRun(Generic[T, R]):
    """Completed task results in input order."""

    results: list = field(default_factory=list)
    cancelled: bool = False


def run_bounded(
    items: Sequence[T],
    func: Callable[[T], R],
    *,
    max_workers: int = 10,
    cancel_event: Event | None = None,
    on_progress: ProgressCallback | None = None,
    progress_every: int = 10,
) -> PoolRun:
    """
    Run ``func`` over ``items`` with at most ``max_workers`` calls in flight.

    A task that raises does not affect the others; its exception is kept in
    the TaskResult. Once ``cancel_event`` is set no further tasks are started,
    tasks already running finish, and only finished tasks are returned.

    Args:
        items: Work items
        func: Called once per item on a worker thread
        max_workers: Concurrency cap (1 runs the items one at a time)
        cancel_event: Optional event that stops submission of new work
        on_progress: Called with (processed, total) every ``progress_every``
            completions and once when the last task finishes
        progress_every: Progress reporting interval

    Returns:
        PoolRun with results ordered like ``items``
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")
    if progress_every < 1:
        raise ValueError("progress_every must be at least 1")

    total = len(items)
    finished: dict[int, TaskResult] = {}
    pending: dict[Future, int] = {}
    next_index = 0
    cancelled = False

    def _is_cancelled() -> bool:
        return cancel_event is not None and cancel_event.is_set()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        while True:
            while next_index < total and len(pending) < max_workers:
                if _is_cancelled():
                    cancelled = True
                    break
                pending[executor.submit(func, items[next_index])] = next_index
                next_index += 1
            if not pending:
                break
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                index = pending.pop(future)
                error = future.exception()
                if error is not None:
                    finished[index] = TaskResult(item=items[index], error=error)
                else:
                    finished[index] = TaskResult(item=items[index], value=future.result())
                processed = len(finished)
                if on_progress is not None and (processed % progress_every == 0 or processed == total):
                    on_progress(processed, total)

    if cancelled:
        logging.warning("Cancelled after %d of %d item(s)", len(finished), total)
    return PoolRun(results=[finished[index] for index in sorted(finished)], cancelled=cancelled)
