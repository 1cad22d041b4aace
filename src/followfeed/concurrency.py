from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from contextvars import copy_context
from typing import Any, Callable

IndexedTask = tuple[int, Callable[[], Any]]


def _ordered(by_index: dict[int, Any]) -> list[tuple[int, Any]]:
    return [(index, by_index[index]) for index in sorted(by_index)]


def _run_indexed(
    tasks: list[IndexedTask],
    *,
    max_workers: int,
    fail_fast: bool,
) -> tuple[dict[int, Any], dict[int, Exception]]:
    results: dict[int, Any] = {}
    failures: dict[int, Exception] = {}

    def _record(index: int, call: Callable[[], Any]) -> None:
        try:
            results[index] = call()
        except Exception as exc:
            if fail_fast:
                raise
            failures[index] = exc

    if max_workers <= 1 or len(tasks) == 1:
        for index, task in tasks:
            _record(index, task)
        return results, failures

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # Each worker runs in a copy of the caller's context so the verbose
        # flag follows the task.
        future_to_index = {
            executor.submit(copy_context().run, task): index for index, task in tasks
        }
        try:
            for future in as_completed(future_to_index):
                _record(future_to_index[future], future.result)
        except Exception:
            for future in future_to_index:
                future.cancel()
            raise
    return results, failures


def run_indexed_tasks_fail_fast(
    tasks: list[IndexedTask],
    *,
    max_workers: int,
) -> list[tuple[int, Any]]:
    if not tasks:
        return []
    results, _failures = _run_indexed(tasks, max_workers=max_workers, fail_fast=True)
    return _ordered(results)


def run_indexed_tasks_isolated(
    tasks: list[IndexedTask],
    *,
    max_workers: int,
) -> tuple[list[tuple[int, Any]], list[tuple[int, Exception]]]:
    """Run every task; collect results and failures separately, both by index."""
    if not tasks:
        return [], []
    results, failures = _run_indexed(tasks, max_workers=max_workers, fail_fast=False)
    return _ordered(results), _ordered(failures)
