"""Simple synchronous task utilities."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar


T = TypeVar("T")
R = TypeVar("R")


def map_in_threads(func: Callable[[T], R], items: Iterable[T], *, max_workers: int = 1) -> list[R]:
    """Apply ``func`` to every item and return the results in input order."""

    items = list(items)
    if max_workers <= 1 or len(items) < 2:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


__all__ = ["map_in_threads"]
