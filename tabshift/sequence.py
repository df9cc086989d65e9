"""Order-preserving sequence splitting helpers.

``partition`` splits a sequence in two by a predicate and ``chunk`` groups
consecutive elements that share a classifier key. Both are total over any
finite iterable, including an empty one.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")
K = TypeVar("K")


def partition(items: Iterable[T], predicate: Callable[[T], object]) -> tuple[list[T], list[T]]:
    """Return ``(matching, non_matching)`` keeping the original relative order."""
    matching: list[T] = []
    non_matching: list[T] = []
    for item in items:
        if predicate(item):
            matching.append(item)
        else:
            non_matching.append(item)
    return matching, non_matching


def chunk(items: Iterable[T], classify: Callable[[T], K]) -> list[tuple[K, list[T]]]:
    """Group consecutive items with equal ``classify`` keys into runs.

    A new run starts whenever the key differs from the previous item's key, so
    equal keys separated by another key produce separate runs. Concatenating
    the runs in order reconstructs the input.
    """
    runs: list[tuple[K, list[T]]] = []
    for item in items:
        key = classify(item)
        if runs and runs[-1][0] == key:
            runs[-1][1].append(item)
        else:
            runs.append((key, [item]))
    return runs


__all__ = ["partition", "chunk"]
