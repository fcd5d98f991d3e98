"""
DSA utilities
=============

Small explicit algorithm primitives used by the engine:
- Merge Sort with a comparator (stable, O(n log n))
- Intersection / union of two sorted integer lists (two-pointer technique)

The sort takes a three-way comparator rather than a key so that "absent"
values can compare equal to anything without being coerced to a number.
"""

from __future__ import annotations
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

def merge_sort(arr: Sequence[T], cmp: Callable[[T, T], int]) -> List[T]:
    """Stable merge sort; `cmp(a, b)` returns <0, 0 or >0."""
    if len(arr) <= 1:
        return list(arr)
    mid = len(arr) // 2
    left = merge_sort(arr[:mid], cmp)
    right = merge_sort(arr[mid:], cmp)
    return _merge(left, right, cmp)

def _merge(left: List[T], right: List[T], cmp: Callable[[T, T], int]) -> List[T]:
    out: List[T] = []
    # i and j are pointers into each sorted list
    i = j = 0
    while i < len(left) and j < len(right):
        # ties take from the left run: this is what makes the sort stable
        if cmp(left[i], right[j]) <= 0:
            out.append(left[i]); i += 1
        else:
            out.append(right[j]); j += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out

def intersect_sorted(a: List[int], b: List[int]) -> List[int]:
    """Two-pointer intersection for sorted integer lists."""
    i = j = 0
    out: List[int] = []
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            out.append(a[i]); i += 1; j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1
    return out

def union_sorted(a: List[int], b: List[int]) -> List[int]:
    """Two-pointer union (deduplicated) for sorted integer lists."""
    i = j = 0
    out: List[int] = []
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            v = a[i]; i += 1; j += 1
        elif a[i] < b[j]:
            v = a[i]; i += 1
        else:
            v = b[j]; j += 1
        if not out or out[-1] != v:
            out.append(v)
    for v in a[i:] + b[j:]:
        if not out or out[-1] != v:
            out.append(v)
    return out
