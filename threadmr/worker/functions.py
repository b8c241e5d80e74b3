"""
Built-in map and reduce functions

A map function takes one input line and returns an iterable of zero or more
strings. A reduce function takes the full list of strings in one bucket and
returns an iterable of result strings. Both must be free of shared mutable
state because they run concurrently on worker threads.
"""

from typing import Callable, Iterable, List

MapFunction = Callable[[str], Iterable[str]]
ReduceFunction = Callable[[List[str]], Iterable[str]]


def identity_map(line: str) -> List[str]:
    """Emit the line unchanged"""
    return [line]


def identity_reduce(items: List[str]) -> List[str]:
    """Pass the bucket through unchanged"""
    return list(items)
