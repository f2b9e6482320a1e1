"""Ordered rule lists: the first matching predicate decides the outcome."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

Rule = tuple[Callable[[str], bool], T]


def first_match(rules: Iterable[Rule[T]], value: str, default: T) -> T:
    """Return the outcome of the first rule whose predicate accepts *value*."""
    for predicate, outcome in rules:
        if predicate(value):
            return outcome
    return default
