"""Shared helpers for name-fragment analysis."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def split_name(name: str) -> List[str]:
    """Split an identifier on camelCase, snake_case and kebab-case boundaries.

    >>> split_name("getHTTPResponse_code")
    ['get', 'http', 'response', 'code']
    """
    fragments: List[str] = []
    for chunk in _SEPARATORS.split(name):
        if not chunk:
            continue
        fragments.extend(part.lower() for part in _CAMEL_BOUNDARY.split(chunk) if part)
    return fragments


def fragment_counts(names: Iterable[str], *, min_length: int = 1) -> Counter[str]:
    counts: Counter[str] = Counter()
    for name in names:
        counts.update(
            fragment for fragment in split_name(name) if len(fragment) >= min_length
        )
    return counts


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    left_set = set(left)
    right_set = set(right)
    union = left_set | right_set
    if not union:
        return 0.0
    return len(left_set & right_set) / len(union)


__all__ = ["fragment_counts", "jaccard", "split_name"]
