from __future__ import annotations

import math
from typing import NamedTuple, Optional

from tapguard.core.schemas import ElementNode

# Fields searched by the "contains" strategy, in priority order
CONTAINS_FIELDS = ("identifier", "label", "value", "title", "hint")


class ContainsMatch(NamedTuple):
    similarity: float
    reason: str


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity, matching the inspector's rounding."""
    return int(math.floor(value + 0.5))


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def calculate_string_similarity(a: str, b: str) -> int:
    """
    Score how closely two strings match, 0-100.

    Exact matches score 100 and an empty side scores 0. When one string
    contains the other the score is the length ratio; otherwise it is the
    normalized Levenshtein distance.
    """
    if a == b:
        return 100
    if not a or not b:
        return 0

    shorter, longer = sorted((len(a), len(b)))
    if a in b or b in a:
        return round_half_up(shorter / longer * 100)

    distance = levenshtein_distance(a, b)
    return round_half_up((longer - distance) / longer * 100)


def contains_match(element: ElementNode, term: str) -> Optional[ContainsMatch]:
    """
    Check whether any text field of ``element`` contains ``term``.

    ``term`` is expected to be lowercased already. The first field that
    contains it wins; the score favours fields the term covers more of.
    """
    if not term:
        return None
    for name in CONTAINS_FIELDS:
        field_value = getattr(element, name)
        if field_value and term in field_value.lower():
            similarity = len(term) / len(field_value) * 80 + 20
            return ContainsMatch(min(95.0, similarity), f'{name} contains "{term}"')
    return None
