from __future__ import annotations

from typing import Mapping


def pick_most_frequent(counts: Mapping[str, int]) -> str | None:
    """Return the key with the greatest count.

    Ties go to the lexicographically smallest key, never to mapping order.
    """

    if not counts:
        return None
    return min(counts, key=lambda key: (-counts[key], key))
