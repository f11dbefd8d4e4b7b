"""
Top-emotion resolution.
"""

from collections import Counter
from typing import Dict, Iterable, Optional, Union


def resolve_top_emotion(names: Iterable[str]) -> Optional[Dict[str, Union[str, int]]]:
    """
    Find the most frequent emotion name.

    Ties on count go to the lexicographically smallest name so the
    result never depends on input order.

    Args:
        names: Emotion names, possibly empty

    Returns:
        {"name": str, "count": int}, or None for empty input
    """
    counts = Counter(names)
    if not counts:
        return None

    name, count = min(counts.items(), key=lambda item: (-item[1], item[0]))
    return {"name": name, "count": count}
