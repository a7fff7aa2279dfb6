"""Ranking helpers for profile statistics."""

from typing import Any, Dict, List, Tuple

DEFAULT_TOP_N = 50


def rank(mapping: Dict[Any, Any], top_n: int = DEFAULT_TOP_N) -> List[Tuple[Any, Any]]:
    """
    Sort (identity, stats) pairs by descending sample count and keep the top N.

    Ties stay in the mapping's iteration order. That order carries no meaning;
    it only makes the output deterministic for a given run.

    Args:
        mapping: Identity to statistics mapping; stats must have a ``count``
        top_n: Maximum number of entries to return

    Returns:
        List of at most ``top_n`` pairs, non-increasing in count
    """
    if top_n <= 0:
        return []
    ordered = sorted(mapping.items(), key=lambda item: item[1].count, reverse=True)
    return ordered[:top_n]


def percentage(count: int, total: int) -> float:
    """Share of ``total`` as a percentage; 0.0 when there are no samples."""
    if total <= 0:
        return 0.0
    return count * 100 / total
