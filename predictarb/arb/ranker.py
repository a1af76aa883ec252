"""
Ranker for built analysis results.

Orders results ascending by one numeric field. Fully invested markets
that are already worth liquidating go last whatever the field, since
they are not candidates for opening a new position.
"""

import math
from typing import Optional

from predictarb.core.config import RANKABLE_FIELDS
from predictarb.core.errors import ConfigurationError
from predictarb.domain.models import AnalysisResult


def _sort_key(result: AnalysisResult, sort_field: str) -> tuple[int, float]:
    advantage = result.sell_shares_advantage_pct
    if advantage is not None and advantage > 0:
        return (1, math.inf)

    value: Optional[float] = getattr(result, sort_field)
    if value is None:
        return (0, -math.inf)
    return (0, value)


def rank_results(
    results: list[AnalysisResult],
    sort_field: str = "expected_profit_pct",
) -> list[AnalysisResult]:
    """
    Sort results ascending by sort_field.

    Args:
        results: Built results
        sort_field: One of RANKABLE_FIELDS

    Returns:
        New sorted list (stable for equal keys)

    Raises:
        ConfigurationError: Unknown sort field
    """
    if sort_field not in RANKABLE_FIELDS:
        raise ConfigurationError(
            f"Invalid sort field: {sort_field}. Must be one of {RANKABLE_FIELDS}",
            details={"sort_field": sort_field},
        )

    return sorted(results, key=lambda r: _sort_key(r, sort_field))
