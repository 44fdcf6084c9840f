"""
Returns calculation utilities.
Pure functions for log returns between chronologically adjacent closes.
"""

import math
from typing import List, Sequence, Tuple

from analysis.models import PricePoint, ReturnPoint


def log_return_series(series: Sequence[PricePoint]) -> Tuple[ReturnPoint, ...]:
    """
    Build the dated log-return series for a price series.

    Formula: r_t = ln(P_t / P_{t-1})

    Each return is stamped with the later of its two dates. A pair with a
    non-positive or non-finite close on either side is skipped, not zero-filled.

    Args:
        series: PricePoints ordered by date

    Returns:
        Tuple of ReturnPoint, one per usable adjacent pair
    """
    points: List[ReturnPoint] = []

    for idx in range(1, len(series)):
        prev = series[idx - 1].close
        current = series[idx].close
        if _usable(prev) and _usable(current):
            points.append(ReturnPoint(date=series[idx].date, value=math.log(current / prev)))

    return tuple(points)


def _usable(close: float) -> bool:
    return close is not None and math.isfinite(close) and close > 0
