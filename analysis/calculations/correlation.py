"""
Correlation calculation utilities.
Pearson correlation, symmetric correlation matrices and rolling-window correlation.
Non-computable correlations are reported as 0.0, never NaN.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from analysis.calculations.alignment import align_pair
from analysis.calculations.risk_metrics import SPREAD_TOLERANCE
from analysis.models import ReturnPoint


def pearson_correlation(x_values: Sequence[float], y_values: Sequence[float]) -> float:
    """
    Pearson correlation via the sum-based formula.

    Formula: (m*Sxy - Sx*Sy) / sqrt((m*Sxx - Sx^2) * (m*Syy - Sy^2))

    Only pairs where both values are finite are counted.

    Args:
        x_values: First sequence
        y_values: Second sequence (paired by position)

    Returns:
        Correlation in [-1, 1]; 0.0 with fewer than 2 valid pairs or a
        zero denominator
    """
    length = min(len(x_values), len(y_values))
    if length < 2:
        return 0.0

    count = 0
    sum_x = sum_y = sum_x2 = sum_y2 = sum_xy = 0.0

    for idx in range(length):
        x = x_values[idx]
        y = y_values[idx]
        if not (_is_finite(x) and _is_finite(y)):
            continue

        count += 1
        sum_x += x
        sum_y += y
        sum_x2 += x * x
        sum_y2 += y * y
        sum_xy += x * y

    if count < 2:
        return 0.0

    numerator = count * sum_xy - sum_x * sum_y
    spread_x = count * sum_x2 - sum_x ** 2
    spread_y = count * sum_y2 - sum_y ** 2

    # Constant series leave only rounding noise in the spread terms
    if spread_x <= SPREAD_TOLERANCE * count * sum_x2 or spread_y <= SPREAD_TOLERANCE * count * sum_y2:
        return 0.0

    denominator = math.sqrt(spread_x * spread_y)
    if denominator == 0:
        return 0.0

    correlation = numerator / denominator
    if not math.isfinite(correlation):
        return 0.0

    return max(-1.0, min(1.0, correlation))


def correlation_matrix(
    maps: Sequence[Dict[str, float]],
    dates: Sequence[str]
) -> Optional[Tuple[Tuple[float, ...], ...]]:
    """
    Build a symmetric k x k Pearson correlation matrix.

    Each unordered pair is computed once and mirrored; the diagonal is 1.

    Args:
        maps: One date -> value mapping per symbol, in symbol order
        dates: Aligned date axis shared by all maps

    Returns:
        Tuple-of-tuples matrix, or None when the aligned axis is empty
    """
    if not dates:
        return None

    size = len(maps)
    matrix = [[1.0] * size for _ in range(size)]

    for row in range(size):
        for col in range(row + 1, size):
            _, x_values, y_values = align_pair(maps[row], maps[col], dates)
            value = pearson_correlation(x_values, y_values)
            matrix[row][col] = value
            matrix[col][row] = value

    return tuple(tuple(row) for row in matrix)


def rolling_correlation(
    dates: Sequence[str],
    x_values: Sequence[float],
    y_values: Sequence[float],
    window: int = 30
) -> Tuple[ReturnPoint, ...]:
    """
    Correlation over a sliding window of fixed size.

    Each point is stamped with the last date of its window. Windows whose
    correlation is not computable report 0.0 per pearson_correlation, so the
    output length is always max(0, n - window + 1).

    Args:
        dates: Aligned dates
        x_values: First series on that axis
        y_values: Second series on that axis
        window: Observations per window

    Returns:
        Tuple of ReturnPoint (date, correlation); empty if n < window
    """
    if window < 2:
        raise ValueError("window must be at least 2")

    length = min(len(dates), len(x_values), len(y_values))
    if length < window:
        return ()

    points: List[ReturnPoint] = []
    for end in range(window - 1, length):
        start = end - window + 1
        value = pearson_correlation(x_values[start:end + 1], y_values[start:end + 1])
        points.append(ReturnPoint(date=dates[end], value=value))

    return tuple(points)


def _is_finite(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)
