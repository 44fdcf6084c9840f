"""
Pairwise OLS regression of one return series on another.
Pure functions - pairs with too few samples or zero variance are excluded, not errors.
"""

import math
import numpy as np
from typing import Any, Dict, List, Optional, Sequence, Tuple

from analysis.calculations.correlation import pearson_correlation
from analysis.calculations.risk_metrics import is_flat
from analysis.models import RegressionResult

MIN_REGRESSION_SAMPLES = 20
MAX_SCATTER_POINTS = 400


def ols_fit(x_values: Sequence[float], y_values: Sequence[float]) -> Tuple[float, float]:
    """
    Fit y = alpha + beta * x by ordinary least squares.

    Formula: beta = Cov(x, y) / Var(x), alpha = mean(y) - beta * mean(x)

    Args:
        x_values: Regressor
        y_values: Response (same length as x_values)

    Returns:
        Tuple of (beta, alpha); beta is 0.0 when x is flat
    """
    x = np.asarray(x_values, dtype=np.float64)
    y = np.asarray(y_values, dtype=np.float64)
    if len(x) < 2 or len(x) != len(y):
        return 0.0, float(np.mean(y)) if len(y) else 0.0

    mean_x = float(np.mean(x))
    mean_y = float(np.mean(y))
    if is_flat(x):
        return 0.0, mean_y

    variance_x = float(np.var(x, ddof=1))

    covariance = float(np.sum((x - mean_x) * (y - mean_y)) / (len(x) - 1))
    beta = covariance / variance_x
    alpha = mean_y - beta * mean_x
    return beta, alpha


def downsample_scatter(points: Sequence[Dict[str, Any]], max_points: int = MAX_SCATTER_POINTS) -> List[Dict[str, Any]]:
    """
    Thin a scatter by fixed-stride skipping.

    Keeps every step-th point where step = ceil(n / max_points), so the
    result never exceeds max_points and always starts with the first point.
    """
    if len(points) <= max_points:
        return list(points)

    step = math.ceil(len(points) / max_points)
    return [point for idx, point in enumerate(points) if idx % step == 0]


def regression_line(beta: float, alpha: float, x_values: Sequence[float]) -> List[Dict[str, float]]:
    """Fitted line as two endpoints at min(x) and max(x)."""
    if len(x_values) == 0:
        return []

    min_x = float(min(x_values))
    max_x = float(max(x_values))
    return [
        {'x': min_x, 'y': alpha + beta * min_x},
        {'x': max_x, 'y': alpha + beta * max_x},
    ]


def regress_pair(
    pair: Tuple[str, str],
    dates: Sequence[str],
    x_values: Sequence[float],
    y_values: Sequence[float],
    correlation: Optional[float] = None,
    min_samples: int = MIN_REGRESSION_SAMPLES,
    max_scatter_points: int = MAX_SCATTER_POINTS
) -> Optional[RegressionResult]:
    """
    Regress the second symbol's returns on the first symbol's returns.

    rSquared is the square of the pair's Pearson correlation, so it always
    agrees with the correlation surface built from the same data.

    Args:
        pair: (x_symbol, y_symbol)
        dates: Aligned return dates
        x_values: Returns of pair[0] on that axis
        y_values: Returns of pair[1] on that axis
        correlation: Correlation already computed for this pair; computed
            here when not supplied
        min_samples: Minimum aligned sample size
        max_scatter_points: Cap on scatter points

    Returns:
        RegressionResult, or None when the pair is excluded (sample size
        below min_samples or a flat series on either side)
    """
    sample_size = min(len(dates), len(x_values), len(y_values))
    if sample_size < min_samples:
        return None

    x_values = list(x_values[:sample_size])
    y_values = list(y_values[:sample_size])

    if is_flat(x_values) or is_flat(y_values):
        return None

    beta, alpha = ols_fit(x_values, y_values)
    if correlation is None:
        correlation = pearson_correlation(x_values, y_values)

    scatter = downsample_scatter(
        [{'x': x, 'y': y, 'date': day} for day, x, y in zip(dates, x_values, y_values)],
        max_points=max_scatter_points
    )

    return RegressionResult(
        pair=tuple(pair),
        beta=_finite(beta),
        alpha=_finite(alpha),
        r_squared=_finite(correlation ** 2),
        correlation=_finite(correlation),
        sample_size=sample_size,
        scatter=tuple(scatter),
        regression_line=tuple(regression_line(beta, alpha, x_values)),
    )


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0
