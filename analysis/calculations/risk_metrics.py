"""
Risk/return metrics for a single price series.
Pure functions - sparse or degenerate input yields zeros, never NaN or an exception.
"""

import math
import numpy as np
from scipy import stats
from typing import Sequence

from analysis.models import Metrics, PricePoint, ReturnPoint

# Relative spread below which a series counts as constant (rounding noise only)
SPREAD_TOLERANCE = 1e-12


def is_flat(values: Sequence[float]) -> bool:
    """
    True when a series has no variance beyond floating-point noise.

    Uses the same criterion as the correlation engine:
    (n - 1) * Var(x) <= SPREAD_TOLERANCE * sum(x^2)

    Example:
        log returns of 100 * 1.01**k are ln(1.01) up to rounding -> True
    """
    if len(values) < 2:
        return True
    x = np.asarray(values, dtype=np.float64)
    spread = float(np.var(x, ddof=1)) * (len(x) - 1)
    return spread <= SPREAD_TOLERANCE * float(np.sum(x * x))


def sample_mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def sample_std(values: Sequence[float]) -> float:
    """Bessel-corrected standard deviation (ddof=1); 0.0 below 2 values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(values, ddof=1))


def sample_skewness(values: Sequence[float]) -> float:
    """
    Bias-corrected sample skewness (adjusted Fisher-Pearson G1).

    Formula: n / ((n-1)(n-2)) * sum((x - mean)^3) / s^3

    Returns 0.0 with fewer than 3 values or a flat series.
    """
    if len(values) < 3 or is_flat(values):
        return 0.0
    return _finite(stats.skew(np.asarray(values, dtype=np.float64), bias=False))


def sample_excess_kurtosis(values: Sequence[float]) -> float:
    """
    Bias-corrected sample excess kurtosis (G2).

    Returns 0.0 with fewer than 4 values or a flat series.
    """
    if len(values) < 4 or is_flat(values):
        return 0.0
    return _finite(stats.kurtosis(np.asarray(values, dtype=np.float64), fisher=True, bias=False))


def calculate_metrics(
    series: Sequence[PricePoint],
    returns: Sequence[ReturnPoint],
    annualization_factor: int = 252
) -> Metrics:
    """
    Calculate annualized risk/return metrics for one symbol.

    - priceChangePercent uses first and last price points
    - mean/std of daily log returns annualized by factor and sqrt(factor),
      reported as decimals; historicalVolatility is the same std in percent
    - Sharpe assumes a zero risk-free rate

    Args:
        series: PricePoints ordered by date
        returns: Log-return series derived from `series`
        annualization_factor: Trading periods per year (252 equity, 365 crypto)

    Returns:
        Metrics record; zero-filled with sample_size 0 when fewer than
        2 usable closes exist
    """
    usable_closes = [p.close for p in series if p.close is not None and math.isfinite(p.close) and p.close > 0]
    if len(usable_closes) < 2:
        return Metrics()

    first_close = series[0].close
    last_close = series[-1].close
    if first_close > 0:
        price_change_percent = _finite((last_close / first_close - 1) * 100)
    else:
        price_change_percent = 0.0

    values = [r.value for r in returns]
    if not values:
        return Metrics(
            last_close=_finite(last_close),
            price_change_percent=price_change_percent
        )

    mu = sample_mean(values)
    # Flat returns carry no risk; the residual std is rounding noise
    sigma = 0.0 if is_flat(values) else sample_std(values)
    annualized_mean = mu * annualization_factor
    annualized_std = sigma * math.sqrt(annualization_factor)
    sharpe = annualized_mean / annualized_std if annualized_std > 0 else 0.0

    return Metrics(
        sample_size=len(values),
        last_close=_finite(last_close),
        price_change_percent=price_change_percent,
        historical_volatility=_finite(annualized_std * 100),
        mean_return=_finite(annualized_mean),
        std_return=_finite(annualized_std),
        sharpe_ratio=_finite(sharpe),
        skewness=sample_skewness(values),
        kurtosis=sample_excess_kurtosis(values),
    )


def _finite(value) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0
