"""
Cross-asset analytics - composes alignment, correlation and regression
over the successfully analysed symbols of one batch.
"""

from typing import Optional, Sequence

from analysis.calculations.alignment import align_pair, intersect_dates, to_date_map
from analysis.calculations.correlation import correlation_matrix, rolling_correlation
from analysis.calculations.regression import regress_pair
from analysis.config import AssetClassConfig, EQUITY
from analysis.models import CrossAssetAnalytics, RollingCorrelation, SeriesResult


def build_analytics(
    data: Sequence[SeriesResult],
    config: AssetClassConfig = EQUITY
) -> Optional[CrossAssetAnalytics]:
    """
    Build the correlation/regression surface for a set of symbols.

    Price and return series are aligned separately: a missing price day
    removes two returns downstream, a missing return day removes one.

    Args:
        data: Per-symbol results, in output order
        config: Asset-class conventions (window, thresholds, matrix flavour)

    Returns:
        CrossAssetAnalytics, or None with fewer than 2 symbols
    """
    if len(data) < 2:
        return None

    symbols = tuple(entry.symbol for entry in data)
    return_maps = [to_date_map(entry.returns) for entry in data]
    return_dates = intersect_dates(return_maps)

    returns_matrix = correlation_matrix(return_maps, return_dates)

    price_matrix = None
    if config.include_price_correlation:
        price_maps = [to_date_map(entry.series) for entry in data]
        price_matrix = correlation_matrix(price_maps, intersect_dates(price_maps))

    rolling = []
    regressions = []

    for row in range(len(symbols)):
        for col in range(row + 1, len(symbols)):
            pair = (symbols[row], symbols[col])
            dates, x_values, y_values = align_pair(return_maps[row], return_maps[col], return_dates)

            rolling.append(RollingCorrelation(
                pair=pair,
                series=rolling_correlation(dates, x_values, y_values, window=config.rolling_window)
            ))

            correlation = returns_matrix[row][col] if returns_matrix is not None else 0.0
            result = regress_pair(
                pair,
                dates,
                x_values,
                y_values,
                correlation=correlation,
                min_samples=config.min_regression_samples,
                max_scatter_points=config.max_scatter_points
            )
            if result is not None:
                regressions.append(result)

    return CrossAssetAnalytics(
        symbols=symbols,
        returns_correlation_matrix=returns_matrix,
        rolling_correlations=tuple(rolling),
        regression_analytics=tuple(regressions),
        price_correlation_matrix=price_matrix,
        includes_price_correlation=config.include_price_correlation,
    )
