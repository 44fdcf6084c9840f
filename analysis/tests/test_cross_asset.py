"""
Tests for cross-asset analytics assembly.
"""

import math
import pytest
import numpy as np
from dataclasses import replace
from datetime import date, timedelta

from analysis.calculations.returns import log_return_series
from analysis.calculations.risk_metrics import calculate_metrics
from analysis.config import CRYPTO, EQUITY
from analysis.cross_asset import build_analytics
from analysis.models import PricePoint, SeriesResult


def _result(symbol, closes, skip_days=()):
    start = date(2024, 1, 1)
    series = tuple(
        PricePoint(date=(start + timedelta(days=idx)).isoformat(), close=float(close))
        for idx, close in enumerate(closes)
        if idx not in skip_days
    )
    returns = log_return_series(series)
    return SeriesResult(symbol=symbol, series=series, returns=returns,
                        metrics=calculate_metrics(series, returns))


def _walk(seed, n=61, scale=1.0):
    rng = np.random.default_rng(seed)
    steps = rng.normal(0, 0.01, n - 1)
    return list(100 * np.exp(np.concatenate([[0.0], np.cumsum(steps * scale)])))


class TestBuildAnalytics:
    """Tests for build_analytics."""

    def test_none_for_single_symbol(self):
        assert build_analytics([_result('AAA', _walk(1))]) is None
        assert build_analytics([]) is None

    def test_co_moving_pair(self):
        """Doubling every log return gives correlation 1 and beta 2."""
        rng = np.random.default_rng(21)
        steps = rng.normal(0, 0.01, 60)
        x_closes = 100 * np.exp(np.concatenate([[0.0], np.cumsum(steps)]))
        y_closes = 50 * np.exp(np.concatenate([[0.0], np.cumsum(2 * steps)]))

        analytics = build_analytics([_result('XXX', x_closes), _result('YYY', y_closes)])

        assert analytics.symbols == ('XXX', 'YYY')
        assert analytics.returns_correlation_matrix[0][1] == pytest.approx(1.0)

        regression = analytics.regression_analytics[0]
        assert regression.pair == ('XXX', 'YYY')
        assert regression.beta == pytest.approx(2.0)
        assert regression.alpha == pytest.approx(0.0, abs=1e-9)
        assert regression.r_squared == pytest.approx(1.0)

    def test_one_entry_per_unordered_pair(self):
        data = [_result(s, _walk(seed)) for s, seed in [('A', 1), ('B', 2), ('C', 3)]]

        analytics = build_analytics(data)

        pairs = [r.pair for r in analytics.rolling_correlations]
        assert pairs == [('A', 'B'), ('A', 'C'), ('B', 'C')]
        assert [r.pair for r in analytics.regression_analytics] == pairs

    def test_rolling_length_and_window(self):
        data = [_result('A', _walk(1)), _result('B', _walk(2))]

        analytics = build_analytics(data, EQUITY)

        # 61 closes -> 60 aligned returns, window 30
        assert len(analytics.rolling_correlations[0].series) == 60 - 30 + 1

    def test_configurable_window(self):
        data = [_result('A', _walk(1)), _result('B', _walk(2))]

        analytics = build_analytics(data, replace(EQUITY, rolling_window=10))

        assert len(analytics.rolling_correlations[0].series) == 60 - 10 + 1

    def test_matrix_symmetric_unit_diagonal(self):
        data = [_result(s, _walk(seed)) for s, seed in [('A', 4), ('B', 5), ('C', 6)]]

        matrix = build_analytics(data).returns_correlation_matrix

        for i in range(3):
            assert matrix[i][i] == 1.0
            for j in range(3):
                assert matrix[i][j] == matrix[j][i]

    def test_r_squared_matches_matrix_correlation(self):
        data = [_result(s, _walk(seed)) for s, seed in [('A', 7), ('B', 8), ('C', 9)]]

        analytics = build_analytics(data)
        index = {s: i for i, s in enumerate(analytics.symbols)}

        for regression in analytics.regression_analytics:
            i, j = index[regression.pair[0]], index[regression.pair[1]]
            assert regression.correlation == analytics.returns_correlation_matrix[i][j]
            assert regression.r_squared == pytest.approx(regression.correlation ** 2)

    def test_short_overlap_excludes_regression_and_empties_rolling(self):
        """15 aligned returns: no regression, empty rolling series."""
        data = [_result('A', _walk(1, n=16)), _result('B', _walk(2, n=16))]

        analytics = build_analytics(data)

        assert analytics.regression_analytics == ()
        assert len(analytics.rolling_correlations) == 1
        assert analytics.rolling_correlations[0].series == ()

    def test_missing_price_day_shrinks_return_axis(self):
        """A gap in one price series removes its date from the aligned return axis."""
        data = [_result('A', _walk(1)), _result('B', _walk(2), skip_days={30})]

        analytics = build_analytics(data)

        regression = analytics.regression_analytics[0]
        # B's day-29 -> day-31 return replaces its day-30 and day-31 returns
        assert regression.sample_size == 59
        assert len(analytics.rolling_correlations[0].series) == 59 - 30 + 1

    def test_price_matrix_only_for_equity(self):
        data = [_result('A', _walk(1)), _result('B', _walk(2))]

        equity = build_analytics(data, EQUITY).to_dict()
        crypto = build_analytics(data, CRYPTO).to_dict()

        assert 'priceCorrelationMatrix' in equity
        assert equity['priceCorrelationMatrix'][0][0] == 1.0
        assert 'priceCorrelationMatrix' not in crypto

    def test_disjoint_dates_give_null_matrix(self):
        a = _result('A', _walk(1, n=10))
        b = SeriesResult(
            symbol='B',
            series=tuple(PricePoint(date=f"2023-0{m}-01", close=100.0 + m) for m in range(1, 4)),
            returns=(),
            metrics=calculate_metrics([], []),
        )

        analytics = build_analytics([a, b])

        assert analytics.returns_correlation_matrix is None
        assert analytics.regression_analytics == ()
        assert analytics.to_dict()['returnsCorrelationMatrix'] is None

    def test_all_values_finite(self):
        data = [_result(s, _walk(seed)) for s, seed in [('A', 1), ('B', 2)]]

        analytics = build_analytics(data)

        for row in analytics.returns_correlation_matrix:
            assert all(math.isfinite(v) for v in row)
        for rolling in analytics.rolling_correlations:
            assert all(math.isfinite(p.value) for p in rolling.series)
