"""
Tests for correlation utilities.
Known-answer cases plus the structural properties of matrices and rolling series.
"""

import math
import pytest
import numpy as np

from analysis.calculations.correlation import (
    correlation_matrix,
    pearson_correlation,
    rolling_correlation,
)


def _dates(n):
    return [f"2024-{1 + idx // 28:02d}-{1 + idx % 28:02d}" for idx in range(n)]


class TestPearsonCorrelation:
    """Tests for pearson_correlation."""

    def test_self_correlation_is_one(self):
        rng = np.random.default_rng(1)
        x = list(rng.normal(0, 0.01, 50))

        assert pearson_correlation(x, x) == pytest.approx(1.0)

    def test_perfect_negative(self):
        x = [0.01, -0.02, 0.03, 0.00, 0.015]
        y = [-v * 3 for v in x]

        assert pearson_correlation(x, y) == pytest.approx(-1.0)

    def test_matches_numpy(self):
        rng = np.random.default_rng(2)
        x = rng.normal(0, 1, 100)
        y = 0.5 * x + rng.normal(0, 1, 100)

        expected = np.corrcoef(x, y)[0, 1]
        assert pearson_correlation(list(x), list(y)) == pytest.approx(expected)

    def test_fewer_than_two_samples(self):
        assert pearson_correlation([0.1], [0.2]) == 0.0
        assert pearson_correlation([], []) == 0.0

    def test_zero_variance_gives_zero(self):
        """Constant series have a zero denominator - 0, never NaN."""
        assert pearson_correlation([0.01] * 10, [0.01 * i for i in range(10)]) == 0.0
        assert pearson_correlation([0.0] * 5, [0.0] * 5) == 0.0

    def test_non_finite_pairs_skipped(self):
        x = [0.01, float('nan'), 0.02, 0.03, float('inf')]
        y = [0.02, 0.5, 0.04, 0.06, 0.1]

        # Only the three finite pairs count, and they are perfectly correlated
        assert pearson_correlation(x, y) == pytest.approx(1.0)

    def test_only_one_finite_pair(self):
        assert pearson_correlation([0.01, float('nan')], [0.02, 0.03]) == 0.0

    def test_bounded(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            x = list(rng.normal(0, 1, 10))
            y = list(rng.normal(0, 1, 10))
            value = pearson_correlation(x, y)
            assert -1.0 <= value <= 1.0
            assert math.isfinite(value)


class TestCorrelationMatrix:
    """Tests for correlation_matrix."""

    def _maps(self, count, length=40, seed=4):
        rng = np.random.default_rng(seed)
        dates = _dates(length)
        base = rng.normal(0, 0.01, length)
        maps = []
        for idx in range(count):
            values = base * (idx + 1) + rng.normal(0, 0.01, length)
            maps.append(dict(zip(dates, values)))
        return maps, dates

    def test_symmetric_with_unit_diagonal(self):
        maps, dates = self._maps(4)

        matrix = correlation_matrix(maps, dates)

        assert len(matrix) == 4
        for i in range(4):
            assert matrix[i][i] == 1.0
            for j in range(4):
                assert matrix[i][j] == matrix[j][i]

    def test_off_diagonal_matches_pairwise(self):
        maps, dates = self._maps(2)

        matrix = correlation_matrix(maps, dates)

        xs = [maps[0][d] for d in dates]
        ys = [maps[1][d] for d in dates]
        assert matrix[0][1] == pytest.approx(pearson_correlation(xs, ys))

    def test_empty_axis_gives_none(self):
        maps, _ = self._maps(2)
        assert correlation_matrix(maps, []) is None

    def test_single_symbol(self):
        maps, dates = self._maps(1)
        assert correlation_matrix(maps, dates) == ((1.0,),)


class TestRollingCorrelation:
    """Tests for rolling_correlation."""

    def test_length_property(self):
        rng = np.random.default_rng(5)
        n, window = 60, 30
        dates = _dates(n)
        x = list(rng.normal(0, 1, n))
        y = list(rng.normal(0, 1, n))

        series = rolling_correlation(dates, x, y, window=window)

        assert len(series) == max(0, n - window + 1)

    def test_points_dated_at_window_end(self):
        n, window = 35, 30
        dates = _dates(n)
        x = [float(i % 7) for i in range(n)]
        y = [float((i * 3) % 5) for i in range(n)]

        series = rolling_correlation(dates, x, y, window=window)

        assert [p.date for p in series] == dates[window - 1:]
        assert series[0].value == pytest.approx(pearson_correlation(x[:window], y[:window]))
        assert series[-1].value == pytest.approx(pearson_correlation(x[-window:], y[-window:]))

    def test_short_pair_gives_empty_series(self):
        dates = _dates(10)
        assert rolling_correlation(dates, [0.1] * 10, [0.2] * 10, window=30) == ()

    def test_exactly_window_length(self):
        dates = _dates(30)
        x = [float(i) for i in range(30)]

        series = rolling_correlation(dates, x, x, window=30)

        assert len(series) == 1
        assert series[0].value == pytest.approx(1.0)

    def test_flat_window_reports_zero(self):
        """Windows with no variance still emit a point, valued 0."""
        dates = _dates(32)
        x = [0.01] * 32
        y = [float(i) for i in range(32)]

        series = rolling_correlation(dates, x, y, window=30)

        assert len(series) == 3
        assert all(p.value == 0.0 for p in series)

    def test_invalid_window(self):
        with pytest.raises(ValueError, match="window"):
            rolling_correlation(_dates(5), [1.0] * 5, [1.0] * 5, window=1)
