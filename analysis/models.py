"""
Value objects for the cross-asset analytics engine.
Frozen dataclasses - built once, never mutated, safe to share across threads.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PricePoint:
    """One calendar-day observation. `date` is an ISO 'YYYY-MM-DD' string."""
    date: str
    close: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'close': self.close,
            'open': self.open,
            'high': self.high,
            'low': self.low,
            'volume': self.volume,
        }


@dataclass(frozen=True)
class ReturnPoint:
    """Log return between the previous close and the close on `date`."""
    date: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'value': self.value}


@dataclass(frozen=True)
class Metrics:
    """Annualized risk/return statistics for one symbol."""
    sample_size: int = 0
    last_close: float = 0.0
    price_change_percent: float = 0.0
    historical_volatility: float = 0.0
    mean_return: float = 0.0
    std_return: float = 0.0
    sharpe_ratio: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sampleSize': self.sample_size,
            'lastClose': self.last_close,
            'priceChangePercent': self.price_change_percent,
            'historicalVolatility': self.historical_volatility,
            'meanReturn': self.mean_return,
            'stdReturn': self.std_return,
            'sharpeRatio': self.sharpe_ratio,
            'skewness': self.skewness,
            'kurtosis': self.kurtosis,
        }


@dataclass(frozen=True)
class SeriesResult:
    """Everything computed for one successfully fetched symbol."""
    symbol: str
    series: Tuple[PricePoint, ...]
    returns: Tuple[ReturnPoint, ...]
    metrics: Metrics
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'meta', _frozen_mapping(self.meta))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'meta': dict(self.meta),
            'series': [point.to_dict() for point in self.series],
            'returns': [point.to_dict() for point in self.returns],
            'metrics': self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class SymbolFailure:
    symbol: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {'symbol': self.symbol, 'message': self.message}


@dataclass(frozen=True)
class RollingCorrelation:
    """Rolling correlation series for one unordered symbol pair."""
    pair: Tuple[str, str]
    series: Tuple[ReturnPoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pair': list(self.pair),
            'series': [point.to_dict() for point in self.series],
        }


@dataclass(frozen=True)
class RegressionResult:
    """OLS fit of the second symbol's returns on the first symbol's returns."""
    pair: Tuple[str, str]
    beta: float
    alpha: float
    r_squared: float
    correlation: float
    sample_size: int
    scatter: Tuple[Mapping[str, Any], ...]
    regression_line: Tuple[Mapping[str, float], ...]

    def __post_init__(self):
        # Points are read-only views; to_dict() hands out fresh dicts
        object.__setattr__(self, 'scatter', tuple(_frozen_mapping(p) for p in self.scatter))
        object.__setattr__(self, 'regression_line', tuple(_frozen_mapping(p) for p in self.regression_line))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pair': list(self.pair),
            'beta': self.beta,
            'alpha': self.alpha,
            'rSquared': self.r_squared,
            'correlation': self.correlation,
            'sampleSize': self.sample_size,
            'scatter': [dict(point) for point in self.scatter],
            'regressionLine': [dict(point) for point in self.regression_line],
        }


@dataclass(frozen=True)
class CrossAssetAnalytics:
    """Correlation and regression surface over two or more symbols."""
    symbols: Tuple[str, ...]
    returns_correlation_matrix: Optional[Tuple[Tuple[float, ...], ...]]
    rolling_correlations: Tuple[RollingCorrelation, ...]
    regression_analytics: Tuple[RegressionResult, ...]
    price_correlation_matrix: Optional[Tuple[Tuple[float, ...], ...]] = None
    includes_price_correlation: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'symbols': list(self.symbols),
            'returnsCorrelationMatrix': _matrix_to_list(self.returns_correlation_matrix),
            'rollingCorrelations': [r.to_dict() for r in self.rolling_correlations],
            'regressionAnalytics': [r.to_dict() for r in self.regression_analytics],
        }
        if self.includes_price_correlation:
            result['priceCorrelationMatrix'] = _matrix_to_list(self.price_correlation_matrix)
        return result


@dataclass(frozen=True)
class BatchResult:
    """Top-level result of one analytics request."""
    range: str
    interval: str
    asset_class: str
    data: Tuple[SeriesResult, ...]
    errors: Tuple[SymbolFailure, ...]
    analytics: Optional[CrossAssetAnalytics] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'range': self.range,
            'interval': self.interval,
            'assetClass': self.asset_class,
            'data': [entry.to_dict() for entry in self.data],
            'errors': [error.to_dict() for error in self.errors],
            'analytics': self.analytics.to_dict() if self.analytics is not None else None,
        }


def _frozen_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(value, MappingProxyType):
        return value
    return MappingProxyType(dict(value))


def _matrix_to_list(matrix: Optional[Tuple[Tuple[float, ...], ...]]) -> Optional[List[List[float]]]:
    if matrix is None:
        return None
    return [list(row) for row in matrix]
