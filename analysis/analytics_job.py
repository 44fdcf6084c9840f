"""
Orchestrated analytics job - fetch, normalize and analyse each symbol
concurrently, then build the cross-asset surface over the survivors.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

from analysis.calculations.returns import log_return_series
from analysis.calculations.risk_metrics import calculate_metrics
from analysis.config import (
    AssetClassConfig,
    EQUITY,
    DEFAULT_RANGE,
    DEFAULT_INTERVAL,
    default_max_workers,
    default_request_timeout,
)
from analysis.cross_asset import build_analytics
from analysis.models import BatchResult, SeriesResult, SymbolFailure
from ingestion.transforms.normalizers import extract_meta, normalize_price_series
from ingestion.transforms.validators import validate_request

logger = logging.getLogger(__name__)

# (symbol, range, interval) -> raw provider payload
Fetcher = Callable[[str, str, str], Any]


class AggregateFailure(Exception):
    """Raised when every requested symbol failed."""

    def __init__(self, errors: List[SymbolFailure]):
        self.errors = list(errors)
        details = '; '.join(f"{e.symbol}: {e.message}" for e in self.errors) or 'Unknown error'
        super().__init__(f"Unable to retrieve data for the requested symbols. {details}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': str(self),
            'errors': [error.to_dict() for error in self.errors],
        }


def analyze_symbol(
    symbol: str,
    fetch: Fetcher,
    range_key: str = DEFAULT_RANGE,
    interval: str = DEFAULT_INTERVAL,
    config: AssetClassConfig = EQUITY
) -> SeriesResult:
    """
    Run the single-symbol pipeline: fetch -> normalize -> returns -> metrics.

    Args:
        symbol: Uppercase symbol
        fetch: Data-fetch collaborator
        range_key: Requested range
        interval: Requested interval
        config: Asset-class conventions

    Returns:
        SeriesResult for the symbol

    Raises:
        Whatever the fetcher or normalizer raises; the batch records it
    """
    payload = fetch(symbol, range_key, interval)
    series = normalize_price_series(payload, interval=interval)
    returns = log_return_series(series)
    metrics = calculate_metrics(series, returns, annualization_factor=config.annualization_factor)

    return SeriesResult(
        symbol=symbol,
        series=series,
        returns=returns,
        metrics=metrics,
        meta=extract_meta(payload),
    )


def run_batch(
    symbols: Iterable[str],
    fetch: Optional[Fetcher] = None,
    range_key: str = DEFAULT_RANGE,
    interval: str = DEFAULT_INTERVAL,
    config: AssetClassConfig = EQUITY,
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None
) -> BatchResult:
    """
    Analyse a batch of symbols and assemble the cross-asset result.

    Each symbol runs independently on a worker thread; a failure is recorded
    against that symbol and never aborts the batch. Cross-series analytics
    start only after every symbol has finished or timed out.

    Args:
        symbols: Requested symbols (cleaned and de-duplicated here)
        fetch: Data-fetch collaborator (defaults to the asset class's provider)
        range_key: Range key from the asset class's enumeration
        interval: Sampling interval ('1d')
        config: Asset-class conventions
        max_workers: Thread cap (defaults to env ANALYTICS_MAX_WORKERS, else one per symbol)
        timeout: Seconds to wait for the whole batch (defaults to env
            ANALYTICS_REQUEST_TIMEOUT_S, else no limit)

    Returns:
        BatchResult; analytics is None unless 2+ symbols succeeded

    Raises:
        ValidationError: If the request is malformed
        AggregateFailure: If no symbol succeeded
    """
    requested = validate_request(symbols, range_key, interval, config)
    fetch = fetch or default_fetcher(config)
    max_workers = max_workers or default_max_workers() or len(requested)
    timeout = timeout if timeout is not None else default_request_timeout()

    start_time = datetime.now()
    logger.info(
        f"Analysing {len(requested)} {config.name} symbols, range: {range_key}, interval: {interval}"
    )

    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        futures = {
            symbol: executor.submit(analyze_symbol, symbol, fetch, range_key, interval, config)
            for symbol in requested
        }
        # Barrier - nothing cross-series runs until every symbol resolves
        wait(list(futures.values()), timeout=timeout)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    data = []
    errors = []

    for symbol in requested:
        future = futures[symbol]

        if not future.done() or future.cancelled():
            message = f"Timed out after {timeout}s"
        elif future.exception() is not None:
            message = str(future.exception()) or 'Unable to analyse symbol.'
        else:
            data.append(future.result())
            logger.info(f"Analysed {symbol}: {len(data[-1].series)} price points")
            continue

        logger.warning(f"Failed to analyse {symbol}: {message}")
        errors.append(SymbolFailure(symbol=symbol, message=message))

    if not data:
        failure = AggregateFailure(errors)
        logger.error(str(failure))
        raise failure

    analytics = build_analytics(data, config)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Analysed {len(data)} symbols with {len(errors)} errors in {duration:.2f}s")

    return BatchResult(
        range=range_key,
        interval=interval,
        asset_class=config.name,
        data=tuple(data),
        errors=tuple(errors),
        analytics=analytics,
    )


def default_fetcher(config: AssetClassConfig, lookup=None) -> Fetcher:
    """
    Provider for an asset class: Yahoo chart for equities, CoinGecko for crypto.

    Args:
        config: Asset-class conventions
        lookup: Optional SymbolLookup for id-keyed providers
    """
    if config.name == 'crypto':
        from ingestion.providers.coingecko_adapter import fetch_market_chart
        return partial(fetch_market_chart, lookup=lookup)

    from ingestion.providers.yahoo_chart_adapter import fetch_chart
    return fetch_chart
