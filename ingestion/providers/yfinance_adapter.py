"""
yfinance adapter - fetch price data from Yahoo Finance through the yfinance library.
Network IO allowed here, but minimal business logic.
"""

import yfinance as yf
import pandas as pd
from typing import Dict, Any, List

from ingestion.providers.http_client import FetchError


def fetch_prices_range(symbol: str, range_key: str, interval: str) -> List[Dict[str, Any]]:
    """
    Fetch price rows for a symbol over a named range.
    Returns raw data in provider format - no normalization.

    Args:
        symbol: Ticker symbol (e.g., 'AAPL')
        range_key: yfinance period such as '6mo' or '1y'
        interval: Sampling interval ('1d')

    Returns:
        List of raw price dictionaries in yfinance format

    Raises:
        FetchError: If fetch fails or returns nothing
    """
    try:
        # No progress bar for clean logs
        data = yf.download(
            symbol,
            period=range_key,
            interval=interval,
            progress=False,
            auto_adjust=False
        )
    except Exception as e:
        raise FetchError(symbol, f"Failed to fetch prices for {symbol}: {e}") from e

    if data is None or len(data) == 0:
        raise FetchError(symbol, f"No price data returned for {symbol}")

    # Handle multi-level columns (when yfinance returns ticker-specific columns)
    if isinstance(data.columns, pd.MultiIndex):
        data.columns = data.columns.get_level_values(0)

    # Keep yfinance field names - normalization happens later
    rows = []
    for date_idx, row in data.iterrows():
        row_dict = {'Date': date_idx.strftime('%Y-%m-%d')}

        for field in ['Open', 'High', 'Low', 'Close', 'Adj Close', 'Volume']:
            if field in data.columns and pd.notna(row[field]):
                row_dict[field] = float(row[field]) if field != 'Volume' else int(row[field])

        rows.append(row_dict)

    return rows
