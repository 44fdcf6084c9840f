"""
Yahoo Finance chart adapter - fetch daily bars for listed instruments.
Network IO allowed here, but no business logic: the raw chart JSON is
returned untouched for the normalizer.
"""

import os
from typing import Any, Dict
from urllib.parse import quote

from ingestion.providers.http_client import get_json

DEFAULT_BASE_URL = 'https://query1.finance.yahoo.com/v8/finance/chart'


def build_chart_params(range_key: str, interval: str) -> Dict[str, str]:
    """Query parameters for the v8 chart endpoint."""
    return {
        'range': range_key,
        'interval': interval,
        'includePrePost': 'false',
        'events': 'div,splits',
        'lang': 'en-US',
        'region': 'US',
        'includeAdjustedClose': 'true',
    }


def fetch_chart(symbol: str, range_key: str, interval: str) -> Dict[str, Any]:
    """
    Fetch the raw Yahoo chart payload for a symbol.

    Args:
        symbol: Uppercase ticker (e.g. 'AAPL')
        range_key: Range key such as '6mo' (Yahoo accepts these directly)
        interval: Sampling interval ('1d')

    Returns:
        Chart JSON in provider format

    Raises:
        FetchError: If the request fails
    """
    base_url = os.getenv('YAHOO_CHART_BASE_URL', DEFAULT_BASE_URL)
    url = f"{base_url.rstrip('/')}/{quote(symbol, safe='')}"

    return get_json(
        url,
        symbol,
        params=build_chart_params(range_key, interval),
        provider='Yahoo Finance'
    )
