"""
CoinGecko adapter - fetch daily market charts for crypto assets.
Network IO allowed here, but no business logic.
"""

import os
from typing import Any, Dict, Optional

from analysis.config import CRYPTO
from ingestion.providers.http_client import FetchError, get_json
from ingestion.transforms.symbol_lookup import SymbolLookup
from ingestion.transforms.validators import range_to_days

DEFAULT_BASE_URL = 'https://api.coingecko.com/api/v3'

_default_lookup = SymbolLookup()


def fetch_market_chart(
    symbol: str,
    range_key: str,
    interval: str,
    lookup: Optional[SymbolLookup] = None
) -> Dict[str, Any]:
    """
    Fetch the raw CoinGecko market chart for a symbol.

    Args:
        symbol: Uppercase crypto symbol (e.g. 'SOL')
        range_key: Range key such as '3mo', mapped to a day count capped at 365
        interval: Sampling interval ('1d')
        lookup: Symbol -> CoinGecko id resolver (defaults to the built-in table)

    Returns:
        Market chart JSON with a 'meta' block naming the resolved coin id

    Raises:
        FetchError: If the request fails or the body carries no prices
    """
    lookup = lookup or _default_lookup
    coin_id = lookup.get_id(symbol)
    days = range_to_days(range_key, CRYPTO)

    base_url = os.getenv('COINGECKO_BASE_URL', DEFAULT_BASE_URL)
    url = f"{base_url.rstrip('/')}/coins/{coin_id}/market_chart"

    payload = get_json(
        url,
        symbol,
        params={
            'vs_currency': 'usd',
            'days': days,
            'interval': 'daily' if interval == '1d' else interval,
        },
        provider='CoinGecko'
    )

    if not isinstance(payload, dict):
        raise FetchError(symbol, 'Invalid response from CoinGecko API')

    payload = dict(payload)
    payload['meta'] = {'currency': 'USD', 'coinId': coin_id}
    return payload
