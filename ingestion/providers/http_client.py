"""
Shared HTTP plumbing for market-data adapters.
Minimal client with timeout and a User-Agent. No retry loops - fail closed.
"""

import json
import os
import requests
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class FetchError(Exception):
    """Raised when a provider cannot deliver data for a symbol."""

    def __init__(self, symbol: str, message: str):
        super().__init__(message)
        self.symbol = symbol
        self.message = message


def get_json(
    url: str,
    symbol: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
    provider: str = 'provider'
) -> Any:
    """
    GET a JSON document.

    Args:
        url: Endpoint URL
        symbol: Symbol being fetched (carried on errors)
        params: Query parameters
        timeout: Request timeout in seconds (defaults to env PROVIDER_TIMEOUT_S)
        provider: Provider name for error messages

    Returns:
        Parsed JSON body

    Raises:
        FetchError: On timeout, connection failure, HTTP >= 400 or invalid JSON
    """
    timeout = timeout or float(os.getenv('PROVIDER_TIMEOUT_S', '20'))
    headers = {
        'User-Agent': os.getenv('PROVIDER_USER_AGENT', 'cross-asset-analytics/1.0'),
        'Accept': 'application/json',
    }

    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout:
        raise FetchError(symbol, f"{provider} request timed out after {timeout}s")
    except requests.exceptions.ConnectionError:
        raise FetchError(symbol, f"{provider} unavailable")
    except requests.exceptions.RequestException as e:
        raise FetchError(symbol, f"{provider} request failed: {e}")

    if response.status_code == 429:
        retry_after = response.headers.get('Retry-After', '60')
        raise FetchError(
            symbol,
            f"Rate limit exceeded at {provider}. Wait {retry_after} seconds and try again, "
            f"or request fewer symbols."
        )

    if response.status_code == 404:
        raise FetchError(symbol, f"{symbol} not found at {provider}. Please check the symbol.")

    if response.status_code >= 400:
        raise FetchError(symbol, f"{provider} responded with status {response.status_code}")

    try:
        return response.json()
    except (json.JSONDecodeError, ValueError):
        raise FetchError(symbol, f"Invalid JSON response from {provider}")
