"""
Normalizers for transforming provider payloads to the canonical price series.
Pure functions - no IO, network, or side effects.
Provider shapes are recognised here and nowhere else.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from analysis.models import PricePoint


class DataUnavailable(Exception):
    """Raised when a provider payload holds no usable price series."""
    pass


def normalize_price_series(payload: Any, *, interval: str = '1d') -> Tuple[PricePoint, ...]:
    """
    Transform a provider payload into PricePoints ordered by date.

    Recognised shapes:
    - Yahoo chart JSON ({'chart': {'result': [...]}})
    - CoinGecko market chart JSON ({'prices': [[ms, price], ...]})
    - Row list ([{'Date': 'YYYY-MM-DD', 'Close': ...}, ...])

    Minimal normalization:
    - Null or non-finite closes are dropped
    - Dates truncated to calendar day; several points on one day keep the last
    - Output sorted by date

    Args:
        payload: Raw provider payload
        interval: Requested sampling interval (only '1d' is supported)

    Returns:
        Tuple of PricePoint

    Raises:
        DataUnavailable: If the payload shape is not recognised or holds no points
    """
    if interval != '1d':
        raise DataUnavailable(f"Unsupported interval: {interval}")

    if isinstance(payload, dict) and 'chart' in payload:
        raw_points = _from_yahoo_chart(payload)
    elif isinstance(payload, dict) and 'prices' in payload:
        raw_points = _from_market_chart(payload)
    elif isinstance(payload, list):
        raw_points = _from_rows(payload)
    else:
        raise DataUnavailable(_provider_error(payload) or 'Unknown response shape from provider')

    # Deduplication by calendar day - later observations win
    by_day: Dict[str, PricePoint] = {}
    for point in raw_points:
        by_day[point.date] = point

    if not by_day:
        raise DataUnavailable('No price data returned')

    return tuple(by_day[day] for day in sorted(by_day))


def extract_meta(payload: Any) -> Dict[str, Any]:
    """
    Pull provider metadata (currency, exchange, ...) out of a payload.

    Returns an empty dict for shapes that carry no metadata.
    """
    if isinstance(payload, dict) and 'chart' in payload:
        result = _first_chart_result(payload)
        meta = (result or {}).get('meta') or {}
        keys = ('currency', 'symbol', 'exchangeName', 'instrumentType', 'timezone')
        return {key: meta[key] for key in keys if key in meta}

    if isinstance(payload, dict) and isinstance(payload.get('meta'), dict):
        return dict(payload['meta'])

    return {}


def _from_yahoo_chart(payload: Dict[str, Any]) -> List[PricePoint]:
    result = _first_chart_result(payload)
    if not result:
        error = (payload.get('chart') or {}).get('error') or {}
        message = error.get('description') if isinstance(error, dict) else None
        raise DataUnavailable(message or 'Unknown response shape from Yahoo Finance')

    timestamps = result.get('timestamp') or []
    quotes = (result.get('indicators') or {}).get('quote') or [{}]
    quote = quotes[0] or {}

    closes = quote.get('close') or []
    opens = quote.get('open') or []
    highs = quote.get('high') or []
    lows = quote.get('low') or []
    volumes = quote.get('volume') or []

    points = []
    for idx, ts in enumerate(timestamps):
        close = _number(_at(closes, idx))
        if close is None:
            continue

        points.append(PricePoint(
            date=_day_from_epoch(ts),
            close=close,
            open=_number(_at(opens, idx)),
            high=_number(_at(highs, idx)),
            low=_number(_at(lows, idx)),
            volume=_number(_at(volumes, idx)),
        ))

    return points


def _from_market_chart(payload: Dict[str, Any]) -> List[PricePoint]:
    prices = payload.get('prices') or []

    # Volumes share timestamps with prices
    volume_by_ts = {}
    for entry in payload.get('total_volumes') or []:
        if isinstance(entry, (list, tuple)) and len(entry) >= 2:
            volume_by_ts[entry[0]] = _number(entry[1])

    points = []
    for entry in prices:
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            continue

        close = _number(entry[1])
        if close is None:
            continue

        points.append(PricePoint(
            date=_day_from_epoch(entry[0] / 1000.0),
            close=close,
            volume=volume_by_ts.get(entry[0]),
        ))

    return points


def _from_rows(rows: List[Any]) -> List[PricePoint]:
    points = []
    for raw in rows:
        if not isinstance(raw, dict):
            continue

        close = _number(raw.get('Close', raw.get('close')))
        raw_date = raw.get('Date', raw.get('date'))
        if close is None or raw_date is None:
            continue

        points.append(PricePoint(
            date=_day_from_value(raw_date),
            close=close,
            open=_number(raw.get('Open', raw.get('open'))),
            high=_number(raw.get('High', raw.get('high'))),
            low=_number(raw.get('Low', raw.get('low'))),
            volume=_number(raw.get('Volume', raw.get('volume'))),
        ))

    return points


def _first_chart_result(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    chart = payload.get('chart') or {}
    results = chart.get('result') if isinstance(chart, dict) else None
    if not results:
        return None
    return results[0]


def _provider_error(payload: Any) -> Optional[str]:
    """Best-effort extraction of a provider's own error message."""
    if not isinstance(payload, dict):
        return None

    error = payload.get('error')
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        return error.get('description') or error.get('message')

    status = payload.get('status')
    if isinstance(status, dict):
        return status.get('error_message')

    return None


def _at(values: List[Any], idx: int) -> Any:
    return values[idx] if idx < len(values) else None


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _day_from_epoch(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date().isoformat()


def _day_from_value(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]
