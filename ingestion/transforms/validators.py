"""
Request validators for the analytics input contract.
Pure functions - no IO, network, or side effects.
"""

from typing import Iterable, Tuple

from analysis.config import AssetClassConfig, EQUITY, SUPPORTED_INTERVALS

MAX_SYMBOL_LENGTH = 15
ALLOWED_SYMBOL_CHARS = set('ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-^=')


class ValidationError(ValueError):
    """Raised when request validation fails."""
    pass


def validate_symbols(symbols: Iterable[str]) -> Tuple[str, ...]:
    """
    Clean a requested symbol list.

    Strips whitespace, upper-cases, and drops duplicates keeping the first
    occurrence, so the output order follows the request.

    Args:
        symbols: Requested symbols

    Returns:
        Tuple of distinct uppercase symbols

    Raises:
        ValidationError: If the list is empty or a symbol is malformed
    """
    if symbols is None or isinstance(symbols, str):
        raise ValidationError("symbols must be a list of ticker strings")

    cleaned = []
    seen = set()

    for raw in symbols:
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError(f"Symbol must be non-empty string, got {raw!r}")

        symbol = raw.strip().upper()

        if len(symbol) > MAX_SYMBOL_LENGTH:
            raise ValidationError(f"Symbol too long (max {MAX_SYMBOL_LENGTH} characters): {symbol}")

        if not set(symbol).issubset(ALLOWED_SYMBOL_CHARS):
            raise ValidationError(f"Symbol contains invalid characters: {symbol}")

        if symbol not in seen:
            seen.add(symbol)
            cleaned.append(symbol)

    if not cleaned:
        raise ValidationError("Provide at least one ticker symbol.")

    return tuple(cleaned)


def validate_range(range_key: str, config: AssetClassConfig = EQUITY) -> str:
    """Check a range key against the asset class's enumeration."""
    if range_key not in config.range_days:
        available = ', '.join(config.range_days)
        raise ValidationError(f"Unsupported range: {range_key}. Available: {available}")
    return range_key


def validate_interval(interval: str) -> str:
    """Check that the sampling interval is supported (daily only)."""
    if interval not in SUPPORTED_INTERVALS:
        raise ValidationError(
            f"Unsupported interval: {interval}. Available: {', '.join(SUPPORTED_INTERVALS)}"
        )
    return interval


def range_to_days(range_key: str, config: AssetClassConfig = EQUITY) -> int:
    """
    Map a range key to a day count, capped by the asset class's history limit.

    Example:
        range_to_days('2y', CRYPTO) -> 365
        range_to_days('2y', EQUITY) -> 730
    """
    days = config.range_days[validate_range(range_key, config)]
    if config.max_history_days is not None:
        days = min(days, config.max_history_days)
    return max(days, 1)


def validate_request(
    symbols: Iterable[str],
    range_key: str,
    interval: str,
    config: AssetClassConfig = EQUITY
) -> Tuple[str, ...]:
    """
    Validate a whole analytics request.

    Returns:
        Cleaned symbol tuple

    Raises:
        ValidationError: On any invalid field
    """
    validate_range(range_key, config)
    validate_interval(interval)
    return validate_symbols(symbols)
