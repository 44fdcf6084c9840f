"""
Asset-class configuration for the analytics engine.
Conventions that differ between equities and crypto live here as data,
so the calculations themselves never branch on asset class.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_RANGE = '6mo'
DEFAULT_INTERVAL = '1d'
SUPPORTED_INTERVALS = ('1d',)

# Calendar days covered by each supported range key
RANGE_DAYS = {
    '1mo': 30,
    '3mo': 90,
    '6mo': 180,
    '1y': 365,
    '2y': 730,
}


@dataclass(frozen=True)
class AssetClassConfig:
    """Per-asset-class analytics conventions."""
    name: str
    annualization_factor: int
    range_days: Dict[str, int] = field(default_factory=lambda: dict(RANGE_DAYS))
    max_history_days: Optional[int] = None
    include_price_correlation: bool = False
    rolling_window: int = 30
    min_regression_samples: int = 20
    max_scatter_points: int = 400

    def __post_init__(self):
        """Validate settings."""
        if self.annualization_factor <= 0:
            raise ValueError("annualization_factor must be positive")
        if self.rolling_window < 2:
            raise ValueError("rolling_window must be at least 2")
        if self.min_regression_samples < 2:
            raise ValueError("min_regression_samples must be at least 2")
        if self.max_scatter_points < 2:
            raise ValueError("max_scatter_points must be at least 2")


# Listed-exchange instruments trade ~252 sessions a year
EQUITY = AssetClassConfig(
    name='equity',
    annualization_factor=252,
    include_price_correlation=True,
    max_scatter_points=400,
)

# Crypto markets trade every calendar day; CoinGecko daily history caps at 365 days
CRYPTO = AssetClassConfig(
    name='crypto',
    annualization_factor=365,
    max_history_days=365,
    include_price_correlation=False,
    max_scatter_points=500,
)

_PRESETS = {
    'equity': EQUITY,
    'stocks': EQUITY,
    'crypto': CRYPTO,
}


def get_asset_class(name: str) -> AssetClassConfig:
    """
    Look up an asset-class preset and apply environment overrides.

    Args:
        name: Preset name ('equity', 'stocks' or 'crypto')

    Returns:
        AssetClassConfig for that asset class

    Raises:
        ValueError: If the name is unknown
    """
    key = (name or '').strip().lower()
    if key not in _PRESETS:
        raise ValueError(f"Unknown asset class: {name}. Available: {', '.join(sorted(_PRESETS))}")

    config = _PRESETS[key]

    window = os.getenv('ANALYTICS_ROLLING_WINDOW')
    if window:
        config = replace(config, rolling_window=int(window))

    return config


def default_max_workers() -> Optional[int]:
    """Worker cap from ANALYTICS_MAX_WORKERS, None means one thread per symbol."""
    value = os.getenv('ANALYTICS_MAX_WORKERS')
    return int(value) if value else None


def default_request_timeout() -> Optional[float]:
    """Whole-request timeout in seconds from ANALYTICS_REQUEST_TIMEOUT_S."""
    value = os.getenv('ANALYTICS_REQUEST_TIMEOUT_S')
    return float(value) if value else None
