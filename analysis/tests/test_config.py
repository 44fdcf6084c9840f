"""
Tests for asset-class configuration and environment overrides.
"""

import pytest
from dataclasses import replace

from analysis.config import (
    CRYPTO,
    EQUITY,
    AssetClassConfig,
    default_max_workers,
    default_request_timeout,
    get_asset_class,
)


class TestAssetClassConfig:
    """Tests for presets and lookup."""

    def test_presets(self):
        assert EQUITY.annualization_factor == 252
        assert EQUITY.include_price_correlation is True
        assert CRYPTO.annualization_factor == 365
        assert CRYPTO.max_history_days == 365
        assert CRYPTO.include_price_correlation is False

    @pytest.mark.parametrize('name,expected', [
        ('equity', 'equity'),
        ('Stocks', 'equity'),
        (' crypto ', 'crypto'),
    ])
    def test_lookup(self, name, expected, monkeypatch):
        monkeypatch.delenv('ANALYTICS_ROLLING_WINDOW', raising=False)
        assert get_asset_class(name).name == expected

    def test_unknown_asset_class(self):
        with pytest.raises(ValueError, match='Unknown asset class'):
            get_asset_class('bonds')

    def test_rolling_window_override(self, monkeypatch):
        monkeypatch.setenv('ANALYTICS_ROLLING_WINDOW', '20')

        config = get_asset_class('crypto')

        assert config.rolling_window == 20
        assert CRYPTO.rolling_window == 30

    def test_rejects_bad_settings(self):
        with pytest.raises(ValueError):
            AssetClassConfig(name='x', annualization_factor=0)
        with pytest.raises(ValueError):
            replace(EQUITY, rolling_window=1)

    def test_worker_and_timeout_env(self, monkeypatch):
        monkeypatch.delenv('ANALYTICS_MAX_WORKERS', raising=False)
        monkeypatch.delenv('ANALYTICS_REQUEST_TIMEOUT_S', raising=False)
        assert default_max_workers() is None
        assert default_request_timeout() is None

        monkeypatch.setenv('ANALYTICS_MAX_WORKERS', '4')
        monkeypatch.setenv('ANALYTICS_REQUEST_TIMEOUT_S', '12.5')
        assert default_max_workers() == 4
        assert default_request_timeout() == 12.5
