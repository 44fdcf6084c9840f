"""
Symbol -> provider id lookup.
Injected into provider adapters that key assets by id rather than ticker.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


# CoinGecko ids for commonly requested crypto symbols
DEFAULT_COIN_IDS = {
    'SOL': 'solana',
    'BTC': 'bitcoin',
    'ETH': 'ethereum',
    'USDC': 'usd-coin',
    'USDT': 'tether',
    'BNB': 'binancecoin',
    'XRP': 'ripple',
    'ADA': 'cardano',
    'DOGE': 'dogecoin',
    'MATIC': 'matic-network',
    'AVAX': 'avalanche-2',
    'DOT': 'polkadot',
    'LINK': 'chainlink',
    'UNI': 'uniswap',
    'ATOM': 'cosmos',
    'ALGO': 'algorand',
    'NEAR': 'near',
    'FTM': 'fantom',
    'SAND': 'the-sandbox',
    'MANA': 'decentraland',
    'APE': 'apecoin',
    'GMT': 'stepn',
    'RAY': 'raydium',
    'ORCA': 'orca',
    'JUP': 'jupiter-exchange-solana',
}


class SymbolLookup:
    """
    Maps uppercase symbols to provider ids.

    Unknown symbols fall back to their lower-cased form, which is what
    most id-keyed providers use for the long tail.
    """

    def __init__(
        self,
        mapping: Optional[Mapping[str, str]] = None,
        mapping_file: Optional[Union[str, Path]] = None
    ):
        """
        Args:
            mapping: Symbol -> id table (defaults to DEFAULT_COIN_IDS)
            mapping_file: Optional JSON object file merged over the table,
                loaded on first lookup
        """
        base = DEFAULT_COIN_IDS if mapping is None else mapping
        self._ids: Dict[str, str] = {k.strip().upper(): v for k, v in base.items()}
        self.mapping_file = Path(mapping_file) if mapping_file else None
        self._loaded = self.mapping_file is None
        self._lock = threading.Lock()

    def _load_mapping_file(self):
        """Merge ids from the mapping file, once. Safe to call from worker threads."""
        if self._loaded:
            return

        with self._lock:
            if self._loaded:
                return

            try:
                with open(self.mapping_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (ValueError, OSError) as e:
                logger.warning(f"Could not load symbol mapping {self.mapping_file}: {e}")
                data = {}

            if not isinstance(data, dict):
                logger.warning(f"Symbol mapping {self.mapping_file} is not a JSON object, ignoring it")
                data = {}

            for symbol, provider_id in data.items():
                if isinstance(symbol, str) and symbol.strip() and provider_id:
                    self._ids[symbol.strip().upper()] = str(provider_id)

            self._loaded = True
            logger.info(f"Loaded {len(self._ids)} symbol mappings")

    def get_id(self, symbol: str) -> str:
        """
        Resolve a symbol to its provider id.

        Args:
            symbol: Ticker symbol, any case

        Returns:
            Provider id, or the lower-cased symbol when unmapped
        """
        self._load_mapping_file()
        key = symbol.strip().upper()
        return self._ids.get(key, key.lower())

    def __contains__(self, symbol: str) -> bool:
        self._load_mapping_file()
        return symbol.strip().upper() in self._ids

    def __len__(self) -> int:
        self._load_mapping_file()
        return len(self._ids)
