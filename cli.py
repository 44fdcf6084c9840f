#!/usr/bin/env python3
"""
Main CLI for the cross-asset analytics engine.
Usage: python cli.py {stocks,crypto} SYMBOL [SYMBOL ...] [options]
"""

import sys
import json
import logging
import argparse
from functools import partial
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from analysis.analytics_job import run_batch, default_fetcher, AggregateFailure
from analysis.config import get_asset_class, DEFAULT_RANGE, DEFAULT_INTERVAL, RANGE_DAYS
from ingestion.transforms.symbol_lookup import SymbolLookup
from ingestion.transforms.validators import ValidationError

PROVIDERS = ('default', 'yahoo', 'yfinance', 'coingecko')


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Risk/return metrics, correlations and regressions for a set of symbols',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py stocks AAPL MSFT SPY --range 1y
  python cli.py crypto BTC ETH SOL --range 3mo
  python cli.py stocks AAPL MSFT --provider yfinance --output insights.json
        """
    )

    parser.add_argument('asset_class', choices=['stocks', 'equity', 'crypto'],
                        help='Asset class conventions to apply')
    parser.add_argument('symbols', nargs='+', help='Ticker symbols (e.g., AAPL MSFT)')
    parser.add_argument('--range', dest='range_key',
                        default=DEFAULT_RANGE, choices=list(RANGE_DAYS),
                        help=f'History range (default: {DEFAULT_RANGE})')
    parser.add_argument('--interval',
                        default=DEFAULT_INTERVAL,
                        help=f'Sampling interval (default: {DEFAULT_INTERVAL})')
    parser.add_argument('--provider',
                        default='default', choices=PROVIDERS,
                        help='Market-data provider (default: per asset class)')
    parser.add_argument('--coin-map',
                        help='JSON file of extra symbol -> CoinGecko id mappings')
    parser.add_argument('--max-workers', type=int,
                        help='Cap on concurrent fetches (default: one per symbol)')
    parser.add_argument('--timeout', type=float,
                        help='Seconds to wait for the whole batch')
    parser.add_argument('--output',
                        help='Write JSON here instead of stdout')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Log progress to stderr')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    config = get_asset_class(args.asset_class)
    lookup = SymbolLookup(mapping_file=args.coin_map) if args.coin_map else None
    fetch = _select_fetcher(args.provider, config, lookup)

    try:
        result = run_batch(
            args.symbols,
            fetch=fetch,
            range_key=args.range_key,
            interval=args.interval,
            config=config,
            max_workers=args.max_workers,
            timeout=args.timeout
        )
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except AggregateFailure as e:
        print(f"ERROR: {e}", file=sys.stderr)
        for failure in e.errors:
            print(f"   {failure.symbol}: {failure.message}", file=sys.stderr)
        return 1

    output = json.dumps(result.to_dict(), indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output)
        print(f"Analytics written to {output_path} "
              f"({len(result.data)} symbols, {len(result.errors)} errors)")
    else:
        print(output)

    for failure in result.errors:
        print(f"WARNING: {failure.symbol}: {failure.message}", file=sys.stderr)

    return 0


def _select_fetcher(provider, config, lookup):
    """Resolve the --provider flag to a fetch collaborator."""
    if provider == 'yahoo':
        from ingestion.providers.yahoo_chart_adapter import fetch_chart
        return fetch_chart

    if provider == 'yfinance':
        from ingestion.providers.yfinance_adapter import fetch_prices_range
        return fetch_prices_range

    if provider == 'coingecko':
        from ingestion.providers.coingecko_adapter import fetch_market_chart
        return partial(fetch_market_chart, lookup=lookup)

    return default_fetcher(config, lookup=lookup)


if __name__ == '__main__':
    sys.exit(main())
