"""
Data Ingestion Module

Handles fetching and normalizing data from external sources:
- Yahoo Finance chart API and yfinance for listed instruments
- CoinGecko market charts for crypto assets
"""

__version__ = "0.1.0"
