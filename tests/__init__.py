"""
Test Suite for the cross-asset analytics engine

Unit tests live beside the code they cover:
- analysis/tests: calculations, cross-asset assembly, batch orchestration, CLI
- ingestion/tests: normalizers, validators, symbol lookup, provider adapters
"""
