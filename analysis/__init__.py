"""
Analysis Engine Module

Turns normalized daily price series into cross-asset analytics:
- Log returns and annualized risk/return metrics
- Date alignment across symbols
- Pearson and rolling correlations
- Pairwise OLS regressions
"""

__version__ = "0.1.0"
