# scrimstats/__init__.py
"""
Scrim statistics engine for League of Legends match exports.

Normalizes per-match participant records, folds them into per-player totals and
derives comparison views (KDA bands, role radar, per-period evolution, recaps, scrims).
"""

__version__ = '0.3.0'
