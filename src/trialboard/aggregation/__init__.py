"""Aggregation module for train job summaries.

- Reads trials (directly or via repo) and produces per-model summaries
  and best-score-over-time series
- Pure recomputation on every call; no state is held between snapshots
- Forbidden: trial fetching over the network, navigation, plot rendering
"""
