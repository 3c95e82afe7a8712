"""API module for trialboard.

- Validates inputs, reads/writes DB
- Returns train job views (summaries, plots, trial table) for the UI
- Forbidden: plot rendering, navigation
"""
