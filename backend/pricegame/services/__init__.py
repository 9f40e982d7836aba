"""Domain services: trend derivation, price ingestion, guess gating and scoring.

This package contains the game logic imported by HTTP routes, CLI commands
and the background ingestion task, keeping transport concerns separated from
the core mechanics.
"""
