"""Guesses: submission gating and on-demand scoring."""
