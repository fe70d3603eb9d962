"""Plotting helpers for mission plans."""
