"""Conversion of rendered frames for display."""
