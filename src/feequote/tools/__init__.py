"""Presentation-facing quote tools."""
