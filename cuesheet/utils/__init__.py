"""Utility modules for cuesheet."""
