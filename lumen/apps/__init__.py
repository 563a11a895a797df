"""Lumen application packages."""
