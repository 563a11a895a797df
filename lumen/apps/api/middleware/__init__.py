"""API middleware utilities for Lumen."""

from .telemetry import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
