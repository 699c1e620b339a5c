"""Observability layer - structured logging."""

from science_sources.observability.logging import bind_context, clear_context, setup_logging

__all__ = ["setup_logging", "bind_context", "clear_context"]
