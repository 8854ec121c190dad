"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from lms.shared.telemetry.logging import get_logger, setup_logging
from lms.shared.telemetry.tracing import traced

__all__ = [
    "setup_logging",
    "get_logger",
    "traced",
]
