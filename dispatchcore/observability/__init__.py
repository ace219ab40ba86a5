"""Observability: logging and metrics for the dispatch core."""

from dispatchcore.observability.logger import get_logger
from dispatchcore.observability.metrics import Metrics

__all__ = ["get_logger", "Metrics"]
