"""Delivery counters and registration gauges kept by routers and subjects."""

import threading
from typing import Dict


class Metrics:
    """Named counters (monotonic totals) and gauges (last observed value).

    A single instance may be shared by several routers and subjects, including
    ones publishing from different threads.
    """

    def __init__(self) -> None:
        self._totals: Dict[str, int] = {}
        self._levels: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, name: str, value: int = 1) -> None:
        with self._lock:
            self._totals[name] = self._totals.get(name, 0) + value

    def set_gauge(self, name: str, value: int) -> None:
        """Record the current subscriber or observer count under ``name``."""
        with self._lock:
            self._levels[name] = value

    def get_counter(self, name: str) -> int:
        """Total for ``name``; 0 if it was never incremented."""
        with self._lock:
            return self._totals.get(name, 0)

    def get_gauge(self, name: str) -> int:
        with self._lock:
            return self._levels.get(name, 0)

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Copy of every value, shaped as { counters: {...}, gauges: {...} } for GET /metrics."""
        with self._lock:
            return {
                "counters": dict(self._totals),
                "gauges": dict(self._levels),
            }
