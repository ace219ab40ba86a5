"""Subject: one producer instance broadcasting to the observers attached to it."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from dispatchcore.config import ErrorPolicy
from dispatchcore.contracts import ensure_observer
from dispatchcore.observability import Metrics, get_logger
from dispatchcore.registry import SubscriptionList

if TYPE_CHECKING:
    from dispatchcore.config import DispatchSettings


class Subject:
    """Owns an ordered observer list; ``notify`` calls ``update`` on each observer.

    Observer lists are never shared between Subject instances.
    """

    def __init__(
        self,
        name: str = "subject",
        error_policy: ErrorPolicy = ErrorPolicy.PROPAGATE,
        metrics: Optional[Metrics] = None,
        log_level: Optional[int] = None,
    ) -> None:
        self._name = name
        self._error_policy = ErrorPolicy(error_policy)
        self._observers: SubscriptionList[Any] = SubscriptionList()
        self._metrics = metrics if metrics is not None else Metrics()
        self._logger = get_logger("dispatchcore.subject", log_level)

    @classmethod
    def from_settings(cls, settings: "DispatchSettings", name: str = "subject", metrics: Optional[Metrics] = None) -> "Subject":
        return cls(
            name=name,
            error_policy=settings.error_policy,
            metrics=metrics,
            log_level=settings.log_level_number,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._error_policy

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def attach(self, observer: Any) -> None:
        """Append ``observer``; it must expose a callable ``update``. No duplicate check."""
        ensure_observer(observer)
        self._observers.add(observer)
        self._metrics.set_gauge(f"observers.{self._name}", len(self._observers))
        self._logger.info(
            "observer_attached",
            extra={"subject": self._name, "observer": type(observer).__name__},
        )

    def detach(self, observer: Any) -> bool:
        """Remove the first attached entry equal to ``observer``; False if not attached."""
        if not self._observers.remove(observer):
            return False
        self._metrics.set_gauge(f"observers.{self._name}", len(self._observers))
        self._logger.info(
            "observer_detached",
            extra={"subject": self._name, "observer": type(observer).__name__},
        )
        return True

    def notify(self, *args: Any) -> None:
        """Call ``update(*args)`` on every observer attached when the call starts, in order."""
        self._metrics.increment("notify_total")
        self._logger.debug(
            "notifying",
            extra={"subject": self._name, "observer_count": len(self._observers)},
        )

        def on_error(observer: Any, exc: Exception) -> None:
            self._metrics.increment("delivery_failed_total")
            self._logger.exception(
                "delivery_failed",
                extra={
                    "subject": self._name,
                    "observer": type(observer).__name__,
                    "error": str(exc),
                },
            )

        delivered = self._observers.dispatch(
            lambda observer: observer.update(*args),
            on_error if self._error_policy is ErrorPolicy.ISOLATE else None,
        )
        self._metrics.increment("deliver_total", delivered)

    def observers(self) -> List[Any]:
        """Copy of the attached observers, in attachment order."""
        return self._observers.snapshot()

    def stats(self) -> Dict[str, int]:
        return {
            "notifications": self._observers.delivery_passes,
            "observers": len(self._observers),
        }

    def __len__(self) -> int:
        return len(self._observers)

    def __repr__(self) -> str:
        return f"Subject(name={self._name!r}, observers={len(self._observers)})"
