"""Topic router: named topics fan out published arguments to subscriber callbacks."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from dispatchcore.config import ErrorPolicy
from dispatchcore.contracts import Subscriber, ensure_subscriber, ensure_topic
from dispatchcore.observability import Metrics, get_logger
from dispatchcore.registry import Registry, SubscriptionList

if TYPE_CHECKING:
    from dispatchcore.config import DispatchSettings


def callback_name(callback: Any) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class TopicRouter:
    """Decouples producers from consumers through named topics.

    Delivery is synchronous: ``publish`` returns once every subscriber
    registered at the start of the call has returned.
    """

    def __init__(
        self,
        name: str = "router",
        error_policy: ErrorPolicy = ErrorPolicy.PROPAGATE,
        metrics: Optional[Metrics] = None,
        log_level: Optional[int] = None,
    ) -> None:
        self._name = name
        self._error_policy = ErrorPolicy(error_policy)
        self._topics: Registry[str, Subscriber] = Registry()
        self._metrics = metrics if metrics is not None else Metrics()
        self._logger = get_logger("dispatchcore.router", log_level)

    @classmethod
    def from_settings(cls, settings: "DispatchSettings", name: str = "router", metrics: Optional[Metrics] = None) -> "TopicRouter":
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
    def metrics(self) -> Metrics:
        return self._metrics

    def _entries_for(self, topic: Any) -> Optional[SubscriptionList[Subscriber]]:
        # Non-string topics can never have been subscribed, so they read as unknown.
        if not isinstance(topic, str):
            return None
        return self._topics.get(topic)

    def subscribe(self, topic: str, callback: Subscriber) -> bool:
        """Register ``callback`` under ``topic``, creating the topic if needed. Always True."""
        ensure_topic(topic)
        ensure_subscriber(callback)
        entries = self._topics.get_or_create(topic)
        entries.add(callback)
        self._metrics.set_gauge(f"subscribers.{topic}", len(entries))
        self._logger.info(
            "subscribed",
            extra={"router": self._name, "topic": topic, "subscriber": callback_name(callback)},
        )
        return True

    def unsubscribe(self, topic: str, callback: Subscriber) -> bool:
        """Remove the first registration of ``callback`` under ``topic``.

        Returns False if the topic is unknown or the callback is not registered.
        An emptied topic stays known.
        """
        entries = self._entries_for(topic)
        if entries is None or not entries.remove(callback):
            return False
        self._metrics.set_gauge(f"subscribers.{topic}", len(entries))
        self._logger.info(
            "unsubscribed",
            extra={"router": self._name, "topic": topic, "subscriber": callback_name(callback)},
        )
        return True

    def publish(self, topic: str, *args: Any) -> bool:
        """Invoke every subscriber of ``topic`` in subscription order with ``args``.

        Returns False, invoking nothing, if nothing ever subscribed to ``topic``.
        """
        entries = self._entries_for(topic)
        if entries is None:
            self._metrics.increment("publish_unknown_topic_total")
            self._logger.debug("unknown_topic", extra={"router": self._name, "topic": topic})
            return False
        self._metrics.increment("publish_total")
        self._logger.debug(
            "publishing",
            extra={"router": self._name, "topic": topic, "subscriber_count": len(entries)},
        )

        def on_error(callback: Subscriber, exc: Exception) -> None:
            self._metrics.increment("delivery_failed_total")
            self._logger.exception(
                "delivery_failed",
                extra={
                    "router": self._name,
                    "topic": topic,
                    "subscriber": callback_name(callback),
                    "error": str(exc),
                },
            )

        delivered = entries.dispatch(
            lambda callback: callback(*args),
            on_error if self._error_policy is ErrorPolicy.ISOLATE else None,
        )
        self._metrics.increment("deliver_total", delivered)
        return True

    def topics(self) -> List[str]:
        """Known topic names, in creation order."""
        return self._topics.keys()

    def has_topic(self, topic: str) -> bool:
        return self._entries_for(topic) is not None

    def subscribers(self, topic: str) -> List[Subscriber]:
        """Copy of the subscribers of ``topic`` (empty if unknown)."""
        entries = self._entries_for(topic)
        return [] if entries is None else entries.snapshot()

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        """Subscribers of one topic, or registrations across all topics when omitted."""
        if topic is None:
            return sum(len(entries) for _, entries in self._topics.items())
        entries = self._entries_for(topic)
        return 0 if entries is None else len(entries)

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Return { topic: { messages, subscribers } }."""
        return {
            topic: {
                "messages": entries.delivery_passes,
                "subscribers": len(entries),
            }
            for topic, entries in self._topics.items()
        }

    def __repr__(self) -> str:
        return f"TopicRouter(name={self._name!r}, topics={len(self._topics)})"
