"""Capability types for subscribers and observers, checked at registration time."""

from abc import ABC, abstractmethod
from typing import Any, Callable

Subscriber = Callable[..., Any]


class InvalidSubscriberError(TypeError):
    """Raised when a topic subscription is not a string topic with a callable subscriber."""


class InvalidObserverError(TypeError):
    """Raised when an observer does not expose a callable ``update``."""


class Observer(ABC):
    """Abstract base class for observers attached to a Subject.

    Subclassing is optional: any class defining a callable ``update`` is
    treated as a virtual subclass.
    """

    @abstractmethod
    def update(self, *args: Any) -> None:
        """Receive the arguments passed to ``Subject.notify``."""
        pass

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is Observer:
            for klass in subclass.__mro__:
                if "update" in klass.__dict__:
                    return callable(klass.__dict__["update"]) or NotImplemented
        return NotImplemented


def ensure_topic(topic: Any) -> str:
    if not isinstance(topic, str):
        raise InvalidSubscriberError(
            f"topic must be a str, got {type(topic).__name__}"
        )
    return topic


def ensure_subscriber(callback: Any) -> Subscriber:
    """Return ``callback`` unchanged if it can be invoked, else raise."""
    if not callable(callback):
        raise InvalidSubscriberError(
            f"subscriber must be callable, got {type(callback).__name__}"
        )
    return callback


def ensure_observer(observer: Any) -> Any:
    """Return ``observer`` unchanged if it exposes a callable ``update``, else raise.

    Instance attributes count, so plain namespaces carrying an ``update``
    function are accepted as well as Observer subclasses.
    """
    if not callable(getattr(observer, "update", None)):
        raise InvalidObserverError(
            f"observer must expose a callable update(), got {type(observer).__name__}"
        )
    return observer
