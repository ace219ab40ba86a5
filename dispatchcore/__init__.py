"""In-process event dispatch: topic router and subject/observer channel (synchronous, in-memory)."""

from dispatchcore.config import DispatchSettings, ErrorPolicy, load_settings
from dispatchcore.contracts import (
    InvalidObserverError,
    InvalidSubscriberError,
    Observer,
    Subscriber,
)
from dispatchcore.registry import Registry, SubscriptionList
from dispatchcore.router import TopicRouter
from dispatchcore.subject import Subject

__all__ = [
    "DispatchSettings",
    "ErrorPolicy",
    "load_settings",
    "InvalidObserverError",
    "InvalidSubscriberError",
    "Observer",
    "Subscriber",
    "Registry",
    "SubscriptionList",
    "TopicRouter",
    "Subject",
]
