"""Ordered callback registry shared by the topic router and subjects (in-memory only)."""

import threading
import types
from typing import Callable, Dict, Generic, Hashable, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

ErrorHandler = Callable[[T, Exception], None]


def same_entry(current: object, entry: object) -> bool:
    """Identity match; bound methods match when they wrap the same function on the same object."""
    if current is entry:
        return True
    if isinstance(current, types.MethodType) and isinstance(entry, types.MethodType):
        return current.__self__ is entry.__self__ and current.__func__ is entry.__func__
    return False


class SubscriptionList(Generic[T]):
    """Ordered sequence of entries with first-match removal and snapshot delivery.

    Each list has its own lock. Delivery copies the entries under the lock and
    invokes them without holding it, so entries may subscribe or unsubscribe
    from inside a delivery pass.
    """

    def __init__(self) -> None:
        self._entries: List[T] = []
        self._lock = threading.Lock()
        self._delivery_passes: int = 0

    @property
    def delivery_passes(self) -> int:
        return self._delivery_passes

    def add(self, entry: T) -> None:
        """Append an entry. The same entry may be added more than once."""
        with self._lock:
            self._entries.append(entry)

    def remove(self, entry: T) -> bool:
        """Remove the first entry that is ``entry``. Returns False if none matched."""
        with self._lock:
            for index, current in enumerate(self._entries):
                if same_entry(current, entry):
                    del self._entries[index]
                    return True
        return False

    def snapshot(self) -> List[T]:
        """Return a copy of the entries (under lock)."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def dispatch(
        self,
        invoke: Callable[[T], None],
        on_error: Optional[ErrorHandler] = None,
    ) -> int:
        """Run one delivery pass over the entries present when the call starts.

        Without ``on_error`` the first exception propagates and the rest of the
        pass is abandoned. With it, the failing entry and its exception are
        handed to ``on_error`` and the pass continues. Returns the number of
        entries invoked without error.
        """
        with self._lock:
            entries = list(self._entries)
            self._delivery_passes += 1
        delivered = 0
        for entry in entries:
            if on_error is None:
                invoke(entry)
                delivered += 1
                continue
            try:
                invoke(entry)
            except Exception as exc:
                on_error(entry, exc)
            else:
                delivered += 1
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"SubscriptionList(entries={len(self)})"


class Registry(Generic[K, T]):
    """Keyed table of SubscriptionLists. Lists are created on demand and never dropped."""

    def __init__(self) -> None:
        self._lists: Dict[K, SubscriptionList[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[SubscriptionList[T]]:
        """Return the list for ``key`` or None."""
        with self._lock:
            return self._lists.get(key)

    def get_or_create(self, key: K) -> SubscriptionList[T]:
        """Return the existing list for ``key`` or create and register a new one."""
        with self._lock:
            entries = self._lists.get(key)
            if entries is None:
                entries = SubscriptionList()
                self._lists[key] = entries
            return entries

    def keys(self) -> List[K]:
        """Keys in creation order."""
        with self._lock:
            return list(self._lists)

    def items(self) -> List[Tuple[K, SubscriptionList[T]]]:
        with self._lock:
            return list(self._lists.items())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._lists

    def __len__(self) -> int:
        with self._lock:
            return len(self._lists)

    def __repr__(self) -> str:
        return f"Registry(keys={self.keys()!r})"
