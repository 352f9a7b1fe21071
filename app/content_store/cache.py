"""Session-scoped cache of raw content values."""

from collections import defaultdict
from collections.abc import Callable
from typing import Optional

from app.content_store.models import ContentValue

Listener = Callable[[str, Optional[ContentValue]], None]


class ContentCache:
    """Maps content keys to their last-known raw value.

    ``pending`` holds the keys with a fetch in flight. ``placeholders`` holds
    the keys whose cached value is a caller default because nothing is
    stored for them. Listeners registered per key are called after every
    change to that key so consumers can re-render. All access happens on
    one event loop, so no locking.
    """

    def __init__(self) -> None:
        self.entries: dict[str, ContentValue] = {}
        self.pending: set[str] = set()
        self.placeholders: set[str] = set()
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> ContentValue | None:
        return self.entries.get(key)

    def set(self, key: str, value: ContentValue, placeholder: bool = False) -> None:
        self.entries[key] = value
        if placeholder:
            self.placeholders.add(key)
        else:
            self.placeholders.discard(key)
        self._notify(key, value)

    def is_placeholder(self, key: str) -> bool:
        return key in self.placeholders

    def discard(self, key: str) -> None:
        self.placeholders.discard(key)
        if self.entries.pop(key, None) is not None:
            self._notify(key, None)

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns the function that removes it."""
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._listeners[key]

        return unsubscribe

    def has_listeners(self, key: str) -> bool:
        return bool(self._listeners.get(key))

    def clear(self) -> None:
        self.entries.clear()
        self.pending.clear()
        self.placeholders.clear()
        self._listeners.clear()

    def _notify(self, key: str, value: ContentValue | None) -> None:
        # Copy: a listener may unsubscribe while being called
        for listener in list(self._listeners.get(key, ())):
            listener(key, value)
