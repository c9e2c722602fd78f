"""Change notification for record snapshots."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[list[T]], None]


@dataclass
class RecordFeed(Generic[T]):
    """Delivers the full record set to every subscriber on each change."""

    _listeners: list[Listener[T]] = field(default_factory=list)

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, records: list[T]) -> None:
        """Send a snapshot to every listener."""
        for listener in list(self._listeners):
            listener(list(records))
