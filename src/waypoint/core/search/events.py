"""
Search event system.

This module lets external components, typically a visualizer, observe a
search run. Listeners are told *that* the run changed and receive a
snapshot to read the new state from; the snapshot is never mutated after
it is handed out.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Protocol, Union

from ..enums import SearchEvent
from .models import SearchSnapshot

logger = logging.getLogger(__name__)


class SearchEventListener(Protocol):
    """Protocol for objects that observe a search run."""

    def on_search_event(self, event: SearchEvent, snapshot: SearchSnapshot) -> None:
        """
        Called after the engine changes state.

        Args:
            event (SearchEvent): Type of event that occurred
            snapshot (SearchSnapshot): State of the run after the event
        """
        ...


ListenerCallback = Callable[[SearchEvent, SearchSnapshot], None]
Listener = Union[SearchEventListener, ListenerCallback]


@dataclass
class SearchEventManager:
    """
    Manages search event subscriptions and notifications.

    Listeners may be SearchEventListener objects or plain callables taking
    ``(event, snapshot)``. They are notified in registration order.

    Attributes:
        _listeners (List[Listener]): Registered event listeners
    """

    _listeners: List[Listener] = field(default_factory=list)

    def add_listener(self, listener: Listener) -> None:
        """
        Add a listener for search events.

        Args:
            listener (Listener): The listener to add
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """
        Remove a search event listener.

        Args:
            listener (Listener): The listener to remove
        """
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, event: SearchEvent, snapshot: SearchSnapshot) -> None:
        """
        Notify all listeners of a search event.

        A failing listener is logged and skipped so that the remaining
        listeners still see the event and the run itself is unaffected.

        Args:
            event (SearchEvent): The type of event that occurred
            snapshot (SearchSnapshot): State of the run after the event
        """
        for listener in list(self._listeners):
            handler = getattr(listener, "on_search_event", listener)
            try:
                handler(event, snapshot)
            except Exception:
                logger.warning(f"Error notifying listener {listener!r} of {event.name}", exc_info=True)

    def clear_listeners(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
