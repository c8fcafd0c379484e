"""Change notification for layout consumers."""

from __future__ import annotations

import logging
from typing import Callable

from .models import LayoutChanged


log = logging.getLogger(__name__)

Listener = Callable[[LayoutChanged], None]


class ChangeNotifier:
    """Synchronous publish/subscribe for layout changes.

    Publishers call notify() once per logical operation, after the new
    state is in place.  Listeners run in subscription order; an exception
    from a listener propagates to the publisher's caller.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Subscribe *listener*. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            # Safe to call more than once.
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: LayoutChanged) -> None:
        log.debug("Layout changed: %s %s %s",
                  event.reason, event.bodies, event.slots)
        # Snapshot so listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)
