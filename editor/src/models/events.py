"""Observer channel between the editor model and its renderer/UI.

Subscribers register a callback per event name and are called synchronously,
after the mutation they describe has been fully applied.
"""

import logging
from typing import Callable, Dict, List

MODEL_CHANGED = 'model-changed'
SELECTION_CHANGED = 'selection-changed'
ZOOM_RESET_REQUESTED = 'zoom-reset-requested'

EVENT_NAMES = (MODEL_CHANGED, SELECTION_CHANGED, ZOOM_RESET_REQUESTED)

logger = logging.getLogger(__name__)


class EventBus:
    """Named-event subscription registry with synchronous delivery"""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {name: [] for name in EVENT_NAMES}

    def subscribe(self, event: str, callback: Callable) -> None:
        """Register ``callback`` for ``event``

        Raises:
            ValueError: If the event name is unknown
        """
        self._listeners_for(event).append(callback)

    def unsubscribe(self, event: str, callback: Callable) -> None:
        """Remove a callback (no-op if it was never registered)"""
        listeners = self._listeners_for(event)
        if callback in listeners:
            listeners.remove(callback)

    def subscriber_count(self, event: str) -> int:
        return len(self._listeners_for(event))

    def emit(self, event: str, **payload) -> None:
        """Deliver ``event`` to every current subscriber, in subscription order

        The list is copied first so a subscriber may unsubscribe itself (or
        others) during delivery. A failing subscriber is logged and the
        remaining subscribers still get the event.
        """
        for callback in list(self._listeners_for(event)):
            try:
                callback(**payload)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed handling '{event}'")

    def _listeners_for(self, event: str) -> List[Callable]:
        try:
            return self._subscribers[event]
        except KeyError:
            raise ValueError(f"Unknown event '{event}'") from None
