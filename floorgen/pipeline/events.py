"""
Fire-and-forget event notifications.

External systems (spawners, UI) subscribe by event name to freeze
themselves while a floor is being generated.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

GENERATION_STARTED = "OnFloorGenerationStarted"
GENERATION_COMPLETE = "OnFloorGenerationComplete"

Listener = Callable[[str], None]


class EventManager:
    """Maps event names to listeners. Listeners receive only the event name."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(event_name, [])
        if listener not in listeners:
            listeners.append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, event_name: str) -> None:
        listeners = list(self._listeners.get(event_name, []))
        logger.debug(f"Publishing {event_name} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(event_name)
