"""
Session lifecycle events.

The engine publishes to an EventChannel owned by the caller instead of a
global dispatcher. Listeners run synchronously in registration order.
"""

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List

from loguru import logger


class GameEvent(str, Enum):
    SESSION_STARTED = "session_started"
    PROBLEM_GENERATED = "problem_generated"
    ANSWER_SUBMITTED = "answer_submitted"
    SESSION_ENDED = "session_ended"


Listener = Callable[[GameEvent, Dict[str, Any]], None]


class EventChannel:
    """
    Explicit listener registry.

    Usage:
        channel = EventChannel()
        unsubscribe = channel.subscribe(GameEvent.ANSWER_SUBMITTED, on_answer)
        engine = AdaptiveSessionEngine(generator, events=channel)
    """

    def __init__(self):
        self._listeners: Dict[GameEvent, List[Listener]] = defaultdict(list)

    def subscribe(self, event: GameEvent, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def subscribe_all(self, listener: Listener) -> Callable[[], None]:
        removers = [self.subscribe(event, listener) for event in GameEvent]

        def unsubscribe() -> None:
            for remove in removers:
                remove()

        return unsubscribe

    def emit(self, event: GameEvent, payload: Dict[str, Any]) -> None:
        listeners = list(self._listeners.get(event, ()))
        logger.debug(f"Emitting {event.value} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(event, payload)

    def listener_count(self, event: GameEvent) -> int:
        return len(self._listeners.get(event, ()))
