"""
Output tracking for side-effecting collaborators.

Every collaborator that performs an effect (sending a request, sending an
email) owns one EventEmitter and emits a typed event *after* the effect
succeeded. Tests subscribe an OutputTracker to assert on what happened
instead of on how methods were called; production code subscribes a
logging listener.
"""
import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, Generic, List, Optional, Type, TypeVar

logger = logging.getLogger("SpendingAlerts.Events")


@dataclass(frozen=True)
class Event:
    """Base class for all collaborator events."""
    type: ClassVar[str] = "event"


EventListener = Callable[[Event], None]

E = TypeVar("E", bound=Event)


class EventEmitter:
    """
    Synchronous publish/subscribe channel scoped to one collaborator.

    Listeners run on the caller's stack, in subscription order, before
    emit() returns. A failing listener is logged and skipped so that the
    remaining listeners still see the event.
    """

    def __init__(self):
        self._listeners: List[EventListener] = []

    def add_listener(self, listener: EventListener):
        """Register a listener. Adding the same listener twice is a no-op."""
        if listener in self._listeners:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener):
        """Unregister a listener. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: Event):
        """Deliver an event to every listener registered at call time."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener {listener!r} failed on '{event.type}' event")

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


class OutputTracker(Generic[E]):
    """
    Captures events emitted by a collaborator.

    Usage::

        tracker = track_output(email_service.events, EmailSentToCustomer)
        await email_service.send_email_to_customer("customer-123", "Hi", "Body")
        assert tracker.data() == [EmailSentToCustomer("customer-123", "Hi", "Body")]
    """

    def __init__(self, emitter: EventEmitter, event_type: Optional[Type[E]] = None):
        self._emitter = emitter
        self._event_type = event_type
        self._events: List[E] = []
        self._emitter.add_listener(self._capture)

    def _capture(self, event: Event):
        if self._event_type is None or isinstance(event, self._event_type):
            self._events.append(event)

    def data(self) -> List[E]:
        """Return the events captured so far and clear the buffer."""
        result = list(self._events)
        self._events.clear()
        return result

    def stop(self):
        """Stop capturing events."""
        self._emitter.remove_listener(self._capture)


def track_output(emitter: EventEmitter, event_type: Optional[Type[E]] = None) -> OutputTracker[E]:
    """Start capturing events from an emitter, optionally only of one type."""
    return OutputTracker(emitter, event_type)


def log_events(emitter: EventEmitter, target: logging.Logger):
    """Log every event of an emitter at DEBUG level."""
    def listener(event: Event):
        target.debug(f"[{event.type}] {event}")

    emitter.add_listener(listener)
