"""
Application Event Channel
=========================
Named push events (progress/error) from the analysis backend to the client.

The bus keeps at most one handler per event name. Subscribing again for the
same name replaces the previous handler, and publishing to a name with no
handler is a silent drop.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union


logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class EventType(str, Enum):
    """Event names pushed by the analysis backend."""

    PROGRESS = "progress"
    ERROR = "error"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Latest progress reported for a job."""

    percent: int
    label: str


@dataclass(frozen=True)
class Subscription:
    """Handle for one handler registration on the bus."""

    name: str
    subscription_id: int


INITIAL_PROGRESS = ProgressSnapshot(percent=0, label="initializing")
IDLE_PROGRESS = ProgressSnapshot(percent=0, label="")


def _event_name(name: Union[EventType, str]) -> str:
    return name.value if isinstance(name, EventType) else str(name)


def make_progress_payload(percent: int, label: str = "") -> dict:
    """Create a normalized progress payload as the backend publishes it."""
    return {"percent": max(0, min(100, int(percent))), "label": label}


def make_error_payload(message: str) -> dict:
    """Create an error payload as the backend publishes it."""
    return {"message": message}


def progress_from_payload(payload: Any) -> ProgressSnapshot:
    """
    Normalize a progress payload into a snapshot.
    
    Accepts a ``ProgressSnapshot``, a mapping with ``percent``/``label``
    (or the ``num``/``text`` keys older backends send), or a bare number.
    Percent values are clamped into 0..100.
    
    Raises:
        ValueError: If the payload carries no usable percent
    """
    if isinstance(payload, ProgressSnapshot):
        raw_percent, label = payload.percent, payload.label
    elif isinstance(payload, dict):
        raw_percent = payload.get("percent", payload.get("num"))
        label = payload.get("label", payload.get("text", ""))
    elif isinstance(payload, (int, float)) and not isinstance(payload, bool):
        raw_percent, label = payload, ""
    else:
        raise ValueError(f"unsupported progress payload: {payload!r}")
    
    if isinstance(raw_percent, bool) or raw_percent is None:
        raise ValueError(f"progress payload has no percent: {payload!r}")
    try:
        percent = int(float(raw_percent))
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"invalid progress percent: {raw_percent!r}") from exc
    
    return ProgressSnapshot(
        percent=max(0, min(100, percent)),
        label="" if label is None else str(label),
    )


def error_message_from_payload(payload: Any) -> str:
    """Extract the user-facing message from an error payload."""
    if isinstance(payload, dict):
        message = payload.get("message")
        if message is None:
            message = payload.get("error", "")
        return str(message)
    if payload is None:
        return ""
    return str(payload)


class EventBus:
    """
    Publish/subscribe channel with one active handler per event name.
    
    Created once per application context and injected into the job
    controller; there is no module-level instance.
    
    Example:
        bus = EventBus()
        bus.subscribe(EventType.PROGRESS, lambda payload: print(payload))
        bus.publish(EventType.PROGRESS, make_progress_payload(10, "parsing"))
        bus.unsubscribe(EventType.PROGRESS)
    """
    
    def __init__(self):
        self._handlers: dict[str, tuple[int, EventHandler]] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
    
    def subscribe(self, name: Union[EventType, str], handler: EventHandler) -> int:
        """
        Register ``handler`` for ``name``, replacing any previous handler.
        
        Args:
            name: Event name
            handler: Callable receiving the event payload
            
        Returns:
            Subscription id of the new registration
        """
        key = _event_name(name)
        with self._lock:
            subscription_id = next(self._ids)
            replaced = key in self._handlers
            self._handlers[key] = (subscription_id, handler)
        if replaced:
            logger.debug("replaced handler for %r (subscription %d)", key, subscription_id)
        return subscription_id
    
    def unsubscribe(self, name: Union[EventType, str], subscription_id: Optional[int] = None) -> bool:
        """
        Remove the handler for ``name`` if present.
        
        Args:
            name: Event name
            subscription_id: When given, only remove that registration so a
                newer handler for the same name is left in place
            
        Returns:
            True if a handler was removed
        """
        key = _event_name(name)
        with self._lock:
            current = self._handlers.get(key)
            if current is None:
                return False
            if subscription_id is not None and current[0] != subscription_id:
                return False
            del self._handlers[key]
            return True
    
    def publish(self, name: Union[EventType, str], payload: Any = None) -> bool:
        """
        Deliver ``payload`` to the current handler for ``name``.
        
        The handler is looked up under the lock and called outside it, so a
        handler may subscribe or unsubscribe without deadlocking. An event
        already being delivered finishes on the handler it was dispatched to.
        
        Returns:
            True if a handler received the event
        """
        key = _event_name(name)
        with self._lock:
            current = self._handlers.get(key)
        if current is None:
            logger.debug("dropped %r event: no subscriber", key)
            return False
        current[1](payload)
        return True
    
    def has_subscriber(self, name: Union[EventType, str]) -> bool:
        """Check whether ``name`` currently has a handler."""
        with self._lock:
            return _event_name(name) in self._handlers
    
    def subscription_count(self) -> int:
        """Number of event names with an active handler."""
        with self._lock:
            return len(self._handlers)
    
    def clear(self) -> None:
        """Drop every handler (used at application shutdown)."""
        with self._lock:
            self._handlers.clear()
