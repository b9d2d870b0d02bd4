"""One-way hover notifications from the profile to map surfaces."""

import logging
from collections import defaultdict
from collections.abc import Callable

from elevation_profile.models import HoverLocation

logger = logging.getLogger(__name__)

HOVER_EVENT = "elevation-hover"

Listener = Callable[[str, HoverLocation | None], None]


class HoverBus:
    """Routes hover events to listeners registered under a map-surface id.

    Targets are resolved at dispatch time, so a map that registers after the
    profile still receives later events. Dispatching to a target nobody has
    registered is a no-op.
    """

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, target: str, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners[target].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(target, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def dispatch(self, target: str, event: str, payload: HoverLocation | None) -> None:
        """Send an event to every listener of target. Return values are ignored."""
        listeners = list(self._listeners.get(target, ()))
        if not listeners:
            logger.debug("No map surface registered for %r", target)
            return
        for listener in listeners:
            listener(event, payload)


class RecordingSurface:
    """Map surface stand-in that keeps the events it receives."""

    def __init__(self):
        self.events: list[tuple[str, HoverLocation | None]] = []

    def __call__(self, event: str, payload: HoverLocation | None) -> None:
        self.events.append((event, payload))

    @property
    def last(self) -> HoverLocation | None:
        return self.events[-1][1] if self.events else None
