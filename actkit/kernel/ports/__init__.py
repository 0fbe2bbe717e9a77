"""Port interfaces consumed by the engine."""

from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.ports.event_bus import EventBus, EventHandler

__all__ = ["DocumentPort", "ElementPort", "EventBus", "EventHandler"]
