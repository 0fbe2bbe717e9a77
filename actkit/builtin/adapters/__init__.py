"""Built-in adapters for the engine's ports."""

from actkit.builtin.adapters.html import HtmlDocument, HtmlElement
from actkit.builtin.adapters.local.local_event_bus import LocalEventBus

__all__ = ["HtmlDocument", "HtmlElement", "LocalEventBus"]
