"""Port interface for publishing engine events to the host application."""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from actkit.kernel.orchestration.events import Event

EventHandler = Callable[[Event], Awaitable[None] | None]


@runtime_checkable
class EventBus(Protocol):
    """Publish/subscribe channel for engine events.

    Handlers may be plain functions or coroutine functions. A failing
    handler must never affect the publisher or other handlers.
    """

    def subscribe(
        self, handler: EventHandler, event_types: Iterable[type[Event]] | None = None, **kwargs: Any
    ) -> str:
        """Register ``handler`` and return its subscription id.

        ``event_types`` restricts delivery to those event classes; ``None``
        delivers everything.
        """
        ...

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscription, returning whether it existed."""
        ...

    async def publish(self, event: Event) -> None:
        """Deliver ``event`` to every interested handler."""
        ...
