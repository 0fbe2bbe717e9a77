"""In-process event bus with event-type filtering and fault isolation."""

import asyncio
import uuid
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol

from actkit.kernel.logging import get_logger
from actkit.kernel.orchestration.events import Event
from actkit.kernel.ports.event_bus import EventHandler

DEFAULT_HANDLER_TIMEOUT = 5.0
DEFAULT_MAX_CONCURRENT_HANDLERS = 10
DEFAULT_MAX_SYNC_WORKERS = 4


class ErrorHandler(Protocol):
    """Protocol for handling errors raised by subscribers."""

    def handle_error(self, error: Exception, context: dict[str, Any]) -> None:
        """Handle an error that occurred during event delivery."""
        ...


class LoggingErrorHandler:
    """Default error handler that logs errors."""

    def __init__(self, logger: Any | None = None):
        self.logger: Any = logger if logger is not None else get_logger(__name__)

    def handle_error(self, error: Exception, context: dict[str, Any]) -> None:
        handler_name = context.get("handler_name", "unknown")
        event_type = context.get("event_type", "unknown")
        self.logger.warning(
            "Handler {handler} failed for {event_type}: {error}",
            handler=handler_name,
            event_type=event_type,
            error=error,
        )


class _Subscription:
    __slots__ = ("handler", "event_types", "name")

    def __init__(self, handler: EventHandler, event_types: set[type[Event]] | None) -> None:
        self.handler = handler
        self.event_types = event_types
        self.name = getattr(handler, "__name__", handler.__class__.__name__)

    def wants(self, event: Event) -> bool:
        return self.event_types is None or type(event) in self.event_types


class LocalEventBus:
    """In-process implementation of the :class:`EventBus` port.

    - Event type filtering per subscription
    - Concurrent delivery with a concurrency limit
    - Per-handler timeout
    - Sync handlers run in a thread pool so they never block the loop
    - Handler failures are reported to the error handler and swallowed

    Examples
    --------
    Example usage::

        bus = LocalEventBus()
        bus.subscribe(print_highlight, event_types=[HighlightRequested])
        await bus.publish(HighlightRequested("#logo", "Missing alt", is_valid=False))
    """

    def __init__(
        self,
        handler_timeout: float = DEFAULT_HANDLER_TIMEOUT,
        max_concurrent_handlers: int = DEFAULT_MAX_CONCURRENT_HANDLERS,
        max_sync_workers: int = DEFAULT_MAX_SYNC_WORKERS,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._timeout = handler_timeout
        self._semaphore = asyncio.Semaphore(max_concurrent_handlers)
        self._executor = ThreadPoolExecutor(max_workers=max_sync_workers)
        self._executor_shutdown = False
        self._error_handler = error_handler or LoggingErrorHandler()
        self._subscriptions: dict[str, _Subscription] = {}

    def subscribe(
        self,
        handler: EventHandler,
        event_types: Iterable[type[Event]] | None = None,
        **kwargs: Any,
    ) -> str:
        """Register a handler.

        Args
        ----
            handler: Sync or async callable taking an event
            event_types: Event classes to receive (None = all events)
            **kwargs: May include 'subscription_id' to choose the id

        Raises
        ------
            TypeError: If handler is not callable
        """
        if not callable(handler):
            raise TypeError(f"Event handler must be callable, got {type(handler)}")
        subscription_id = str(kwargs.get("subscription_id") or uuid.uuid4())
        types = set(event_types) if event_types is not None else None
        self._subscriptions[subscription_id] = _Subscription(handler, types)
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        return self._subscriptions.pop(subscription_id, None) is not None

    async def publish(self, event: Event) -> None:
        """Deliver ``event`` to interested handlers concurrently."""
        targets = [s for s in list(self._subscriptions.values()) if s.wants(event)]
        if not targets:
            return
        await asyncio.gather(
            *(self._limited_invoke(s, event) for s in targets), return_exceptions=True
        )

    def clear(self) -> None:
        self._subscriptions.clear()

    async def close(self) -> None:
        self.clear()
        if not self._executor_shutdown:
            self._executor.shutdown(wait=False)
            self._executor_shutdown = True

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def __aenter__(self) -> "LocalEventBus":
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        await self.close()

    async def _limited_invoke(self, subscription: _Subscription, event: Event) -> None:
        async with self._semaphore:
            await self._safe_invoke(subscription, event)

    async def _safe_invoke(self, subscription: _Subscription, event: Event) -> None:
        try:
            await asyncio.wait_for(self._call(subscription, event), timeout=self._timeout)
        except Exception as e:
            self._error_handler.handle_error(
                e,
                {"handler_name": subscription.name, "event_type": type(event).__name__},
            )

    async def _call(self, subscription: _Subscription, event: Event) -> None:
        handler = subscription.handler
        if asyncio.iscoroutinefunction(handler):
            await handler(event)
            return
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(self._executor, handler, event)
        if asyncio.iscoroutine(outcome):
            await outcome
