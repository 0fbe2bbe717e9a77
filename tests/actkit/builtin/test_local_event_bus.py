"""Tests for the in-process event bus."""

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from actkit.builtin.adapters.local.local_event_bus import LocalEventBus
from actkit.kernel.orchestration.events import HighlightRequested, RuleStarted
from actkit.kernel.ports.event_bus import EventBus


class CollectingErrorHandler:
    def __init__(self) -> None:
        self.errors: list[tuple[Exception, dict]] = []

    def handle_error(self, error: Exception, context: dict) -> None:
        self.errors.append((error, context))


@pytest_asyncio.fixture
async def bus():
    async with LocalEventBus(handler_timeout=0.5) as event_bus:
        yield event_bus


class TestLocalEventBus:
    """Delivery, filtering and fault isolation."""

    def test_implements_port(self) -> None:
        assert isinstance(LocalEventBus(), EventBus)

    @pytest.mark.asyncio
    async def test_async_and_sync_handlers(self, bus: LocalEventBus) -> None:
        received: list[str] = []

        async def on_async(event) -> None:
            received.append(f"async:{event.rule_id}")

        def on_sync(event) -> None:
            received.append(f"sync:{event.rule_id}")

        bus.subscribe(on_async)
        bus.subscribe(on_sync)

        await bus.publish(RuleStarted(rule_id="lang"))

        assert sorted(received) == ["async:lang", "sync:lang"]

    @pytest.mark.asyncio
    async def test_event_type_filtering(self, bus: LocalEventBus) -> None:
        received = []

        async def on_highlight(event) -> None:
            received.append(event)

        bus.subscribe(on_highlight, event_types=[HighlightRequested])

        await bus.publish(RuleStarted(rule_id="lang"))
        await bus.publish(HighlightRequested(selector="#a", message="m", is_valid=False))

        assert len(received) == 1
        assert received[0].selector == "#a"

    @pytest.mark.asyncio
    async def test_unsubscribe(self, bus: LocalEventBus) -> None:
        received = []

        async def handler(event) -> None:
            received.append(event)

        subscription_id = bus.subscribe(handler, subscription_id="mine")

        assert subscription_id == "mine"
        assert bus.unsubscribe("mine") is True
        assert bus.unsubscribe("mine") is False
        await bus.publish(RuleStarted(rule_id="lang"))
        assert received == []

    @pytest.mark.asyncio
    async def test_failing_handler_is_isolated(self) -> None:
        errors = CollectingErrorHandler()
        received = []

        async def broken(event) -> None:
            raise RuntimeError("handler bug")

        async def healthy(event) -> None:
            received.append(event)

        async with LocalEventBus(error_handler=errors) as bus:
            bus.subscribe(broken)
            bus.subscribe(healthy)
            await bus.publish(RuleStarted(rule_id="lang"))

        assert len(received) == 1
        [(error, context)] = errors.errors
        assert isinstance(error, RuntimeError)
        assert context == {"handler_name": "broken", "event_type": "RuleStarted"}

    @pytest.mark.asyncio
    async def test_slow_handler_times_out(self) -> None:
        errors = CollectingErrorHandler()

        async def slow(event) -> None:
            await asyncio.sleep(5)

        async with LocalEventBus(handler_timeout=0.05, error_handler=errors) as bus:
            bus.subscribe(slow)
            await bus.publish(RuleStarted(rule_id="lang"))

        assert isinstance(errors.errors[0][0], TimeoutError)

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError):
            LocalEventBus().subscribe("not callable")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_close_clears_subscriptions(self) -> None:
        bus = LocalEventBus()
        bus.subscribe(lambda event: None)
        assert len(bus) == 1
        await bus.close()
        assert len(bus) == 0
