"""Event Publisher Infrastructure Service.

This service provides the concrete implementation of the domain event publishing
interface, so the domain layer can emit events without knowing who consumes them.
Publication is best-effort: a failing subscriber is logged and never surfaces
to the operation that produced the event.
"""

import asyncio
from collections import deque
from typing import Awaitable, Callable, Deque, List, Optional, Set, Union

import structlog

from src.domain.events.base import BaseDomainEvent
from src.domain.interfaces.services import IEventPublisher

logger = structlog.get_logger(__name__)

Subscriber = Callable[[BaseDomainEvent], Union[None, Awaitable[None]]]


class InMemoryEventPublisher(IEventPublisher):
    """In-process event publisher.

    Keeps a bounded history of published events and fans each one out to
    registered subscribers (coroutine functions are awaited, plain callables
    run in the default executor). Used for development, tests, and as the
    hook point for a notification or message-bus collaborator.

    Args:
        max_history: Number of past events kept for inspection.
    """

    def __init__(self, max_history: int = 1000):
        self._published_events: Deque[BaseDomainEvent] = deque(maxlen=max_history)
        self._event_filters: Set[str] = set()
        self._subscribers: List[Subscriber] = []

    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        try:
            self._published_events.append(event)

            if self._event_filters and event.event_type not in self._event_filters:
                logger.debug("Event filtered out", event_type=event.event_type)
                return

            if self._subscribers:
                await self._notify_subscribers(event)

            logger.info(
                "Domain event published",
                event_type=event.event_type,
                tenant_id=event.tenant_id,
                user_id=event.user_id,
                correlation_id=event.correlation_id,
                occurred_at=event.occurred_at.isoformat(),
            )
        except Exception as e:
            logger.error(
                "Failed to publish domain event",
                event_type=getattr(event, "event_type", type(event).__name__),
                error=str(e),
            )

    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def add_event_filter(self, event_type: str) -> None:
        """Only events whose type is in the filter set reach subscribers."""
        self._event_filters.add(event_type)

    def clear_event_filters(self) -> None:
        self._event_filters.clear()

    def add_subscriber(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def get_published_events(
        self,
        event_type: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> List[BaseDomainEvent]:
        """Get published events, optionally filtered by type (e.g. ``"user.logged_in"``) or user."""
        events = list(self._published_events)
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        if user_id is not None:
            events = [e for e in events if e.user_id == user_id]
        return events

    def clear_published_events(self) -> None:
        self._published_events.clear()

    async def _notify_subscribers(self, event: BaseDomainEvent) -> None:
        loop = asyncio.get_running_loop()
        tasks = []
        for subscriber in self._subscribers:
            if asyncio.iscoroutinefunction(subscriber):
                tasks.append(subscriber(event))
            else:
                tasks.append(loop.run_in_executor(None, subscriber, event))

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "Event subscriber failed",
                    event_type=event.event_type,
                    error=str(result),
                )
