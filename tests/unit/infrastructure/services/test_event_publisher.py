from datetime import datetime, timezone

import pytest

from src.domain.events import UserLoggedOutEvent, UserRegisteredEvent
from src.infrastructure.services.event_publisher import InMemoryEventPublisher

NOW = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


def _logged_out(user_id=1):
    return UserLoggedOutEvent.create(occurred_at=NOW, tenant_id=1, user_id=user_id, sessions_revoked=1)


def _registered(user_id=1):
    return UserRegisteredEvent.create(
        occurred_at=NOW, tenant_id=1, user_id=user_id, username="alice", email=None, role_id=1
    )


@pytest.mark.asyncio
async def test_publish_records_history(event_publisher):
    await event_publisher.publish(_logged_out())
    await event_publisher.publish(_registered(user_id=2))

    assert len(event_publisher.get_published_events()) == 2
    assert [e.user_id for e in event_publisher.get_published_events("user.registered")] == [2]
    assert event_publisher.get_published_events(user_id=1)[0].event_type == "user.logged_out"


@pytest.mark.asyncio
async def test_history_is_bounded():
    publisher = InMemoryEventPublisher(max_history=3)

    await publisher.publish_many([_logged_out(user_id=i) for i in range(5)])

    assert [e.user_id for e in publisher.get_published_events()] == [2, 3, 4]


@pytest.mark.asyncio
async def test_async_and_sync_subscribers_receive_events(event_publisher):
    received_async, received_sync = [], []

    async def on_event(event):
        received_async.append(event)

    event_publisher.add_subscriber(on_event)
    event_publisher.add_subscriber(received_sync.append)

    event = _logged_out()
    await event_publisher.publish(event)

    assert received_async == [event]
    assert received_sync == [event]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_raise(event_publisher):
    received = []

    async def broken(event):
        raise RuntimeError("mailer down")

    async def healthy(event):
        received.append(event)

    event_publisher.add_subscriber(broken)
    event_publisher.add_subscriber(healthy)

    await event_publisher.publish(_logged_out())

    assert len(received) == 1


@pytest.mark.asyncio
async def test_filters_limit_what_subscribers_see(event_publisher):
    received = []

    async def on_event(event):
        received.append(event.event_type)

    event_publisher.add_subscriber(on_event)
    event_publisher.add_event_filter("user.registered")

    await event_publisher.publish(_logged_out())
    await event_publisher.publish(_registered())

    assert received == ["user.registered"]
    assert len(event_publisher.get_published_events()) == 2

    event_publisher.clear_event_filters()
    await event_publisher.publish(_logged_out())
    assert received == ["user.registered", "user.logged_out"]


@pytest.mark.asyncio
async def test_clear_published_events(event_publisher):
    await event_publisher.publish(_logged_out())

    event_publisher.clear_published_events()

    assert event_publisher.get_published_events() == []
