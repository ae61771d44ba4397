"""
Unit tests for EventPublisher.
"""

from unittest.mock import Mock

from cloudpix.application.event_publisher import EventPublisher
from cloudpix.domain.events import (
    DomainEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
)
from tests.fixtures import DEFAULT_NOW


def _created():
    return ShareLinkCreatedEvent(
        aggregate_id="link-1", occurred_at=DEFAULT_NOW, file_id="f", owner_id="o"
    )


def test_handler_receives_subscribed_type():
    publisher = EventPublisher()
    handler = Mock()
    publisher.subscribe(ShareLinkCreatedEvent, handler)

    event = _created()
    publisher.publish(event)

    handler.assert_called_once_with(event)


def test_handler_not_called_for_other_types():
    publisher = EventPublisher()
    handler = Mock()
    publisher.subscribe(ShareLinkRevokedEvent, handler)

    publisher.publish(_created())

    handler.assert_not_called()


def test_base_class_subscription_sees_every_event():
    publisher = EventPublisher()
    handler = Mock()
    publisher.subscribe(DomainEvent, handler)

    publisher.publish(_created())
    publisher.publish(
        ShareLinkRevokedEvent(
            aggregate_id="link-1", occurred_at=DEFAULT_NOW, file_id="f", owner_id="o"
        )
    )

    assert handler.call_count == 2


def test_failing_handler_does_not_stop_others():
    publisher = EventPublisher()
    broken = Mock(side_effect=RuntimeError("boom"))
    healthy = Mock()
    publisher.subscribe(ShareLinkCreatedEvent, broken)
    publisher.subscribe(ShareLinkCreatedEvent, healthy)

    publisher.publish(_created())

    healthy.assert_called_once()


def test_publish_without_handlers():
    EventPublisher().publish(_created())
