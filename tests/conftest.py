"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_message():
    """Factory for Message objects with sequential timestamps."""
    from groupchat.models import Message

    def _make(msg_id: str, group_id: str = "g1", sender_id: str = "u1", text: str = "hi", **kwargs):
        return Message(
            id=msg_id,
            group_id=group_id,
            sender_id=sender_id,
            sender_name=kwargs.pop("sender_name", "Alice"),
            created_at=kwargs.pop("created_at", BASE_TIME + timedelta(minutes=len(msg_id))),
            text=text,
            **kwargs,
        )

    return _make


@pytest.fixture
def event_bus():
    """Create EventBus."""
    from groupchat.event_bus import EventBus

    return EventBus()


@pytest.fixture
def bus_log(event_bus):
    """Record every MESSAGES_CHANGED and SCROLL_REQUESTED publication."""
    from groupchat.models import Topic

    log = {Topic.MESSAGES_CHANGED: [], Topic.SCROLL_REQUESTED: []}

    def recorder(topic):
        async def handler(msg):
            log[topic].append(msg.payload)

        return handler

    for topic in log:
        event_bus.subscribe(topic, recorder(topic))
    return log


@pytest.fixture
def store(event_bus):
    """Create MessageStore with group g1 active."""
    from groupchat.store import MessageStore

    st = MessageStore(event_bus)
    st.activate("g1")
    return st


@pytest.fixture
def scroll(event_bus):
    """Create ScrollController subscribed to the bus, reset for g1."""
    from groupchat.presentation import ScrollController

    sc = ScrollController(event_bus)
    sc.start()
    sc.reset("g1")
    yield sc
    sc.stop()


@pytest.fixture
def mock_transport():
    """Create mock transport."""
    transport = Mock()
    transport.fetch_messages = AsyncMock(return_value=[])
    transport.send_message = AsyncMock()
    transport.close = AsyncMock()
    return transport


@pytest.fixture
def image_file():
    """Small in-memory PNG attachment."""
    from groupchat.models import AttachmentFile

    data = b"\x89PNG\r\n\x1a\nfake"
    return AttachmentFile(name="photo.png", size=len(data), content_type="image/png", data=data)
