"""EventBus implementation for in-process pub/sub."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import BusMessage, Topic

logger = get_logger(__name__)


TopicHandler = Callable[[BusMessage], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for exchanging BusMessages."""

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        ...

    def unsubscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Remove a handler from a topic."""
        ...

    async def publish(self, message: BusMessage) -> None:
        """Publish BusMessage: calls subscriber callbacks."""
        ...

    async def emit(self, topic: Topic, payload: dict, source: str) -> BusMessage:
        """Build a BusMessage and publish it."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[Topic, list[TopicHandler]] = {
            topic: [] for topic in Topic
        }

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Remove a handler from a topic (no-op if not subscribed)."""
        try:
            self._subscribers[topic].remove(handler)
        except ValueError:
            pass

    async def publish(self, message: BusMessage) -> None:
        """Publish BusMessage: calls subscriber callbacks."""
        # Generate ID if not provided
        if not message.id:
            message.id = str(uuid.uuid4())

        # Snapshot: handlers may unsubscribe while running
        handlers = list(self._subscribers.get(message.topic, []))
        if not handlers:
            return

        # Call all handlers concurrently
        results = await asyncio.gather(
            *[handler(message) for handler in handlers],
            return_exceptions=True,
        )

        # Log any exceptions
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Error in %s handler %s: %s",
                    message.topic.value,
                    getattr(handler, "__qualname__", handler),
                    result,
                    exc_info=result,
                )

    async def emit(self, topic: Topic, payload: dict, source: str) -> BusMessage:
        """Build a BusMessage and publish it."""
        message = BusMessage(
            id=str(uuid.uuid4()),
            topic=topic,
            payload=payload,
            source=source,
            timestamp=datetime.now(timezone.utc),
        )
        await self.publish(message)
        return message
