"""Ordered message store for the active group."""

from dataclasses import replace
from typing import Protocol

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import Message, Topic

logger = get_logger(__name__)


class IMessageStore(Protocol):
    """Client-held ordered sequence of messages for the viewed group."""

    def activate(self, group_id: str) -> None:
        """Switch the active group and discard current messages."""
        ...

    async def replace_all(self, group_id: str, messages: list[Message]) -> bool:
        """Replace the sequence with a poll batch. False if the batch is stale."""
        ...

    async def append(self, message: Message, group_id: str | None = None) -> bool:
        """Optimistically append a sent message at the tail."""
        ...


class MessageStore:
    """Messages of the active group, in arrival order.

    Poll batches replace the sequence (the server is the ordering
    authority). Locally appended messages are marked pending and kept at
    the tail until a batch contains their id or anything newer.
    """

    def __init__(self, event_bus: IEventBus):
        self._event_bus = event_bus
        self._group_id: str | None = None
        self._messages: list[Message] = []
        self._populated = False

    @property
    def group_id(self) -> str | None:
        return self._group_id

    @property
    def messages(self) -> list[Message]:
        return self._messages.copy()

    @property
    def populated(self) -> bool:
        """Whether any batch or append was accepted since activation."""
        return self._populated

    @property
    def pending(self) -> list[Message]:
        return [msg for msg in self._messages if msg.pending]

    def __len__(self) -> int:
        return len(self._messages)

    def activate(self, group_id: str) -> None:
        """Switch the active group and discard current messages."""
        logger.debug("Activating group %s (was %s)", group_id, self._group_id)
        self._group_id = group_id
        self._messages = []
        self._populated = False

    def deactivate(self) -> None:
        """Drop the active group; every later write is stale."""
        self._group_id = None
        self._messages = []
        self._populated = False

    async def replace_all(self, group_id: str, messages: list[Message]) -> bool:
        """Replace the sequence with a poll batch. False if the batch is stale."""
        if group_id != self._group_id:
            logger.debug(
                "Discarding stale batch for group %s (active: %s)", group_id, self._group_id
            )
            return False

        batch: list[Message] = []
        seen: set[str] = set()
        for msg in messages:
            if msg.id in seen:
                continue
            seen.add(msg.id)
            batch.append(replace(msg, pending=False) if msg.pending else msg)

        # Keep local sends the server has not returned yet, until the batch
        # holds something newer (then they fell out of the page or were dropped)
        newest = max((msg.created_at for msg in batch), default=None)
        unconfirmed = []
        for msg in self._messages:
            if not msg.pending or msg.id in seen:
                continue
            if newest is not None and msg.created_at < newest:
                logger.info(
                    "Dropping unconfirmed message %s in group %s",
                    msg.id,
                    group_id,
                    extra={"group_id": group_id, "message_id": msg.id},
                )
                continue
            unconfirmed.append(msg)

        previous_length = len(self._messages)
        self._messages = batch + unconfirmed
        self._populated = True

        await self._notify(previous_length, "replace")
        return True

    async def append(self, message: Message, group_id: str | None = None) -> bool:
        """Optimistically append a sent message at the tail."""
        if group_id is not None and group_id != self._group_id:
            logger.debug("Discarding append for inactive group %s", group_id)
            return False
        if self._group_id is None:
            logger.debug("Discarding append with no active group")
            return False
        if any(msg.id == message.id for msg in self._messages):
            return False

        previous_length = len(self._messages)
        self._messages.append(replace(message, pending=True))
        self._populated = True

        await self._notify(previous_length, "append")
        return True

    async def _notify(self, previous_length: int, reason: str) -> None:
        await self._event_bus.emit(
            Topic.MESSAGES_CHANGED,
            {
                "group_id": self._group_id,
                "previous_length": previous_length,
                "length": len(self._messages),
                "reason": reason,
            },
            source="message_store",
        )
