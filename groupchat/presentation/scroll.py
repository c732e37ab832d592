"""Auto-scroll decisions driven by message store changes."""

from enum import Enum
from typing import Callable

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import BusMessage, Topic

logger = get_logger(__name__)

ScrollCallback = Callable[[str, int], None]


class ScrollState(str, Enum):
    """Whether the first population of the current group has been seen."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class ScrollController:
    """Scrolls to the newest message when the sequence grows.

    The first population of a group never scrolls. After that, every
    increase in length scrolls once; decreases and refreshes that keep
    the length do not.
    """

    def __init__(self, event_bus: IEventBus, on_scroll: ScrollCallback | None = None):
        self._event_bus = event_bus
        self._on_scroll = on_scroll
        self._state = ScrollState.UNINITIALIZED
        self._group_id: str | None = None
        self._last_length = 0
        self.scroll_count = 0

    @property
    def state(self) -> ScrollState:
        return self._state

    def start(self) -> None:
        """Subscribe to store changes."""
        self._event_bus.subscribe(Topic.MESSAGES_CHANGED, self._handle_change)

    def stop(self) -> None:
        """Unsubscribe from store changes."""
        self._event_bus.unsubscribe(Topic.MESSAGES_CHANGED, self._handle_change)

    def set_callback(self, on_scroll: ScrollCallback | None) -> None:
        self._on_scroll = on_scroll

    def reset(self, group_id: str | None) -> None:
        """Start over for a newly opened group."""
        self._state = ScrollState.UNINITIALIZED
        self._group_id = group_id
        self._last_length = 0

    async def _handle_change(self, bus_message: BusMessage) -> None:
        payload = bus_message.payload
        group_id = payload.get("group_id")
        if group_id != self._group_id:
            return

        length = payload["length"]

        if self._state is ScrollState.UNINITIALIZED:
            self._state = ScrollState.INITIALIZED
            self._last_length = length
            logger.debug("Initial load of group %s with %d messages", group_id, length)
            return

        added = length - self._last_length
        self._last_length = length
        if added <= 0:
            return

        self.scroll_count += 1
        logger.debug("Scrolling group %s to newest (%d new)", group_id, added)
        if self._on_scroll:
            self._on_scroll(group_id, length)
        await self._event_bus.emit(
            Topic.SCROLL_REQUESTED,
            {"group_id": group_id, "length": length, "added": added},
            source="scroll_controller",
        )
