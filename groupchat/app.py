"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .event_bus import EventBus
from .logging_config import get_logger
from .presentation import ScrollController
from .session import GroupSession
from .store import MessageStore
from .transport import HttpMessageTransport, IMessageTransport

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def open_group(self, group_id: str) -> GroupSession:
        """Show a group: reset store and scroll state, start polling."""
        ...

    async def close_group(self) -> None:
        """Stop showing the current group."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: IMessageTransport | None = None,
    ):
        self._settings = settings or Settings()
        self._injected_transport = transport

        # Components (will be initialized in start())
        self._transport: IMessageTransport | None = None
        self._event_bus: EventBus | None = None
        self._store: MessageStore | None = None
        self._scroll: ScrollController | None = None
        self._session: GroupSession | None = None
        self._retired: list[GroupSession] = []

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting group chat client for %s", self._settings.api_url)

        # 1. Transport (no dependencies)
        self._transport = self._injected_transport or HttpMessageTransport(
            self._settings.api_url,
            session_cookie=self._settings.session_cookie,
            timeout=self._settings.request_timeout,
        )

        # 2. EventBus
        self._event_bus = EventBus()

        # 3. MessageStore (publishes to EventBus)
        self._store = MessageStore(self._event_bus)

        # 4. ScrollController (subscribes to store changes)
        self._scroll = ScrollController(self._event_bus)
        self._scroll.start()

        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        await self.close_group()
        for session in self._retired:
            await session.poller.drain()
        self._retired.clear()

        if self._scroll:
            self._scroll.stop()
        if self._store:
            self._store.deactivate()
        if self._transport:
            await self._transport.close()
            logger.info("Transport closed")

    async def open_group(self, group_id: str) -> GroupSession:
        """Show a group: reset store and scroll state, start polling."""
        if not self._store or not self._scroll or not self._transport:
            raise RuntimeError("Application not started")

        await self.close_group()

        self._store.activate(group_id)
        self._scroll.reset(group_id)
        self._session = GroupSession(
            group_id,
            self._transport,
            self._store,
            poll_interval=self._settings.poll_interval,
            page_limit=self._settings.page_limit,
        )
        self._session.start()
        logger.info("Opened group %s", group_id)
        return self._session

    async def close_group(self) -> None:
        """Stop showing the current group."""
        if not self._session:
            return
        session = self._session
        self._session = None
        await session.close()
        if self._store:
            self._store.deactivate()
        if self._scroll:
            self._scroll.reset(None)
        # Ticks still in flight finish later and are dropped as stale
        self._retired = [s for s in self._retired if s.poller.in_flight]
        if session.poller.in_flight:
            self._retired.append(session)
        logger.info("Closed group %s", session.group_id)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session(self) -> GroupSession:
        """Get the open group session."""
        if not self._session:
            raise RuntimeError("No group open")
        return self._session

    @property
    def store(self) -> MessageStore:
        """Get message store instance."""
        if not self._store:
            raise RuntimeError("Application not started")
        return self._store

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def scroll(self) -> ScrollController:
        """Get scroll controller instance."""
        if not self._scroll:
            raise RuntimeError("Application not started")
        return self._scroll
