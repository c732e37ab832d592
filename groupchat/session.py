"""Per-group view state: polling, load status and the composer."""

from .config import DEFAULT_PAGE_LIMIT, DEFAULT_POLL_INTERVAL
from .errors import ChatError
from .logging_config import get_logger
from .models import Message
from .send import SendPipeline
from .store import IMessageStore
from .sync import GroupPoller
from .transport import IMessageTransport

logger = get_logger(__name__)

LOAD_ERROR = "Failed to load messages"


class GroupSession:
    """One opened group: its poller, its send pipeline and its load state."""

    def __init__(
        self,
        group_id: str,
        transport: IMessageTransport,
        store: IMessageStore,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        page_limit: int = DEFAULT_PAGE_LIMIT,
    ):
        self.group_id = group_id
        self._transport = transport
        self._store = store
        self._page_limit = page_limit
        self._loaded = False
        self._closed = False

        self.loading = True
        self.load_error: str | None = None
        self.pipeline = SendPipeline(group_id, transport, store)
        self.poller = GroupPoller(
            group_id,
            fetch=self._fetch,
            on_batch=self._on_batch,
            on_error=self._on_error,
            interval=poll_interval,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        self.poller.start()

    async def close(self) -> None:
        """Stop polling and drop the staged attachment."""
        self._closed = True
        await self.poller.stop()
        self.pipeline.clear_attachment()

    async def _fetch(self, group_id: str) -> list[Message]:
        return await self._transport.fetch_messages(group_id, limit=self._page_limit)

    async def _on_batch(self, group_id: str, messages: list[Message], seq: int) -> None:
        accepted = await self._store.replace_all(group_id, messages)
        if not accepted or self._closed:
            return
        if not self._loaded:
            logger.info("Loaded %d messages for group %s", len(messages), group_id)
        self._loaded = True
        self.loading = False
        self.load_error = None

    async def _on_error(self, group_id: str, error: ChatError, seq: int) -> None:
        if self._closed:
            return
        if self._loaded:
            # Background refresh: the next tick will retry
            logger.debug(
                "Poll %d for group %s failed: %s",
                seq,
                group_id,
                error,
                extra={"group_id": group_id, "tick": seq},
            )
            return
        logger.warning(
            "Loading messages for group %s failed: %s",
            group_id,
            error,
            extra={"group_id": group_id, "tick": seq},
        )
        self.loading = False
        self.load_error = LOAD_ERROR
