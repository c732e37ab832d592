"""Fixed-interval polling of a group's message history."""

import asyncio
from typing import Awaitable, Callable, Protocol

from ..config import DEFAULT_POLL_INTERVAL
from ..errors import ChatError
from ..logging_config import get_logger
from ..models import Message

logger = get_logger(__name__)

FetchFn = Callable[[str], Awaitable[list[Message]]]
BatchHandler = Callable[[str, list[Message], int], Awaitable[None]]
ErrorHandler = Callable[[str, ChatError, int], Awaitable[None]]


class IPoller(Protocol):
    """Delivers a group's message history on a schedule."""

    def start(self) -> None:
        """Tick now, then on every interval."""
        ...

    async def stop(self) -> None:
        """Stop scheduling ticks."""
        ...


class GroupPoller:
    """Polls one group's messages every `interval` seconds.

    Each tick runs in its own task and the schedule does not wait for it,
    so slow ticks can overlap. Stopping cancels the schedule only; ticks
    already in flight finish and report through the handlers.
    """

    def __init__(
        self,
        group_id: str,
        fetch: FetchFn,
        on_batch: BatchHandler,
        on_error: ErrorHandler,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self._group_id = group_id
        self._fetch = fetch
        self._on_batch = on_batch
        self._on_error = on_error
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()
        self._ticks = 0

    @property
    def group_id(self) -> str:
        return self._group_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Number of ticks issued so far."""
        return self._ticks

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def start(self) -> None:
        """Tick now, then on every interval."""
        if self.running:
            return
        logger.info("Polling group %s every %.1fs", self._group_id, self._interval)
        self._task = asyncio.create_task(self._schedule())

    async def stop(self) -> None:
        """Stop scheduling ticks. In-flight ticks are left to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped polling group %s", self._group_id)

    async def drain(self) -> None:
        """Wait for ticks still in flight."""
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _schedule(self) -> None:
        while True:
            self._spawn_tick()
            await asyncio.sleep(self._interval)

    def _spawn_tick(self) -> None:
        seq = self._ticks
        self._ticks += 1
        task = asyncio.create_task(self._tick(seq))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _tick(self, seq: int) -> None:
        try:
            messages = await self._fetch(self._group_id)
        except ChatError as e:
            await self._on_error(self._group_id, e, seq)
            return
        except Exception as e:
            logger.error(
                "Poll tick %d for group %s crashed: %s",
                seq,
                self._group_id,
                e,
                exc_info=True,
                extra={"group_id": self._group_id, "tick": seq},
            )
            return

        try:
            await self._on_batch(self._group_id, messages, seq)
        except Exception as e:
            logger.error("Batch handler for group %s failed: %s", self._group_id, e, exc_info=True)
