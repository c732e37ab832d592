"""Send pipeline: attachment staging, submission and optimistic append."""

import asyncio

from ..errors import ChatError, ValidationError
from ..logging_config import get_logger
from ..models import AttachmentFile, Message, StagedAttachment
from ..store import IMessageStore
from ..transport import IMessageTransport

logger = get_logger(__name__)

MAX_ATTACHMENT_BYTES = 50 * 1024 * 1024

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-matroska",
})

SIZE_ERROR = "File size must be less than 50MB"
TYPE_ERROR = "Invalid file type. Only images and videos are allowed."
SEND_ERROR = "Failed to send message. Please try again."


def validate_attachment(file: AttachmentFile) -> None:
    """Raise ValidationError unless the file may be attached to a message."""
    if file.size > MAX_ATTACHMENT_BYTES:
        raise ValidationError(SIZE_ERROR)
    if file.content_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(TYPE_ERROR)


class SendPipeline:
    """Input state of one group's composer and the send flow behind it."""

    def __init__(self, group_id: str, transport: IMessageTransport, store: IMessageStore):
        self._group_id = group_id
        self._transport = transport
        self._store = store
        self._staged: StagedAttachment | None = None
        self._sending = False
        self.text = ""
        self.error: str | None = None

    @property
    def staged(self) -> StagedAttachment | None:
        return self._staged

    @property
    def sending(self) -> bool:
        """True while a send is in flight; input controls are disabled."""
        return self._sending

    @property
    def can_submit(self) -> bool:
        return not self._sending and (bool(self.text.strip()) or self._staged is not None)

    async def select_attachment(self, file: AttachmentFile) -> StagedAttachment:
        """Validate and stage a file, then compute its preview.

        A rejected file leaves any previously staged attachment in place.
        """
        try:
            validate_attachment(file)
        except ValidationError as e:
            logger.info("Rejected attachment %s: %s", file.name, e)
            self.error = str(e)
            raise

        staged = StagedAttachment(file=file)
        self._staged = staged
        self.error = None

        preview = await asyncio.to_thread(file.to_data_url)
        # Cleared or replaced while reading
        if self._staged is staged:
            staged.preview = preview
        return staged

    def clear_attachment(self) -> None:
        """Discard the staged file and its preview."""
        self._staged = None

    def dismiss_error(self) -> None:
        self.error = None

    async def submit(self, text: str | None = None) -> Message | None:
        """Send the current input. Returns the confirmed message, or None.

        Empty input is a no-op. On failure the error is surfaced and the
        input text and attachment are kept for a retry.
        """
        if text is not None:
            self.text = text

        body = self.text.strip()
        if not body and self._staged is None:
            return None
        if self._sending:
            logger.debug("Send already in progress for group %s", self._group_id)
            return None

        self._sending = True
        self.error = None
        staged = self._staged

        try:
            message = await self._transport.send_message(
                self._group_id, body, staged.file if staged else None
            )
        except ChatError as e:
            logger.warning("Send to group %s failed: %s", self._group_id, e, extra={"group_id": self._group_id})
            self.error = SEND_ERROR
            return None
        finally:
            self._sending = False

        self.text = ""
        if self._staged is staged:
            self.clear_attachment()
        await self._store.append(message, group_id=self._group_id)
        return message
