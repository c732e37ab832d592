"""HTTP transport for group chat messages."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import DEFAULT_PAGE_LIMIT
from ..errors import NetworkError, ServerError, ValidationError
from ..logging_config import get_logger
from ..models import AttachmentFile, Message
from .schemas import MessageListResponse, MessagePayload, MessageSendResponse

logger = get_logger(__name__)

SESSION_COOKIE_NAME = "connect.sid"


@dataclass
class MessagePage:
    """One page of a group's history plus the server's total count."""

    messages: list[Message]
    skip: int
    limit: int
    total: int | None = None


class IMessageTransport(Protocol):
    """Fetching and sending group messages. Never touches the message store."""

    async def fetch_messages(
        self, group_id: str, limit: int = DEFAULT_PAGE_LIMIT, skip: int = 0
    ) -> list[Message]:
        """Fetch a group's messages in server order."""
        ...

    async def send_message(
        self, group_id: str, text: str, attachment: AttachmentFile | None = None
    ) -> Message:
        """Send a message with optional media, return the stored message."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class HttpMessageTransport:
    """REST transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        session_cookie: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        cookies = {SESSION_COOKIE_NAME: session_cookie} if session_cookie else None
        self._client = client or httpx.AsyncClient(
            cookies=cookies,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    def _messages_url(self, group_id: str) -> str:
        return f"{self._base_url}/groups/{group_id}/messages"

    async def fetch_page(
        self, group_id: str, limit: int = DEFAULT_PAGE_LIMIT, skip: int = 0
    ) -> MessagePage:
        """GET one page of messages, with pagination metadata when provided."""
        response = await self._request(
            "GET", self._messages_url(group_id), params={"limit": limit, "skip": skip}
        )
        body = self._parse(response, MessageListResponse)

        messages = []
        for index, item in enumerate(body.data):
            try:
                payload = MessagePayload.model_validate(item)
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping malformed message %d in group %s: %s",
                    index,
                    group_id,
                    e,
                    extra={"group_id": group_id},
                )
                continue
            messages.append(payload.to_message(group_id))
        total = body.pagination.total if body.pagination else None
        logger.debug(
            "Fetched %d messages for group %s", len(messages), group_id, extra={"group_id": group_id}
        )
        return MessagePage(messages=messages, skip=skip, limit=limit, total=total)

    async def fetch_messages(
        self, group_id: str, limit: int = DEFAULT_PAGE_LIMIT, skip: int = 0
    ) -> list[Message]:
        """Fetch a group's messages in server order."""
        page = await self.fetch_page(group_id, limit=limit, skip=skip)
        return page.messages

    async def send_message(
        self, group_id: str, text: str, attachment: AttachmentFile | None = None
    ) -> Message:
        """POST a multipart message. Text is trimmed; text or attachment is required."""
        text = (text or "").strip()
        if not text and attachment is None:
            raise ValidationError("Message or media is required")

        # Always multipart, even without media; a None filename makes a plain form field
        files = {"message": (None, text.encode("utf-8"))}
        if attachment is not None:
            try:
                content = await asyncio.to_thread(attachment.read)
            except (OSError, ValueError) as e:
                raise ValidationError(f"Cannot read attachment {attachment.name}: {e}") from e
            files["media"] = (attachment.name, content, attachment.content_type)

        response = await self._request("POST", self._messages_url(group_id), files=files)
        body = self._parse(response, MessageSendResponse)
        if body.data is None:
            raise ServerError("Response did not include the sent message", response.status_code)

        message = body.data.to_message(group_id)
        logger.info(
            "Message %s sent to group %s",
            message.id,
            group_id,
            extra={
                "group_id": group_id,
                "message_id": message.id,
                "context": {"has_media": attachment is not None},
            },
        )
        return message

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {method} {url}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"Request failed: {method} {url}: {e}") from e

        if response.is_error:
            raise ServerError(_error_message(response), response.status_code)
        return response

    @staticmethod
    def _parse(response: httpx.Response, model):
        try:
            body = model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ServerError(f"Malformed response: {e}", response.status_code) from e

        if not body.success:
            raise ServerError(body.message or "Request was not successful", response.status_code)
        return body


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message, falling back to the status text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
