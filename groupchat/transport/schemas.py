"""Wire models for the group messages REST endpoints."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models import UNKNOWN_SENDER, Media, MediaType, Message, normalize_sender


class MessagePayload(BaseModel):
    """A chat message as serialized by the server."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    group_id: str | None = Field(default=None, validation_alias="groupId")
    sender: Any = Field(validation_alias="senderId")  # bare id or {_id, name}
    sender_name: str | None = Field(default=None, validation_alias="senderName")
    message: str | None = None
    media_url: str | None = Field(default=None, validation_alias="mediaUrl")
    media_type: MediaType | None = Field(default=None, validation_alias="mediaType")
    created_at: datetime = Field(validation_alias="createdAt")

    @field_validator("id", "group_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("media_type", mode="before")
    @classmethod
    def _known_media_type(cls, value: Any) -> Any:
        # Unknown kinds are shown as text-only messages
        if value not in [t.value for t in MediaType]:
            return None
        return value

    @field_validator("sender")
    @classmethod
    def _require_sender(cls, value: Any) -> Any:
        normalize_sender(value)
        return value

    def to_message(self, group_id: str) -> Message:
        """Convert to the domain model, normalizing the sender shape."""
        sender_id, embedded_name = normalize_sender(self.sender)
        media = None
        if self.media_url and self.media_type:
            media = Media(url=self.media_url, type=self.media_type)
        return Message(
            id=self.id,
            group_id=self.group_id or group_id,
            sender_id=sender_id,
            sender_name=self.sender_name or embedded_name or UNKNOWN_SENDER,
            created_at=self.created_at,
            text=self.message or "",
            media=media,
        )


class Pagination(BaseModel):
    """Pagination block returned with a message list."""

    skip: int = 0
    limit: int = 0
    total: int = 0


class MessageListResponse(BaseModel):
    """Response of GET /groups/{groupId}/messages."""

    success: bool
    # Validated item by item so one bad entry does not fail the page
    data: list[Any] = Field(default_factory=list)
    pagination: Pagination | None = None
    message: str | None = None


class MessageSendResponse(BaseModel):
    """Response of POST /groups/{groupId}/messages."""

    success: bool
    data: MessagePayload | None = None
    message: str | None = None
