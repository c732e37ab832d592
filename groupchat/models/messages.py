"""Message-related data models."""

import base64
import mimetypes
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

UNKNOWN_SENDER = "Unknown"


class MediaType(str, Enum):
    """Kinds of media a chat message can carry."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class Media:
    """A single media attachment already hosted by the server."""

    url: str
    type: MediaType


@dataclass
class Message:
    """A single chat entry in a group."""

    id: str
    group_id: str
    sender_id: str
    sender_name: str
    created_at: datetime
    text: str = ""
    media: Media | None = None
    pending: bool = False  # appended locally, not yet seen in a poll batch

    @property
    def has_content(self) -> bool:
        return bool(self.text) or self.media is not None


def normalize_sender(value: Any) -> tuple[str, str | None]:
    """Return (sender_id, embedded_name) for a bare id or a populated sender object."""
    if isinstance(value, dict):
        sender_id = value.get("_id") or value.get("id")
        if not sender_id:
            raise ValueError("Sender object without an id")
        return str(sender_id), value.get("name")
    if value is None or value == "":
        raise ValueError("Missing sender id")
    return str(value), None


@dataclass
class AttachmentFile:
    """A file picked by the user, either on disk or in memory."""

    name: str
    size: int
    content_type: str
    path: Path | None = None
    data: bytes | None = None

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "AttachmentFile":
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(
            name=path.name,
            size=path.stat().st_size,
            content_type=content_type,
            path=path,
        )

    @property
    def media_type(self) -> MediaType | None:
        if self.content_type.startswith("image/"):
            return MediaType.IMAGE
        if self.content_type.startswith("video/"):
            return MediaType.VIDEO
        return None

    def read(self) -> bytes:
        """Read file contents (blocking)."""
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"Attachment {self.name} has neither data nor path")
        return self.path.read_bytes()

    def to_data_url(self) -> str:
        """Encode contents as a base64 data URL (blocking)."""
        encoded = base64.b64encode(self.read()).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass
class StagedAttachment:
    """An attachment selected for the next send, with its local preview."""

    file: AttachmentFile
    preview: str | None = None  # data URL, filled in asynchronously

    @property
    def is_image(self) -> bool:
        return self.file.media_type is MediaType.IMAGE

    @property
    def size_label(self) -> str:
        return f"{self.file.size / (1024 * 1024):.2f} MB"
