"""Core data models for the group chat client."""

from .events import BusMessage, Topic
from .messages import (
    UNKNOWN_SENDER,
    AttachmentFile,
    Media,
    MediaType,
    Message,
    StagedAttachment,
    normalize_sender,
)

__all__ = [
    # Messages
    "Message",
    "Media",
    "MediaType",
    "AttachmentFile",
    "StagedAttachment",
    "normalize_sender",
    "UNKNOWN_SENDER",
    # Events
    "BusMessage",
    "Topic",
]
