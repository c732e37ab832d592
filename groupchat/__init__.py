"""Group chat client."""

from .app import Application, IApplication
from .config import Settings
from .errors import ChatError, NetworkError, ServerError, ValidationError
from .event_bus import EventBus, IEventBus
from .models import (
    AttachmentFile,
    BusMessage,
    Media,
    MediaType,
    Message,
    StagedAttachment,
    Topic,
)
from .presentation import ChatView, ScrollController, ScrollState
from .send import SendPipeline
from .session import GroupSession
from .store import IMessageStore, MessageStore
from .sync import GroupPoller, IPoller
from .transport import HttpMessageTransport, IMessageTransport, MessagePage

__all__ = [
    # Application
    "Application",
    "IApplication",
    "GroupSession",
    "Settings",
    # Errors
    "ChatError",
    "ValidationError",
    "NetworkError",
    "ServerError",
    # Models
    "Message",
    "Media",
    "MediaType",
    "AttachmentFile",
    "StagedAttachment",
    "BusMessage",
    "Topic",
    # Components
    "IEventBus",
    "EventBus",
    "IMessageTransport",
    "HttpMessageTransport",
    "MessagePage",
    "IMessageStore",
    "MessageStore",
    "ScrollController",
    "ScrollState",
    "ChatView",
    "SendPipeline",
    "IPoller",
    "GroupPoller",
]
