"""Message transport module."""

from .http_transport import HttpMessageTransport, IMessageTransport, MessagePage

__all__ = ["HttpMessageTransport", "IMessageTransport", "MessagePage"]
