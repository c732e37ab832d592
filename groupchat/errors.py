"""Exceptions raised by the group chat client."""


class ChatError(Exception):
    """Base exception for group chat errors."""


class ValidationError(ChatError):
    """Input rejected locally, before any network call."""


class NetworkError(ChatError):
    """The server could not be reached or did not answer in time."""


class ServerError(ChatError):
    """The server answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"
