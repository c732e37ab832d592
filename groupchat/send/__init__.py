"""Send pipeline module."""

from .pipeline import (
    ALLOWED_MIME_TYPES,
    MAX_ATTACHMENT_BYTES,
    SendPipeline,
    validate_attachment,
)

__all__ = [
    "ALLOWED_MIME_TYPES",
    "MAX_ATTACHMENT_BYTES",
    "SendPipeline",
    "validate_attachment",
]
