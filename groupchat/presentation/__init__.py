"""Presentation module: auto-scroll and terminal view."""

from .scroll import ScrollCallback, ScrollController, ScrollState
from .view import ChatView

__all__ = ["ChatView", "ScrollCallback", "ScrollController", "ScrollState"]
