"""Polling module."""

from .poller import GroupPoller, IPoller

__all__ = ["GroupPoller", "IPoller"]
