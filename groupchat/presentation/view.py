"""Terminal rendering of a group chat."""

import click

from ..models import Message, StagedAttachment

LOADING_TEXT = "Loading chat..."
EMPTY_TEXT = "No messages yet. Start the conversation!"


def format_time(message: Message) -> str:
    """Local wall-clock time of a message as HH:MM."""
    return message.created_at.astimezone().strftime("%H:%M")


class ChatView:
    """Turns messages into terminal lines.

    Keeps track of which message ids were already printed so that new
    messages can be shown when the scroll controller asks for it.
    """

    def __init__(self, current_user_id: str | None = None, color: bool = True):
        self._current_user_id = current_user_id
        self._color = color
        self._shown: set[str] = set()

    def is_own(self, message: Message) -> bool:
        return self._current_user_id is not None and message.sender_id == self._current_user_id

    def reset(self) -> None:
        """Forget printed messages (on group change)."""
        self._shown.clear()

    def render_message(self, message: Message) -> str:
        own = self.is_own(message)
        author = "You" if own else message.sender_name
        parts = []
        if message.media is not None:
            parts.append(f"[{message.media.type.value}] {message.media.url}")
        if message.text:
            parts.append(message.text)

        line = f"[{format_time(message)}] {author}: {' '.join(parts)}"
        if self._color:
            return click.style(line, fg="red" if own else None)
        return line

    def render(self, messages: list[Message], loading: bool = False) -> list[str]:
        """Full rendering of the conversation."""
        if loading:
            return [LOADING_TEXT]
        if not messages:
            return [EMPTY_TEXT]
        self._shown.update(msg.id for msg in messages)
        return [self.render_message(msg) for msg in messages]

    def render_new(self, messages: list[Message]) -> list[str]:
        """Lines for messages not printed yet, in store order."""
        lines = []
        for msg in messages:
            if msg.id in self._shown:
                continue
            self._shown.add(msg.id)
            lines.append(self.render_message(msg))
        return lines

    def render_error(self, error: str | None) -> str | None:
        if not error:
            return None
        return click.style(f"! {error}", fg="red") if self._color else f"! {error}"

    def render_attachment(self, staged: StagedAttachment | None) -> str | None:
        """One-line preview of the staged attachment."""
        if staged is None:
            return None
        kind = "image" if staged.is_image else "video"
        return f"📎 {staged.file.name} ({staged.size_label}, {kind})"
