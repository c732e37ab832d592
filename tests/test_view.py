"""Tests for ChatView."""

from datetime import datetime, timezone

from groupchat.models import AttachmentFile, Media, MediaType, StagedAttachment
from groupchat.presentation import ChatView
from groupchat.presentation.view import EMPTY_TEXT, LOADING_TEXT, format_time


class TestRender:
    """Tests for full rendering."""

    def test_loading(self):
        assert ChatView().render([], loading=True) == [LOADING_TEXT]

    def test_empty(self):
        assert ChatView().render([]) == [EMPTY_TEXT]

    def test_own_and_other_messages(self, make_message):
        view = ChatView(current_user_id="me", color=False)
        mine = make_message("m1", sender_id="me", text="hi all")
        theirs = make_message("m2", sender_id="u2", sender_name="Bob", text="hello")

        lines = view.render([mine, theirs])

        assert lines[0] == f"[{format_time(mine)}] You: hi all"
        assert lines[1] == f"[{format_time(theirs)}] Bob: hello"

    def test_media_line(self, make_message):
        view = ChatView(color=False)
        msg = make_message(
            "m1",
            text="look",
            media=Media(url="https://cdn.test/p.png", type=MediaType.IMAGE),
        )

        [line] = view.render([msg])

        assert line.endswith("Alice: [image] https://cdn.test/p.png look")

    def test_without_current_user_nothing_is_own(self, make_message):
        view = ChatView()
        assert view.is_own(make_message("m1", sender_id="me")) is False


class TestRenderNew:
    """Tests for incremental rendering."""

    def test_only_unseen_messages(self, make_message):
        view = ChatView(color=False)
        first = [make_message("m1"), make_message("m2")]
        view.render(first)

        lines = view.render_new(first + [make_message("m3", text="new")])

        assert len(lines) == 1
        assert lines[0].endswith("Alice: new")
        assert view.render_new(first) == []

    def test_reset_forgets_shown(self, make_message):
        view = ChatView(color=False)
        view.render([make_message("m1")])

        view.reset()

        assert len(view.render_new([make_message("m1")])) == 1


class TestBanners:
    """Tests for error and attachment lines."""

    def test_error(self):
        view = ChatView(color=False)
        assert view.render_error(None) is None
        assert view.render_error("Failed to load messages") == "! Failed to load messages"

    def test_attachment(self):
        view = ChatView(color=False)
        file = AttachmentFile(name="clip.mp4", size=1024 * 1024, content_type="video/mp4", data=b"")

        assert view.render_attachment(None) is None
        assert view.render_attachment(StagedAttachment(file=file)) == "📎 clip.mp4 (1.00 MB, video)"


def test_format_time_is_hours_and_minutes():
    ts = datetime(2024, 1, 1, 12, 34, tzinfo=timezone.utc)

    class _Msg:
        created_at = ts

    assert format_time(_Msg()) == ts.astimezone().strftime("%H:%M")
