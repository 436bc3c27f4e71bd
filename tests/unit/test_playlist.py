"""Unit tests for the playlist."""

from unittest.mock import MagicMock

import pytest

from focusdash.errors import DuplicateItemError, ValidationError
from focusdash.media import Playlist, extract_item_id


class TestExtractItemId:
    """Tests for URL parsing."""

    @pytest.mark.parametrize(
        ("url", "item_id"),
        [
            ("https://www.youtube.com/watch?v=jfKfPfyJRdk", "jfKfPfyJRdk"),
            ("https://youtu.be/jfKfPfyJRdk", "jfKfPfyJRdk"),
            ("https://www.youtube.com/embed/jfKfPfyJRdk", "jfKfPfyJRdk"),
            ("https://www.youtube.com/watch?v=jfKfPfyJRdk&t=42", "jfKfPfyJRdk"),
            ("https://www.youtube.com/watch?list=PL1&v=jfKfPfyJRdk", "jfKfPfyJRdk"),
            ("https://youtu.be/jfKfPfyJRdk?si=share", "jfKfPfyJRdk"),
        ],
    )
    def test_supported_formats(self, url: str, item_id: str) -> None:
        """Test watch, short-link and embed URLs."""
        assert extract_item_id(url) == item_id

    @pytest.mark.parametrize("url", ["", "not a url", "https://example.com/watch?v=abc"])
    def test_unrecognised(self, url: str) -> None:
        """Test unknown URLs give None."""
        assert extract_item_id(url) is None


class TestPlaylist:
    """Tests for add, remove and select."""

    @pytest.fixture
    def playlist(self) -> Playlist:
        return Playlist()

    def test_first_add_selects(self, playlist: Playlist) -> None:
        """Test the first item becomes current."""
        item = playlist.add("https://youtu.be/aaa")
        assert playlist.current_id == "aaa"
        assert item.title == "Video 1"
        assert item.source_url == "https://youtu.be/aaa"

    def test_later_adds_keep_selection(self, playlist: Playlist) -> None:
        """Test adding more items does not move the selection."""
        playlist.add("https://youtu.be/aaa")
        second = playlist.add("https://youtu.be/bbb")
        assert playlist.current_id == "aaa"
        assert second.title == "Video 2"
        assert len(playlist) == 2

    def test_add_strips_whitespace(self, playlist: Playlist) -> None:
        """Test pasted URLs are trimmed."""
        item = playlist.add("  https://youtu.be/aaa \n")
        assert item.source_url == "https://youtu.be/aaa"

    def test_add_empty_rejected(self, playlist: Playlist) -> None:
        """Test empty input is rejected without changes."""
        with pytest.raises(ValidationError, match="Enter a URL"):
            playlist.add("   ")
        assert len(playlist) == 0

    def test_add_invalid_rejected(self, playlist: Playlist) -> None:
        """Test unrecognised URLs are rejected."""
        with pytest.raises(ValidationError, match="Invalid video URL"):
            playlist.add("https://example.com/song.mp3")
        assert playlist.current_id is None

    def test_duplicate_rejected(self, playlist: Playlist) -> None:
        """Test the same id cannot be added twice, whatever the URL form."""
        playlist.add("https://youtu.be/aaa")
        with pytest.raises(DuplicateItemError) as exc_info:
            playlist.add("https://www.youtube.com/watch?v=aaa")
        assert exc_info.value.item_id == "aaa"
        assert len(playlist) == 1

    def test_select(self, playlist: Playlist) -> None:
        """Test selecting an existing item."""
        playlist.add("https://youtu.be/aaa")
        playlist.add("https://youtu.be/bbb")
        item = playlist.select("bbb")
        assert item.id == "bbb"
        assert playlist.current is item

    def test_select_unknown(self, playlist: Playlist) -> None:
        """Test selecting an unknown id fails."""
        with pytest.raises(ValidationError):
            playlist.select("zzz")

    def test_remove_current_moves_to_first(self, playlist: Playlist) -> None:
        """Test removing the current item selects the first remaining one."""
        playlist.add("https://youtu.be/aaa")
        playlist.add("https://youtu.be/bbb")
        playlist.add("https://youtu.be/ccc")
        playlist.select("ccc")

        playlist.remove("ccc")

        assert playlist.current_id == "aaa"

    def test_remove_other_keeps_current(self, playlist: Playlist) -> None:
        """Test removing another item leaves the selection alone."""
        playlist.add("https://youtu.be/aaa")
        playlist.add("https://youtu.be/bbb")
        playlist.remove("bbb")
        assert playlist.current_id == "aaa"
        assert "bbb" not in playlist

    def test_remove_last_clears_selection(self, playlist: Playlist) -> None:
        """Test emptying the list clears the selection."""
        playlist.add("https://youtu.be/aaa")
        playlist.remove("aaa")
        assert playlist.current is None
        assert playlist.state.items == ()

    def test_listener_sees_selection_changes(self, playlist: Playlist) -> None:
        """Test listeners receive the new current item."""
        listener = MagicMock()
        playlist.subscribe(listener)

        first = playlist.add("https://youtu.be/aaa")
        playlist.remove("aaa")

        assert [c.args[0] for c in listener.call_args_list] == [first, None]

    def test_state_snapshot(self, playlist: Playlist) -> None:
        """Test the snapshot resolves the current item."""
        playlist.add("https://youtu.be/aaa")
        state = playlist.state
        assert state.current is not None
        assert state.current.id == "aaa"
