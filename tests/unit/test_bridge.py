"""Unit tests for the playback bridge."""

from unittest.mock import MagicMock

from focusdash.bridge import NULL_SINK, PlaybackBridge


class TestPlaybackBridge:
    """Tests for PlaybackBridge."""

    def test_invoke_without_sink_is_noop(self) -> None:
        """Test an empty slot does nothing and raises nothing."""
        bridge = PlaybackBridge()
        assert bridge.is_registered is False
        bridge.invoke()

    def test_invoke_calls_registered_sink(self) -> None:
        """Test the registered sink is played."""
        bridge = PlaybackBridge()
        sink = MagicMock()
        bridge.register(sink)

        bridge.invoke()

        sink.play.assert_called_once_with()
        assert bridge.is_registered is True

    def test_register_replaces_previous_sink(self) -> None:
        """Test only the newest sink is invoked."""
        bridge = PlaybackBridge()
        old, new = MagicMock(), MagicMock()
        bridge.register(old)
        bridge.register(new)

        bridge.invoke()

        old.play.assert_not_called()
        new.play.assert_called_once()

    def test_sink_failure_is_swallowed(self) -> None:
        """Test a failing sink does not raise out of invoke."""
        bridge = PlaybackBridge()
        sink = MagicMock()
        sink.play.side_effect = RuntimeError("player gone")
        bridge.register(sink)

        bridge.invoke()

        sink.play.assert_called_once()

    def test_unregister_clears_slot(self) -> None:
        """Test unregister returns to the null sink."""
        bridge = PlaybackBridge()
        sink = MagicMock()
        bridge.register(sink)
        bridge.unregister()

        bridge.invoke()

        sink.play.assert_not_called()
        assert bridge.is_registered is False

    def test_stale_unregister_keeps_newer_sink(self) -> None:
        """Test unregistering an old sink leaves the current one."""
        bridge = PlaybackBridge()
        old, new = MagicMock(), MagicMock()
        bridge.register(old)
        bridge.register(new)

        bridge.unregister(old)
        bridge.invoke()

        new.play.assert_called_once()

    def test_null_sink_play_returns_none(self) -> None:
        """Test the null sink is a harmless no-op."""
        assert NULL_SINK.play() is None
