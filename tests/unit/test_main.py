"""Unit tests for the command line entry point."""

import pytest

from focusdash.__main__ import main, parse_args


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Test defaults without arguments."""
        args = parse_args([])
        assert args.config is None
        assert args.profile is None
        assert args.mock_platform is False
        assert args.no_sound is False

    def test_flags(self) -> None:
        """Test every flag is parsed."""
        args = parse_args(["--profile", "test", "--mock-platform", "--no-sound", "--dry-run"])
        assert args.profile == "test"
        assert args.mock_platform is True
        assert args.no_sound is True
        assert args.dry_run is True

    def test_invalid_profile(self) -> None:
        """Test unknown profiles are rejected by argparse."""
        with pytest.raises(SystemExit):
            parse_args(["--profile", "staging"])


class TestMain:
    """Tests for main()."""

    def test_dry_run(self) -> None:
        """Test a dry run loads config and exits cleanly."""
        assert main(["--profile", "test", "--dry-run"]) == 0

    def test_missing_config(self, tmp_path) -> None:
        """Test a missing config file exits with an error code."""
        assert main(["--config", str(tmp_path / "missing.yaml"), "--dry-run"]) == 1

    def test_invalid_config(self, tmp_path) -> None:
        """Test an invalid config file exits with an error code."""
        path = tmp_path / "bad.yaml"
        path.write_text("focusdash:\n  timer:\n    nap_seconds: 5\n")
        assert main(["--config", str(path), "--dry-run"]) == 1
