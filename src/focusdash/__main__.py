"""Focus Dashboard entry point.

Usage:
    python -m focusdash [OPTIONS]

Options:
    --config PATH      Path to YAML config file
    --profile NAME     Profile name (dev, prod, test)
    --mock-platform    Use the in-memory media platform
    --no-sound         Do not play the expiry tone
    --dry-run          Load config and exit
    --version          Show version
"""

# Load .env file before anything else
try:
    from pathlib import Path as _Path

    from dotenv import load_dotenv

    _project_root = _Path(__file__).parent.parent.parent
    _env_file = _project_root / ".env"
    if _env_file.exists():
        load_dotenv(_env_file)
    else:
        load_dotenv()
except ImportError:
    pass  # python-dotenv not installed, skip

import argparse
import logging
import signal
import sys
from pathlib import Path

from . import __version__
from .config.loader import detect_profile, load_config
from .errors import ConfigError


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="focusdash",
        description="Focus Dashboard - Study/Break countdown with background music",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m focusdash                      # Run with auto-detected profile
  python -m focusdash --profile test       # Short intervals, no tone
  python -m focusdash --config my.yaml     # Run with custom config file

Environment:
  FOCUSDASH_PROFILE    Set profile (dev, prod, test)
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Focus Dashboard v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    parser.add_argument(
        "--mock-platform",
        action="store_true",
        help="Use the in-memory media platform instead of mpv",
    )

    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Do not play the expiry tone",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the focus dashboard.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)
    profile = args.profile or detect_profile()

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("focusdash")

    logger.info(f"Focus Dashboard v{__version__}")
    logger.info(f"Profile: {profile}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Study: {config.timer.study_seconds}s, break: {config.timer.short_break_seconds}s")
        logger.info(f"Sound enabled: {config.sound.enabled}")
        logger.info(f"mpv: {config.media.mpv_path}")
        return 0

    from .console import ConsoleDashboard
    from .dashboard import build_dashboard
    from .scheduling import EventLoop

    if args.no_sound:
        config.sound.enabled = False

    loop = EventLoop()
    dashboard = build_dashboard(config, loop, use_mock_platform=args.mock_platform)
    console = ConsoleDashboard(dashboard, stop=loop.stop)

    print("\n" + "=" * 50)
    print("  Focus Dashboard")
    print("=" * 50)
    print(f"  Version: {__version__}")
    print(f"  Profile: {profile}")
    print(f"  Study: {config.timer.study_seconds // 60} min")
    print(f"  Break: {config.timer.short_break_seconds // 60} min")
    print("=" * 50 + "\n")
    print("Type 'help' for commands.\n")

    def signal_handler(_signum: int, _frame: object) -> None:
        logger.info("Shutdown requested, cleaning up...")
        loop.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    dashboard.mount()
    console.attach()
    console.start_input()

    try:
        loop.run()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        console.detach()
        dashboard.shutdown()
        loop.close()
        logger.info("Focus Dashboard shut down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
