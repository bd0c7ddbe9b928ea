"""
LinkOS - Entry point.

Run with:  python -m linkos [script]

Reads session commands (see linkos.desktop.session) from *script*, or from
stdin when no script is given, and logs every window event.
"""

import argparse
import logging
import sys

from linkos.config.settings import LinkOSSettings, get_settings
from linkos.desktop.session import Session


class SafeStreamHandler(logging.StreamHandler):
    """Handler that replaces unencodable characters instead of crashing."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            enc = getattr(self.stream, "encoding", "utf-8") or "utf-8"
            safe = msg.encode(enc, errors="replace").decode(enc, errors="replace")
            self.stream.write(safe + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(settings: LinkOSSettings, level: str | None = None) -> None:
    """Configure logging for the desktop."""
    handler = SafeStreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.log.format, datefmt=settings.log.datefmt))

    root = logging.getLogger()
    root.setLevel(level or settings.log.level)
    root.addHandler(handler)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="linkos", description="Headless LinkOS desktop")
    parser.add_argument("script", nargs="?", help="command script (default: stdin)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="override the configured log level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings, args.log_level)

    session = Session(settings)
    session.log_window_events()

    print("=" * 60)
    print("  LinkOS session")
    print(f"  Viewport: {session.viewport.width:g}x{session.viewport.height:g}")
    print(f"  Shortcuts: {session.shortcut_count}")
    print(f"  Commands: {session.dispatcher.count}")
    print(f"  Dock: {', '.join(session.dock.apps)}")
    print("=" * 60 + "\n")

    if args.script:
        with open(args.script, encoding="utf-8") as fh:
            failures = session.run_script(fh)
    else:
        failures = session.run_script(sys.stdin)

    print("\n" + session.wm.dump_state())
    session.close()
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
