"""
WindowTiler - Entry point.

Run with:  python -m windowtiler [options] COMMAND [COMMAND ...]

Examples:
    python -m windowtiler --list
    python -m windowtiler tile_all
    python -m windowtiler --select notepad.exe --select Code.exe tile_left
    python -m windowtiler --group coding tile_right_two_thirds
"""

import argparse
import logging
import sys

from windowtiler.app import Application
from windowtiler.core.catalog import CatalogEvent, WindowCatalog
from windowtiler.core.scheduler import BlockingScheduler
from windowtiler.platform import load_environment


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


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the tiler."""
    fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    handler = SafeStreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.addHandler(handler)

    # Quiet down noisy loggers
    logging.getLogger("windowtiler.core.filter").setLevel(logging.INFO)


def on_catalog_event(event: CatalogEvent, catalog: WindowCatalog) -> None:
    """Print a one-line summary whenever the catalog changes."""
    print(
        f"  CATALOG: {event.value:<18s} | "
        f"{catalog.selected_window_count}/{catalog.total_window_count} windows selected"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="windowtiler",
        description="Arrange open windows into non-overlapping regions.",
    )
    parser.add_argument("commands", nargs="*", help="commands to run in order")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--list", action="store_true", help="list commands and windows")
    parser.add_argument(
        "--select", action="append", default=[], metavar="APP",
        help="select an app by name before running commands (repeatable)",
    )
    parser.add_argument("--group", metavar="NAME", help="select the apps of a saved group")
    parser.add_argument("--save-group", metavar="NAME", help="save the selection as a group")
    parser.add_argument("--save-layout", metavar="NAME", help="save current window positions")
    parser.add_argument("--restore-layout", metavar="NAME", help="restore a saved layout")
    parser.add_argument("--gap", type=float, help="set and persist the window gap")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        environment = load_environment()
    except RuntimeError as exc:
        print(f"windowtiler: {exc}", file=sys.stderr)
        return 2

    app = Application(environment, scheduler=BlockingScheduler())
    app.catalog.on_all(on_catalog_event)

    if args.gap is not None:
        app.settings.set_gap(args.gap)

    app.controller.refresh()

    if args.select:
        app.catalog.select_by_name(args.select)

    if args.group:
        group = app.groups.find_by_name(args.group)
        if group is None:
            print(f"windowtiler: unknown group {args.group!r}", file=sys.stderr)
            return 1
        app.restore_group(group.id)

    if args.save_group:
        app.save_selection_as_group(args.save_group)

    if args.save_layout:
        app.save_current_layout(args.save_layout)

    if args.list:
        print("\n" + app.dispatcher.dump_state() + "\n")
        print(app.catalog.dump_state() + "\n")

    ok = True
    if args.restore_layout:
        layout = app.layouts.find_by_name(args.restore_layout)
        if layout is None:
            print(f"windowtiler: unknown layout {args.restore_layout!r}", file=sys.stderr)
            return 1
        result = app.restore_layout(layout.id)
        print(f"  LAYOUT {layout.name!r}: {result}")
        ok = result.ok

    for name in args.commands:
        if not app.dispatcher.has(name):
            print(f"windowtiler: unknown command {name!r} (see --list)", file=sys.stderr)
            return 1
        ok = app.dispatcher.execute(name) and ok
        if app.dispatcher.last_result is not None:
            print(f"  {name.upper()}: {app.dispatcher.last_result}")

    print("\n" + app.controller.dump_state())
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
