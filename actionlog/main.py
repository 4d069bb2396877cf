"""Entry point for ActionLog.

Usage:
    python -m actionlog.main              # history window (GUI)
    python -m actionlog.main add "text"   # record an action (headless)
    python -m actionlog.main undo|redo|clear|show
"""
import sys
import signal
import logging
import argparse


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_gui(config):
    """Run the history window with saves on the Qt event loop."""
    from PyQt5.QtWidgets import QApplication
    from actionlog.app import ActionHistory
    from actionlog.window import HistoryWindow, QtTimerScheduler

    app = QApplication(sys.argv)
    app.setApplicationName("ActionLog")

    actions = ActionHistory(config, scheduler=QtTimerScheduler())
    window = HistoryWindow(config, actions)
    actions.hydrate()  # after the window subscribes, so load warnings reach it
    window.show()

    exit_code = app.exec_()
    actions.flush()
    return exit_code


def run_command(config, args, out=None) -> int:
    """Run one headless command against the stored history."""
    from actionlog.app import ActionHistory

    out = out or sys.stdout
    logger = logging.getLogger(__name__)

    actions = ActionHistory(config)
    actions.hydrate()

    if args.command == "add":
        if not actions.submit(" ".join(args.text)):
            logger.error("Refusing to record an empty action")
            return 1
    elif args.command == "undo":
        entry = actions.undo()
        print(f"Undid: {entry}" if entry is not None else "Nothing to undo", file=out)
    elif args.command == "redo":
        entry = actions.redo()
        print(f"Redid: {entry}" if entry is not None else "Nothing to redo", file=out)
    elif args.command == "clear":
        actions.clear()

    if not actions.flush():
        return 1

    if args.command == "show":
        done, undone = actions.snapshot()
        print(f"Actions ({len(done)}):", file=out)
        for entry in reversed(done):
            print(f"  {entry}", file=out)
        print(f"Undone ({len(undone)}):", file=out)
        for entry in reversed(undone):
            print(f"  {entry}", file=out)
        saved_at = actions.gateway.last_saved_at
        if saved_at is not None:
            print(f"Last saved: {saved_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')}", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ActionLog — undo/redo action history")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", help="Path to config.json")
    sub = parser.add_subparsers(dest="command")
    add = sub.add_parser("add", help="Record an action")
    add.add_argument("text", nargs="+")
    sub.add_parser("undo", help="Undo the most recent action")
    sub.add_parser("redo", help="Redo the most recently undone action")
    sub.add_parser("clear", help="Clear both stacks")
    sub.add_parser("show", help="Print both stacks")
    return parser


def main(argv=None):
    from actionlog.config import Config

    signal.signal(signal.SIGINT, signal.SIG_DFL)

    args = build_parser().parse_args(argv)
    config = Config(args.config) if args.config else Config()
    setup_logging(args.debug or config.debug_logging)

    if args.command is None:
        sys.exit(run_gui(config))
    sys.exit(run_command(config, args))


if __name__ == "__main__":
    main()
