import curses
import locale
import logging
import os
import sys

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

from clipboard import ClipboardWriter
from config_paths import LOG_PATH, ensure_config_dirs, load_config
from editor_registry import EditorRegistry
from logging_config import setup_logging
from text_document import TextDocument
from tsv_session import TsvSession

from _version import __version__

USAGE = (
    "tsvgrid - terminal grid editor for tab-separated files\n\n"
    "Usage:\n"
    "  tsvgrid <path> [--base <path>] [--debug]\n"
    "  tsvgrid -v\n"
    "  tsvgrid -h\n\n"
    "Keys: mouse drag / shift+arrows select, Enter edits, Ctrl+Y copy,\n"
    "Ctrl+A select all, Ctrl+K command prompt, Ctrl+S save, Ctrl+X quit\n"
)


def _parse_args(args):
    """Return options for ``args``; raises ValueError on bad usage."""
    opts = {"path": None, "base": None, "debug": False, "version": False, "help": False}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("-v", "-V"):
            opts["version"] = True
        elif arg == "-h":
            opts["help"] = True
        elif arg == "--debug":
            opts["debug"] = True
        elif arg == "--base":
            if i + 1 >= len(args):
                raise ValueError("--base needs a path")
            opts["base"] = args[i + 1]
            i += 1
        elif arg.startswith("--base="):
            opts["base"] = arg[len("--base="):]
        elif arg.startswith("-"):
            raise ValueError(f"Unknown option: {arg}")
        elif opts["path"] is None:
            opts["path"] = arg
        else:
            raise ValueError("Only one file can be opened")
        i += 1
    return opts


def main():
    try:
        opts = _parse_args(sys.argv[1:])
    except ValueError as exc:
        print(f"{exc}\n\n{USAGE}", file=sys.stderr)
        return 2

    if opts["version"]:
        print(__version__)
        return 0

    if opts["help"] or not opts["path"]:
        print(USAGE)
        return 0

    path = opts["path"]
    if os.path.isdir(path):
        print(f"{path} is a directory", file=sys.stderr)
        return 1

    ensure_config_dirs()
    setup_logging(logging.DEBUG if opts["debug"] else logging.INFO, LOG_PATH)
    logger = logging.getLogger("tsvgrid.main")

    cfg = load_config()
    if not cfg["enabled"]:
        print(
            "tsvgrid is disabled. Set \"enabled\": true in the config file to turn it back on.",
            file=sys.stderr,
        )
        return 1

    # locale-aware string order when sorting
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set the user locale, sorting uses the C locale")

    try:
        document = TextDocument(path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Load failed: {exc}", file=sys.stderr)
        return 1

    registry = EditorRegistry()
    session = TsvSession(
        document,
        cfg,
        clipboard=ClipboardWriter(cfg["clipboard_interface_command"]),
        registry=registry,
        config_loader=load_config,
    )
    logger.info("Opened %s", path)

    def curses_main(stdscr):
        from orchestrator import Orchestrator

        orchestrator = Orchestrator(stdscr, session)
        if opts["base"]:
            session.enter_diff_mode(opts["base"])
        orchestrator.run()

    curses.wrapper(curses_main)
    return 0


if __name__ == "__main__":
    sys.exit(main())
