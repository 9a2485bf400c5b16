"""Find and kill processes hogging your ports.

Entry point for the prockiller terminal UI.

Usage:
    prockiller            Prompt for a port
    prockiller 3000       Scan port 3000 immediately
    prockiller --version  Print version and exit
"""

import logging
import sys

from textual.logging import TextualHandler

from . import __version__
from .config import get_config_manager
from .validation import validate_port

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

USAGE = "Usage: prockiller [PORT] [--version]"


def _setup_logging() -> None:
    """Log to file if configured, else to the Textual devtools console.

    The TUI owns the terminal, so records never go to stderr.
    """
    config = get_config_manager()
    if config.log_file:
        handler: logging.Handler = logging.FileHandler(config.log_file)
    else:
        handler = TextualHandler()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=[handler],
    )


def main():
    """Run prockiller, scanning the port given on the command line if any."""
    args = sys.argv[1:]

    if "--version" in args or "-V" in args:
        print(f"prockiller {__version__}")
        return

    if "--help" in args or "-h" in args:
        print(USAGE)
        return

    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    initial_port = None
    if args:
        result = validate_port(args[0])
        if not result.valid:
            print(f"Error: {result.error}", file=sys.stderr)
            sys.exit(2)
        initial_port = int(args[0].strip())

    _setup_logging()

    from .ui import ProcKillerApp

    ProcKillerApp(initial_port=initial_port).run()


if __name__ == "__main__":
    main()
