"""SymGA logging system.

Provides structured logging under the ``symga`` hierarchy.
Compiler stages log at DEBUG; CLI output goes through :func:`get_logger`
instead of ``print()``.

Environment variables:
    SYMGA_LOG_LEVEL  DEBUG / INFO (default) / WARNING / ERROR
    SYMGA_LOG_FILE   optional path; appends plain-text log lines
"""

import logging
import os
import sys

ROOT_LOGGER = "symga"

_CONFIGURED = False

# ANSI colour codes (used only when stderr is a TTY)
_COLORS = {
    logging.DEBUG: "\033[36m",     # cyan
    logging.INFO: "\033[32m",      # green
    logging.WARNING: "\033[33m",   # yellow
    logging.ERROR: "\033[31m",     # red
    logging.CRITICAL: "\033[35m",  # magenta
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Colours the level name on a TTY without touching the shared record."""

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().formatMessage(record)
        color = _COLORS.get(record.levelno, "")
        original = record.levelname
        record.levelname = f"{color}{original}{_RESET}"
        try:
            return super().formatMessage(record)
        finally:
            record.levelname = original


def _configure_once() -> None:
    """One-time lazy init of the ``symga`` root logger."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    root = logging.getLogger(ROOT_LOGGER)
    level_name = os.environ.get("SYMGA_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    fmt = "%(levelname)s %(name)s: %(message)s"
    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_ColorFormatter(fmt, use_color=use_color))
    root.addHandler(console)

    log_file = os.environ.get("SYMGA_LOG_FILE")
    if log_file:
        fh = logging.FileHandler(log_file, mode="a")
        fh.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ))
        root.addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``symga`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    _configure_once()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
