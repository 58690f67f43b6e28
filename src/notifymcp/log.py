"""Shared logging for notifymcp.

All components log to ~/.local/state/notifymcp/logs/server.log via Python's
logging module. Nothing is written to stdout, which carries the JSON-RPC stream.
Filter with grep: grep 'notifymcp.driver' ~/.local/state/notifymcp/logs/server.log
"""

import logging
from pathlib import Path

_root = logging.getLogger("notifymcp")
_root.setLevel(logging.DEBUG)
# don't propagate to root logger (the mcp SDK configures its own handlers)
_root.propagate = False

_handler: logging.Handler | None = None


def get_log_path(name: str) -> Path:
    """Path to a log file under ~/.local/state/notifymcp/logs/ (XDG state dir)."""
    log_dir = Path.home() / ".local" / "state" / "notifymcp" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{name}.log"


def _ensure_handler() -> None:
    global _handler
    if _handler is not None:
        return
    try:
        _handler = logging.FileHandler(get_log_path("server"))
    except OSError:
        # read-only home; keep logging quiet rather than break the server
        _handler = logging.NullHandler()
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S")
    )
    _root.addHandler(_handler)


def set_level(level: str) -> None:
    """Apply a level name from config (e.g. "INFO") to all notifymcp loggers."""
    _root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> logging.Logger:
    _ensure_handler()
    return _root.getChild(name)
