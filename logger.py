"""
logger.py
---------
Logging setup for the tracker. Modules call ``get_logger(__name__)``;
only the Streamlit entrypoint calls ``configure_logging``.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "expense_tracker"
_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the tracker's logger tree, once."""
    global _configured
    if _configured:
        return
    root = logging.getLogger(_ROOT_NAME)
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``expense_tracker`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    root = logging.getLogger(_ROOT_NAME)
    if not _configured and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(f"{_ROOT_NAME}.{name}")
