"""Logging helpers for the histsearch CLI."""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "histsearch"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time.

    While the dialog runs, prompt-toolkit swaps ``sys.stderr`` for a proxy
    that prints above the application instead of through it.
    """

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger that reports through the shared histsearch handler."""

    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = _StderrHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return logging.getLogger(name)


def set_verbosity(verbose: bool) -> None:
    """Toggle debug output for every histsearch logger."""

    # Module loggers leave their level unset and inherit from the package root.
    level = logging.DEBUG if verbose else logging.WARNING
    get_logger().setLevel(level)


__all__ = ["ROOT_LOGGER", "get_logger", "set_verbosity"]
