from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO


def setup_logging(level: str = "INFO", quiet: bool = False, stream: Optional[TextIO] = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()

    lvl = getattr(logging, level.upper(), logging.INFO)
    if quiet:
        lvl = max(lvl, logging.WARNING)
    root.setLevel(lvl)

    # the report goes to stdout; keep diagnostics out of it
    ch = logging.StreamHandler(stream if stream is not None else sys.stderr)
    ch.setLevel(lvl)
    fmt = "[%(levelname)s] %(name)s: %(message)s" if not quiet else "%(message)s"
    ch.setFormatter(logging.Formatter(fmt))
    root.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
