"""
Logging — one "netledger" logger tree.

Handlers live on the root "netledger" logger: a dated file under LOG_DIR
that captures everything, plus a console handler when VERBOSE. Components
get children ("netledger.network", "netledger.renderer", ...) that
propagate to it. Long-running entry points (API server, CLI) may add a
dedicated file of their own.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from netledger.config import Config

ROOT = "netledger"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_console: logging.Handler | None = None
_quiet = False


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT)
    if root.handlers:
        return root

    global _console
    Config.ensure_dirs()
    root.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.DEBUG))
    root.propagate = False

    fh = logging.FileHandler(Config.LOG_DIR / f"{ROOT}_{datetime.now():%Y%m%d}.log", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(_FORMAT)
    root.addHandler(fh)

    if Config.VERBOSE and not _quiet:
        _console = logging.StreamHandler(sys.stdout)
        _console.setLevel(logging.INFO)
        _console.setFormatter(_FORMAT)
        root.addHandler(_console)
    return root


def suppress_console_logs() -> None:
    """Drop console output, e.g. when the CLI prints results to stdout."""
    global _quiet, _console
    _quiet = True
    if _console is not None:
        logging.getLogger(ROOT).removeHandler(_console)
        _console = None


def setup_logging(name: str, log_file: str | None = None) -> logging.Logger:
    """
    Return the component logger "netledger.<name>".

    Args:
        name: Component name.
        log_file: Extra file under LOG_DIR receiving only this component's
            records (they still reach the shared dated file).
    """
    _root()
    logger = logging.getLogger(f"{ROOT}.{name}")

    if log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        fh = logging.FileHandler(Config.LOG_DIR / log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(_FORMAT)
        logger.addHandler(fh)

    return logger
