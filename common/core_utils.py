#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup shared by the bootstrap and machine setup entry points.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from settings.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

DETAILED_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"
SIMPLE_LOG_FORMAT = "{log_prefix}%(asctime)s - %(symbol)s %(message)s"

_LEVEL_SYMBOL_KEYS = {
    logging.DEBUG: ("debug", "🐛"),
    logging.INFO: ("info", "ℹ️"),
    logging.WARNING: ("warning", "⚠️"),
    logging.ERROR: ("error", "❌"),
    logging.CRITICAL: ("critical", "🔥"),
}


class SymbolFormatter(logging.Formatter):
    """
    A formatter that exposes a per-level symbol as ``%(symbol)s``.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        key, fallback = _LEVEL_SYMBOL_KEYS.get(record.levelno, ("", ""))
        record.symbol = self.symbols.get(key, fallback) if key else ""
        return super().format(record)


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_format_str: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures the root logger.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        If given, log records are also appended to this file. The parent
        directory is created when missing.
    log_to_console: bool
        Whether to log to stdout. Defaults to True.
    log_format_str: Optional[str]
        Custom format string; may contain a ``{log_prefix}`` placeholder.
    log_prefix: Optional[str]
        Optional prefix placed in front of each message.
    symbols: Optional[Dict[str, str]]
        Symbols used by the SymbolFormatter.

    Returns:
    None
    """
    handlers: List[logging.Handler] = []
    if log_file:
        try:
            log_file_path = Path(log_file).expanduser()
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file_path, mode="a"))
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=sys.stderr,
            )

    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if not handlers:  # pragma: no cover
        handlers.append(logging.StreamHandler(sys.stdout))

    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    template = log_format_str or SIMPLE_LOG_FORMAT
    if "{log_prefix}" in template:
        final_format_str = template.format(log_prefix=actual_prefix)
    else:
        final_format_str = actual_prefix + template

    formatter = SymbolFormatter(
        fmt=final_format_str,
        datefmt="%H:%M:%S",
        symbols=symbols,
    )

    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. Format: '{final_format_str}'"
    )
