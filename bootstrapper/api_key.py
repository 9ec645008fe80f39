# bootstrapper/api_key.py
# -*- coding: utf-8 -*-
"""
Reads the local Syncthing daemon's REST API key from its config.xml.

The XML-aware parse is tried first; a plain-text pattern match is the
fallback for files the XML parser rejects.
"""

import logging
import re
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Optional

from common.command_utils import get_symbols, log_setup
from common.retry_utils import PollTimeoutError, retry
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)

APIKEY_PATTERN = re.compile(r"<apikey>([^<]*)</apikey>")


class ApiKeyNotFoundError(RuntimeError):
    """The daemon configuration exists but holds no usable API key."""


def extract_api_key_xml(config_path: Path) -> Optional[str]:
    """Return the text of configuration/gui/apikey, or None."""
    try:
        root = ET.parse(config_path).getroot()
    except (ET.ParseError, OSError):
        return None
    element = root.find("gui/apikey")
    if element is None or not element.text:
        return None
    return element.text.strip() or None


def extract_api_key_text(config_path: Path) -> Optional[str]:
    """Return the first <apikey>...</apikey> value found by pattern match, or None."""
    try:
        content = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    match = APIKEY_PATTERN.search(content)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_api_key(config_path: Path) -> Optional[str]:
    return extract_api_key_xml(config_path) or extract_api_key_text(config_path)


def wait_for_api_key(
    app_settings: AppSettings,
    sleep: Callable[[float], None] = time.sleep,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Poll the daemon's config file until an API key can be read from it.

    The file may exist before the daemon has finished writing it, so a
    missing key is retried like a missing file.

    Args:
        app_settings: Provides the config path and the poll bounds.
        sleep: Sleep function, injectable for tests.
        current_logger: Optional logger.

    Returns:
        The API key.

    Raises:
        PollTimeoutError: The config file never appeared.
        ApiKeyNotFoundError: The config file appeared but never held a key.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    st = app_settings.syncthing
    config_path = Path(st.config_path).expanduser()

    log_setup(
        f"{symbols.get('info', 'ℹ️')} Waiting for Syncthing to initialize...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        api_key = retry(
            lambda: extract_api_key(config_path) if config_path.is_file() else None,
            interval=st.config_poll_interval,
            max_attempts=st.config_poll_attempts,
            description="Syncthing API key",
            sleep=sleep,
            current_logger=logger_to_use,
        )
    except PollTimeoutError:
        if config_path.is_file():
            raise ApiKeyNotFoundError(
                f"Could not extract Syncthing API key from {config_path}"
            ) from None
        log_setup(
            f"{symbols.get('error', '❌')} Syncthing config not found at {config_path}. "
            f"Try opening {st.api_url} manually.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise

    log_setup(
        f"{symbols.get('success', '✅')} Syncthing API key found.",
        "success",
        logger_to_use,
        app_settings,
    )
    return api_key
