# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level helpers for the macOS setup scripts.

This module holds the fire-and-forget side effects the scripts rely on:
keeping sudo credentials warm, playing a notification sound, keeping the
display awake, and opening apps or URLs.
"""

import logging
import platform
import subprocess
import threading
from typing import List, Optional

from common.command_utils import command_exists, log_setup, run_command
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)

SUDO_REFRESH_INTERVAL_SECONDS = 60


class SudoKeepAlive:
    """
    Asks for the administrator password once and keeps the sudo timestamp fresh.

    A daemon thread runs ``sudo -n true`` every minute until `stop` is called
    or the process exits.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        interval: float = SUDO_REFRESH_INTERVAL_SECONDS,
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Validate credentials (may prompt) and start the refresh thread."""
        log_setup(
            "Requesting administrator access (one-time password prompt)...",
            "info",
            self.logger,
            self.app_settings,
        )
        run_command(["sudo", "-v"], self.app_settings, current_logger=self.logger)
        self._thread = threading.Thread(
            target=self._refresh_loop, name="sudo-keepalive", daemon=True
        )
        self._thread.start()

    def _refresh_loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            subprocess.run(
                ["sudo", "-n", "true"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )

    def stop(self) -> None:
        self._stop_event.set()


class Notifier:
    """Plays the alert sound without waiting for it to finish."""

    def __init__(self, app_settings: AppSettings):
        self.sound = app_settings.notification_sound

    def notify(self) -> None:
        if not command_exists("afplay"):
            return
        try:
            subprocess.Popen(
                ["afplay", self.sound],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            module_logger.debug(f"Could not play notification sound: {e}")


class Caffeinate:
    """Prevents display sleep for the duration of a long setup run."""

    def __init__(self, seconds: int = 7200):
        self.seconds = seconds
        self._process: Optional[subprocess.Popen] = None

    def start(self) -> None:
        if not command_exists("caffeinate"):
            return
        self._process = subprocess.Popen(
            ["caffeinate", "-d", "-t", str(self.seconds)]
        )

    def stop(self) -> None:
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()
        self._process = None

    def __enter__(self) -> "Caffeinate":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()


def open_target(
    target: str,
    app_settings: AppSettings,
    application: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Open a URL, file or (with ``application=True``) an app by name via `open`.

    Returns:
        True if `open` succeeded, False otherwise. Never raises.
    """
    command: List[str] = ["open", "-a", target] if application else ["open", target]
    if not command_exists("open"):
        return False
    result = run_command(
        command,
        app_settings,
        check=False,
        capture_output=True,
        current_logger=current_logger,
    )
    return result.returncode == 0


def is_apple_silicon() -> bool:
    """True on arm64 Macs."""
    return platform.machine() == "arm64"
