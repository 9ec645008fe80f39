# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Helpers for running external tools and logging what they did.

Commands are lists of arguments, except shell pipelines (installer
one-liners like `curl ... | sh`), which are passed as a single string with
shell=True. Captured output is logged at DEBUG unless the caller marks it
as sensitive with log_output=False.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from settings.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

Command = Union[List[str], str]

_LOG_METHODS = {
    "debug": "debug",
    "info": "info",
    "success": "info",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


def log_setup(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Log a provisioning message at the named level.

    Args:
        message (str): Text to log, usually prefixed with one of the symbols.
        level (str): One of "debug", "info", "success", "warning", "error" or
            "critical". "success" is logged at INFO; unknown names fall back
            to INFO.
        current_logger (Optional[logging.Logger]): Logger to write to. The
            module logger is used when omitted.
        app_settings (Optional[AppSettings]): Accepted so every call site can
            pass its settings through; not consulted here.
        exc_info (bool): Attach the active exception's traceback.
    """
    effective_logger = current_logger if current_logger else module_logger
    method = getattr(effective_logger, _LOG_METHODS.get(level, "info"))
    method(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Return the settings' symbols, or the defaults when none are configured."""
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def _get_elevated_command_prefix() -> List[str]:
    """["sudo"] unless the process already runs as root."""
    return [] if os.geteuid() == 0 else ["sudo"]


def _describe(command: Command) -> str:
    if isinstance(command, str):
        return command
    return subprocess.list2cmdline(command)


def _log_streams(
    stdout: Optional[str],
    stderr: Optional[str],
    level: str,
    logger: logging.Logger,
    app_settings: Optional[AppSettings],
) -> None:
    for label, stream in (("stdout", stdout), ("stderr", stderr)):
        if stream and stream.strip():
            log_setup(f"   {label}: {stream.strip()}", level, logger, app_settings)


def run_command(
    command: Command,
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    log_output: bool = True,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Run an external command and log the invocation and its outcome.

    Args:
        command: Argument list, or a single string when shell is True.
        app_settings: Supplies the log symbols.
        check: Raise CalledProcessError on a non-zero exit status.
        shell: Run the string through /bin/sh. Required for pipelines.
        capture_output: Capture stdout/stderr as text. When False the child
            shares the terminal, which interactive tools need.
        log_output: Log captured output. Pass False when the output holds
            secrets (session tokens, revealed passwords).
        current_logger: Logger to use instead of the module logger.

    Returns:
        subprocess.CompletedProcess: The finished process.

    Raises:
        subprocess.CalledProcessError: check is True and the command failed.
        FileNotFoundError: The executable is not on PATH.
        TypeError: A string command was given without shell=True.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if isinstance(command, str) and not shell:
        raise TypeError("String commands require shell=True; pass a list instead.")
    description = _describe(command)

    log_setup(
        f"{symbols.get('gear', '⚙️')} Executing: {description}",
        "debug",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        log_setup(
            f"{symbols.get('error', '❌')} Command `{description}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if log_output:
            _log_streams(e.stdout, e.stderr, "error", effective_logger, app_settings)
        raise
    except FileNotFoundError as e:
        log_setup(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        if log_output:
            _log_streams(
                result.stdout, result.stderr, "debug", effective_logger, app_settings
            )
        else:
            log_setup(
                "   (output not logged)", "debug", effective_logger, app_settings
            )
    return result


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """Run `command` through sudo, or directly when already root."""
    return run_command(
        _get_elevated_command_prefix() + list(command),
        app_settings,
        check=check,
        capture_output=capture_output,
        current_logger=current_logger,
    )


def command_exists(command_name: str) -> bool:
    """True when `command_name` resolves on PATH."""
    return shutil.which(command_name) is not None


def command_succeeds(
    command: List[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Run a check command quietly and report whether it exited with status 0.

    A missing executable counts as failure.
    """
    if not command_exists(command[0]):
        return False
    try:
        result = run_command(
            command,
            app_settings,
            check=False,
            capture_output=True,
            current_logger=current_logger,
        )
    except FileNotFoundError:
        return False
    return result.returncode == 0
