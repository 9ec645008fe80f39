# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: backing up files and placing configuration
files from the synced folder into the home directory.
"""

import filecmp
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional

from settings.config_models import AppSettings, LinkMode

from .command_utils import get_symbols, log_setup

module_logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


class LinkResult(str, Enum):
    """Outcome of placing one configuration file."""

    LINKED = "LINKED"
    COPIED = "COPIED"
    UNCHANGED = "UNCHANGED"
    MISSING_SOURCE = "MISSING_SOURCE"
    FAILED = "FAILED"


def backup_file(
    file_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Move an existing file out of the way by renaming it with a `.bak` suffix.

    An earlier backup with the same name is replaced.

    Parameters:
        file_path (Path): The file to back up.
        app_settings (Optional[AppSettings]): Settings providing log symbols.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        Optional[Path]: The backup path, or None if there was nothing to back up.

    Raises:
        OSError: If the rename fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not file_path.exists() or file_path.is_symlink():
        log_setup(
            f"{symbols.get('info', 'ℹ️')} {file_path} is not a regular file. No backup needed.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return None

    backup_path = file_path.with_name(file_path.name + BACKUP_SUFFIX)
    file_path.replace(backup_path)
    log_setup(
        f"{symbols.get('success', '✅')} Backed up {file_path} to {backup_path}",
        "success",
        logger_to_use,
        app_settings,
    )
    return backup_path


def is_symlink_to(destination: Path, source: Path) -> bool:
    """True if `destination` is a symlink whose target is exactly `source`."""
    return destination.is_symlink() and os.readlink(destination) == str(source)


def _clear_destination(
    destination: Path,
    app_settings: Optional[AppSettings],
    logger_to_use: logging.Logger,
) -> None:
    if destination.is_symlink():
        destination.unlink()
    elif destination.exists():
        backup_file(destination, app_settings, logger_to_use)


def link_file(
    source: Path,
    destination: Path,
    mode: LinkMode,
    app_settings: Optional[AppSettings],
    chmod: Optional[int] = None,
    missing_hint: str = "",
    current_logger: Optional[logging.Logger] = None,
) -> LinkResult:
    """
    Place `source` at `destination` by symlink or copy.

    - A missing source is a soft failure: a warning is logged.
    - A destination that already is a symlink to the source (symlink mode) or
      an identical copy (copy mode) is left alone.
    - A pre-existing regular file at the destination is renamed to `<name>.bak`
      first; a symlink pointing elsewhere is replaced.

    Parameters:
        source (Path): File inside the synced folder.
        destination (Path): Target location under the home directory.
        mode (LinkMode): SYMLINK or COPY.
        app_settings (Optional[AppSettings]): Settings providing log symbols.
        chmod (Optional[int]): Mode applied to the source (symlink) or to the copy.
        missing_hint (str): Extra text for the missing-source warning.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        LinkResult: What happened. Errors are logged and reported as FAILED.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not source.is_file():
        hint = f" ({missing_hint})" if missing_hint else ""
        log_setup(
            f"{symbols.get('warning', '!')} No {source.name} at {source}{hint}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return LinkResult.MISSING_SOURCE

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)

        if mode == LinkMode.SYMLINK:
            if chmod is not None:
                source.chmod(chmod)
            if is_symlink_to(destination, source):
                log_setup(
                    f"{symbols.get('info', 'ℹ️')} {destination} already links to {source}",
                    "info",
                    logger_to_use,
                    app_settings,
                )
                return LinkResult.UNCHANGED
            _clear_destination(destination, app_settings, logger_to_use)
            destination.symlink_to(source)
            log_setup(
                f"{symbols.get('link', '🔗')} Symlinked {destination} -> {source}",
                "success",
                logger_to_use,
                app_settings,
            )
            return LinkResult.LINKED

        if (
            destination.is_file()
            and not destination.is_symlink()
            and filecmp.cmp(source, destination, shallow=False)
        ):
            if chmod is not None:
                destination.chmod(chmod)
            log_setup(
                f"{symbols.get('info', 'ℹ️')} {destination} is already up to date",
                "info",
                logger_to_use,
                app_settings,
            )
            return LinkResult.UNCHANGED
        _clear_destination(destination, app_settings, logger_to_use)
        shutil.copy2(source, destination)
        if chmod is not None:
            destination.chmod(chmod)
        log_setup(
            f"{symbols.get('success', '✅')} Copied {source} to {destination}",
            "success",
            logger_to_use,
            app_settings,
        )
        return LinkResult.COPIED
    except OSError as e:
        log_setup(
            f"{symbols.get('error', '❌')} Failed to place {source} at {destination}: {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        return LinkResult.FAILED


def ensure_private_directory(directory_path: Path, mode: int = 0o700) -> None:
    """Create `directory_path` if needed and apply `mode`."""
    directory_path.mkdir(parents=True, exist_ok=True)
    directory_path.chmod(mode)
