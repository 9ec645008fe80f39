# bootstrapper/convergence.py
# -*- coding: utf-8 -*-
"""
Waits for the shared folder to finish its first sync from the hub.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from bootstrapper.syncthing_client import SyncthingClient
from common.command_utils import get_symbols, log_setup
from common.retry_utils import retry
from common.system_utils import Notifier
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _count(value: Any) -> Optional[int]:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def read_status_fields(
    status: Dict[str, Any],
) -> Tuple[str, Optional[int], Optional[int]]:
    """
    (state, needFiles, globalFiles) from a folder status payload.

    Missing fields read as "unknown", 0 and 0. A count that is present but
    not a number reads as None.
    """
    state = status.get("state") or "unknown"
    return state, _count(status.get("needFiles")), _count(status.get("globalFiles"))


def evaluate_folder_status(status: Optional[Dict[str, Any]]) -> Optional[int]:
    """
    Decide whether a folder has converged.

    A folder counts as converged only when it is idle, needs nothing, and the
    cluster reports at least one file. An empty hub folder therefore never
    converges.

    Returns:
        The global file count when converged, otherwise None.
    """
    if not status:
        return None
    state, need, global_files = read_status_fields(status)
    if need is None or global_files is None:
        return None
    if state == "idle" and need == 0 and global_files > 0:
        return global_files
    return None


def wait_for_convergence(
    client: SyncthingClient,
    app_settings: AppSettings,
    notifier: Optional[Notifier] = None,
    sleep: Callable[[float], None] = time.sleep,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """
    Poll the folder status until it converges.

    Unreachable daemons and non-JSON answers keep the poll going. Polling is
    unbounded unless `syncthing.convergence_max_attempts` is set.

    Returns:
        The number of files in the converged folder.

    Raises:
        PollTimeoutError: Only when a bound is configured and reached.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    st = app_settings.syncthing

    def poll_once() -> Optional[int]:
        status = client.get_folder_status(st.folder_id)
        if status is None:
            log_setup(
                f"{symbols.get('sync', '🔄')} Waiting for Syncthing API...",
                "info",
                logger_to_use,
                app_settings,
            )
            return None
        converged = evaluate_folder_status(status)
        if converged is None:
            state, need, _ = read_status_fields(status)
            need_text = "?" if need is None else need
            log_setup(
                f"{symbols.get('sync', '🔄')} Status: {state:<12} Need: {need_text:<6} (waiting for hub to share folder...)",
                "info",
                logger_to_use,
                app_settings,
            )
        return converged

    global_files = retry(
        poll_once,
        interval=st.convergence_poll_interval,
        max_attempts=st.convergence_max_attempts,
        description=f"folder '{st.folder_id}' to sync",
        sleep=sleep,
        current_logger=logger_to_use,
    )

    if notifier is not None:
        notifier.notify()
    log_setup(
        f"{symbols.get('success', '✅')} Sync complete! ({global_files} files)",
        "success",
        logger_to_use,
        app_settings,
    )
    return global_files
