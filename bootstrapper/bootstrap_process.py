# bootstrapper/bootstrap_process.py
# -*- coding: utf-8 -*-
"""
This module defines the orchestration process that takes a fresh Mac to a
synced configuration folder. It leverages the centralized orchestrator to
execute a sequence of tasks, each responsible for one step: prerequisites,
starting the Syncthing daemon, reading its API key, registering the hub
device and the shared folder, and waiting for the first sync to converge.

The run moves through a fixed sequence of states, recorded on the context:

    daemon-starting -> key-extracted -> daemon-ready -> hub-resolved ->
    hub-registered -> folder-registered -> syncing -> converged

Any fatal failure halts the run with exit status 1. Supplying no hub device
ID ends the run early without an error.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from bootstrapper.api_key import wait_for_api_key
from bootstrapper.convergence import wait_for_convergence
from bootstrapper.hub_resolver import OnePasswordCli, resolve_hub_id
from bootstrapper.prerequisites import (
    ensure_homebrew,
    ensure_xcode_cli_tools,
    install_syncthing,
    setup_one_password,
    start_syncthing,
)
from bootstrapper.syncthing_client import SyncthingClient, wait_until_ready
from common.command_utils import get_symbols, log_setup
from common.macos.brew_manager import BrewManager
from common.orchestrator import Orchestrator, StopOrchestration
from common.system_utils import Notifier, SudoKeepAlive, open_target
from settings.cli_handler import (
    cli_prompt_for_value,
    cli_prompt_yes_no,
    cli_wait_for_enter,
)
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class BootstrapState(str, Enum):
    """Progress of a bootstrap run. States only ever move forward."""

    NOT_STARTED = "not-started"
    DAEMON_STARTING = "daemon-starting"
    KEY_EXTRACTED = "key-extracted"
    DAEMON_READY = "daemon-ready"
    HUB_RESOLVED = "hub-resolved"
    HUB_REGISTERED = "hub-registered"
    FOLDER_REGISTERED = "folder-registered"
    SYNCING = "syncing"
    CONVERGED = "converged"


@dataclass
class BootstrapContext:
    """Collaborators and state shared by the bootstrap tasks."""

    brew: Any = None
    privileges: Any = None
    notifier: Any = None
    op_cli: Any = None
    prompt_value: Callable[..., str] = cli_prompt_for_value
    prompt_yes_no: Callable[..., bool] = cli_prompt_yes_no
    wait_for_enter: Callable[..., str] = cli_wait_for_enter
    client_factory: Callable[..., Any] = SyncthingClient
    sleep: Callable[[float], None] = time.sleep

    api_key: Optional[str] = field(default=None, repr=False)
    client: Any = None
    my_id: Optional[str] = None
    hub_id: Optional[str] = None
    op_available: bool = False
    folder_path: Optional[Path] = None
    global_files: int = 0
    state: BootstrapState = BootstrapState.NOT_STARTED

    def advance(self, new_state: BootstrapState) -> None:
        order = list(BootstrapState)
        if order.index(new_state) < order.index(self.state):
            raise ValueError(
                f"Cannot move bootstrap state back from {self.state.value} to {new_state.value}"
            )
        self.state = new_state


def build_bootstrap_context(
    app_settings: AppSettings, logger: Optional[logging.Logger] = None
) -> BootstrapContext:
    """Create a context wired to the real command-line collaborators."""
    return BootstrapContext(
        brew=BrewManager(logger),
        privileges=SudoKeepAlive(app_settings, logger),
        notifier=Notifier(app_settings),
        op_cli=OnePasswordCli(app_settings, logger),
    )


def acquire_privileges(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    context.privileges.start()


def launch_daemon(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    start_syncthing(context, app_settings)
    context.advance(BootstrapState.DAEMON_STARTING)


def extract_daemon_api_key(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    context.api_key = wait_for_api_key(app_settings, sleep=context.sleep)
    context.advance(BootstrapState.KEY_EXTRACTED)


def connect_to_daemon(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    """Waits for the REST API and reports this device's ID."""
    symbols = get_symbols(app_settings)
    context.client = context.client_factory(
        app_settings.syncthing.api_url,
        context.api_key,
        timeout=app_settings.syncthing.request_timeout,
    )
    context.my_id = wait_until_ready(context.client, app_settings, sleep=context.sleep)
    context.advance(BootstrapState.DAEMON_READY)
    log_setup(
        f"{symbols.get('info', 'ℹ️')} This device's ID:\n{context.my_id}",
        "info",
        module_logger,
        app_settings,
    )


def resolve_hub(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    """
    Determines the hub device ID. Without one the run ends early and the
    operator is pointed at the web UI.
    """
    hub_id = resolve_hub_id(
        app_settings,
        op_cli=context.op_cli,
        op_available=context.op_available,
        prompt=context.prompt_value,
    )
    if not hub_id:
        log_setup(
            f"No hub ID provided. Configure Syncthing manually at {app_settings.syncthing.api_url}",
            "warning",
            module_logger,
            app_settings,
        )
        raise StopOrchestration("no hub device ID supplied")
    context.hub_id = hub_id
    context.advance(BootstrapState.HUB_RESOLVED)


def register_hub_device(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    symbols = get_symbols(app_settings)
    hub = app_settings.hub
    created = context.client.ensure_device_present(
        context.hub_id,
        hub.device_name,
        introducer=hub.introducer,
        auto_accept_folders=hub.auto_accept_folders,
    )
    if created:
        log_setup(
            f"{symbols.get('success', '✅')} Hub device added.",
            "success",
            module_logger,
            app_settings,
        )
    context.advance(BootstrapState.HUB_REGISTERED)


def register_sync_folder(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    """Creates the local folder and shares it with the hub under the hub's folder ID."""
    symbols = get_symbols(app_settings)
    st = app_settings.syncthing
    folder_path = Path(st.folder_path).expanduser()
    folder_path.mkdir(parents=True, exist_ok=True)
    context.folder_path = folder_path

    created = context.client.ensure_folder_present(
        st.folder_id,
        st.folder_label,
        folder_path,
        context.hub_id,
        folder_type=st.folder_type,
    )
    if created:
        log_setup(
            f"{symbols.get('success', '✅')} Folder configured at: {folder_path}",
            "success",
            module_logger,
            app_settings,
        )
    context.advance(BootstrapState.FOLDER_REGISTERED)


def announce_device(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    """Prints how to admit this device on the hub and opens the web UI."""
    log_setup(
        "===========================================\n"
        "BOOTSTRAP COMPLETE\n"
        "===========================================\n"
        "Next step - FROM ANOTHER MAC, run:\n\n"
        f"  ssh {app_settings.hub.ssh_host} '~/bin/syncthing-add-device.sh {context.my_id}'\n\n"
        "Then wait for sync. Opening Syncthing UI...",
        "info",
        module_logger,
        app_settings,
    )
    open_target(app_settings.syncthing.api_url, app_settings, current_logger=module_logger)
    context.advance(BootstrapState.SYNCING)


def wait_for_sync(context: BootstrapContext, app_settings: AppSettings, **kwargs) -> None:
    context.global_files = wait_for_convergence(
        context.client,
        app_settings,
        notifier=context.notifier,
        sleep=context.sleep,
    )
    context.advance(BootstrapState.CONVERGED)
    log_setup(
        "Now run:\n  mac-setup",
        "info",
        module_logger,
        app_settings,
    )


def run_bootstrap_orchestration(
    app_settings: AppSettings,
    logger: Optional[logging.Logger] = None,
    context: Optional[BootstrapContext] = None,
) -> Tuple[bool, BootstrapContext]:
    """
    Configures and executes the bootstrap orchestration.

    Args:
        app_settings: The resolved application settings.
        logger: An optional logger instance for the orchestrator.
        context: Pre-built context; a real one is created when omitted.

    Returns:
        A tuple containing:
        - success (bool): True if every task ran, False if the run ended
                          early because no hub device ID was supplied.
        - context (BootstrapContext): The final state of the run.
    """
    effective_logger = logger or module_logger
    symbols = get_symbols(app_settings)
    if context is None:
        context = build_bootstrap_context(app_settings, effective_logger)

    effective_logger.info(f"{symbols.get('rocket', '🚀')} === Mac Bootstrap ===")

    orchestrator = Orchestrator(app_settings, effective_logger, context=context)
    orchestrator.add_task("Administrator Access", acquire_privileges)
    orchestrator.add_task("Xcode Command Line Tools", ensure_xcode_cli_tools)
    orchestrator.add_task("Homebrew", ensure_homebrew)
    orchestrator.add_task("1Password", setup_one_password, fatal=False)
    orchestrator.add_task("Install Syncthing", install_syncthing)
    orchestrator.add_task("Start Syncthing", launch_daemon)
    orchestrator.add_task("Syncthing API Key", extract_daemon_api_key)
    orchestrator.add_task("Syncthing API", connect_to_daemon)
    orchestrator.add_task("Hub Device ID", resolve_hub)
    orchestrator.add_task("Register Hub Device", register_hub_device)
    orchestrator.add_task("Register Sync Folder", register_sync_folder)
    orchestrator.add_task("Announce Device", announce_device)
    orchestrator.add_task("Wait For Sync", wait_for_sync)

    try:
        success = orchestrator.run()
    finally:
        if context.privileges is not None:
            context.privileges.stop()
    return success, context
