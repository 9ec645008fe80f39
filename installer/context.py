"""
Collaborators shared by the configurator components during one run.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from common.macos.brew_manager import BrewManager
from common.system_utils import Notifier
from settings.cli_handler import (
    cli_prompt_for_value,
    cli_prompt_yes_no,
    cli_wait_for_enter,
)


@dataclass
class SetupContext:
    brew: Any = None
    notifier: Any = None
    http: Optional[requests.Session] = None
    prompt_value: Callable[..., str] = cli_prompt_for_value
    prompt_yes_no: Callable[..., bool] = cli_prompt_yes_no
    wait_for_enter: Callable[..., str] = cli_wait_for_enter
    sleep: Callable[[float], None] = time.sleep


def build_setup_context(app_settings, logger=None) -> SetupContext:
    """Create a context wired to the real command-line collaborators."""
    return SetupContext(
        brew=BrewManager(logger),
        notifier=Notifier(app_settings),
        http=requests.Session(),
    )
