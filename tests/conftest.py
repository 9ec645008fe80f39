# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from settings.config_models import AppSettings

VALID_HUB_ID = "ABCDEFG-HIJKLMN-OPQRSTU-VWXYZ01-2345678-9ABCDEF-GHIJKLM-NOPQRST"


@pytest.fixture
def app_settings(tmp_path):
    """AppSettings rooted in a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return AppSettings(
        home_dir=home,
        syncthing={
            "folder_path": str(tmp_path / "memex"),
            "config_path": str(tmp_path / "syncthing" / "config.xml"),
        },
        hub={"device_id": None},
    )


@pytest.fixture
def mock_logger():
    """Mock logger instance."""
    return MagicMock(spec=logging.Logger)
