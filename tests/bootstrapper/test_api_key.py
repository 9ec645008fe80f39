# tests/bootstrapper/test_api_key.py
# -*- coding: utf-8 -*-
"""
Tests for reading the Syncthing API key from config.xml.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bootstrapper.api_key import (
    ApiKeyNotFoundError,
    extract_api_key,
    extract_api_key_text,
    extract_api_key_xml,
    wait_for_api_key,
)
from common.retry_utils import PollTimeoutError

CONFIG_XML = """<configuration version="37">
    <folder id="default" label="Default Folder" path="/Users/me/Sync"></folder>
    <gui enabled="true" tls="false">
        <address>127.0.0.1:8384</address>
        <apikey>ABC123</apikey>
        <theme>default</theme>
    </gui>
</configuration>
"""


@pytest.fixture
def config_file(app_settings):
    path = Path(app_settings.syncthing.config_path)
    path.parent.mkdir(parents=True)
    return path


def test_xml_extraction(config_file):
    config_file.write_text(CONFIG_XML)
    assert extract_api_key_xml(config_file) == "ABC123"
    assert extract_api_key_text(config_file) == "ABC123"
    assert extract_api_key(config_file) == "ABC123"


def test_text_fallback_on_malformed_xml(config_file):
    # Truncated mid-write: the XML parser rejects it.
    config_file.write_text("<configuration><gui><apikey>ABC123</apikey></gui>")

    assert extract_api_key_xml(config_file) is None
    assert extract_api_key_text(config_file) == "ABC123"
    assert extract_api_key(config_file) == "ABC123"


def test_empty_key(config_file):
    config_file.write_text("<configuration><gui><apikey></apikey></gui></configuration>")
    assert extract_api_key(config_file) is None


def test_missing_file(tmp_path):
    assert extract_api_key(tmp_path / "nope.xml") is None


def test_wait_for_api_key_present(app_settings, config_file):
    config_file.write_text(CONFIG_XML)
    sleep = MagicMock()

    assert wait_for_api_key(app_settings, sleep=sleep) == "ABC123"
    sleep.assert_not_called()


def test_wait_for_api_key_times_out(app_settings, mock_logger):
    app_settings.syncthing.config_poll_attempts = 3
    sleep = MagicMock()

    with pytest.raises(PollTimeoutError):
        wait_for_api_key(app_settings, sleep=sleep, current_logger=mock_logger)

    assert sleep.call_count == 2
    error_message = mock_logger.error.call_args[0][0]
    assert app_settings.syncthing.api_url in error_message


def test_wait_for_api_key_without_key(app_settings, config_file, mock_logger):
    app_settings.syncthing.config_poll_attempts = 2
    config_file.write_text("<configuration><gui></gui></configuration>")
    sleep = MagicMock()

    with pytest.raises(ApiKeyNotFoundError):
        wait_for_api_key(app_settings, sleep=sleep, current_logger=mock_logger)

    assert sleep.call_count == 1
    mock_logger.error.assert_not_called()


def test_wait_for_api_key_while_config_is_written(app_settings, config_file):
    # The daemon has created the file but not yet written the key.
    config_file.write_text("<configuration><gui>")

    def finish_writing(_interval):
        config_file.write_text(CONFIG_XML)

    sleep = MagicMock(side_effect=finish_writing)

    assert wait_for_api_key(app_settings, sleep=sleep) == "ABC123"
    assert sleep.call_count == 1
