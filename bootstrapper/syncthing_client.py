# bootstrapper/syncthing_client.py
# -*- coding: utf-8 -*-
"""
Thin client for the local Syncthing REST API.

Only the endpoints the bootstrapper needs are wrapped: system status (for
this device's ID), the device and folder configuration collections, and the
per-folder database status used for convergence polling.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from common.retry_utils import retry
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class SyncthingAPIError(Exception):
    """A REST call failed or the daemon answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SyncthingClient:
    """Session-backed access to one Syncthing daemon, authenticated by API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or module_logger
        self.session = session or requests.Session()
        self.session.headers.update({"X-API-Key": api_key})

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = self.session.get(
                self._url(path), params=params, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as http_err:
            raise SyncthingAPIError(
                f"GET {path} failed: {http_err}",
                status_code=http_err.response.status_code
                if http_err.response is not None
                else None,
            ) from http_err
        except requests.exceptions.RequestException as req_err:
            raise SyncthingAPIError(f"GET {path} failed: {req_err}") from req_err
        except ValueError as json_err:
            raise SyncthingAPIError(
                f"GET {path} returned invalid JSON: {json_err}"
            ) from json_err

    def _post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        try:
            response = self.session.post(
                self._url(path), json=payload, timeout=self.timeout
            )
        except requests.exceptions.RequestException as req_err:
            raise SyncthingAPIError(f"POST {path} failed: {req_err}") from req_err

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text.strip()

        if isinstance(body, dict) and body.get("error"):
            raise SyncthingAPIError(
                f"POST {path} rejected: {body['error']}",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise SyncthingAPIError(
                f"POST {path} failed with HTTP {response.status_code}: {body or response.reason}",
                status_code=response.status_code,
            )
        return body

    def get_my_id(self) -> Optional[str]:
        """This device's ID from /rest/system/status, or None while the API is not up."""
        try:
            status = self._get_json("/rest/system/status")
        except SyncthingAPIError as e:
            self.logger.debug(f"Syncthing API not ready: {e}")
            return None
        if not isinstance(status, dict):
            return None
        return status.get("myID") or None

    def list_devices(self) -> List[Dict[str, Any]]:
        return self._get_list("/rest/config/devices")

    def add_device(self, payload: Dict[str, Any]) -> Any:
        return self._post_json("/rest/config/devices", payload)

    def list_folders(self) -> List[Dict[str, Any]]:
        return self._get_list("/rest/config/folders")

    def add_folder(self, payload: Dict[str, Any]) -> Any:
        return self._post_json("/rest/config/folders", payload)

    def _get_list(self, path: str) -> List[Dict[str, Any]]:
        data = self._get_json(path)
        if not isinstance(data, list):
            raise SyncthingAPIError(f"GET {path} did not return a list")
        return data

    def get_folder_status(self, folder_id: str) -> Optional[Dict[str, Any]]:
        """
        Database status of a folder.

        Returns:
            The parsed status object, or None when the daemon is unreachable
            or the body is not a JSON object (e.g. the folder is not shared yet).
        """
        try:
            status = self._get_json("/rest/db/status", params={"folder": folder_id})
        except SyncthingAPIError as e:
            self.logger.debug(f"Folder status for '{folder_id}' unavailable: {e}")
            return None
        return status if isinstance(status, dict) else None

    def ensure_device_present(
        self,
        device_id: str,
        name: str,
        introducer: bool = True,
        auto_accept_folders: bool = True,
    ) -> bool:
        """
        Register a remote device unless one with the same ID is configured.

        Returns:
            True if a creation call was issued, False if the device already existed.

        Raises:
            SyncthingAPIError: Listing or creating the device failed.
        """
        if any(d.get("deviceID") == device_id for d in self.list_devices()):
            self.logger.info("Hub device already configured, skipping...")
            return False

        self.logger.info(f"Adding device '{name}' ({device_id})...")
        self.add_device(
            {
                "deviceID": device_id,
                "name": name,
                "introducer": introducer,
                "autoAcceptFolders": auto_accept_folders,
            }
        )
        return True

    def ensure_folder_present(
        self,
        folder_id: str,
        label: str,
        path: Union[str, Path],
        device_id: str,
        folder_type: str = "sendreceive",
    ) -> bool:
        """
        Register a shared folder with `device_id` unless the folder ID is configured.

        Returns:
            True if a creation call was issued, False if the folder already existed.

        Raises:
            SyncthingAPIError: Listing or creating the folder failed.
        """
        if any(f.get("id") == folder_id for f in self.list_folders()):
            self.logger.info(f"Folder '{folder_id}' already configured, skipping...")
            return False

        self.logger.info(f"Adding folder '{folder_id}' at {path}...")
        self.add_folder(
            {
                "id": folder_id,
                "label": label,
                "path": str(path),
                "devices": [{"deviceID": device_id}],
                "type": folder_type,
            }
        )
        return True


def wait_until_ready(
    client: SyncthingClient,
    app_settings: AppSettings,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Poll the daemon until it reports this device's ID.

    Raises:
        PollTimeoutError: The API never answered within the configured attempts.
    """
    st = app_settings.syncthing
    return retry(
        client.get_my_id,
        interval=st.api_poll_interval,
        max_attempts=st.api_poll_attempts,
        description="Syncthing REST API",
        sleep=sleep,
        current_logger=client.logger,
    )
