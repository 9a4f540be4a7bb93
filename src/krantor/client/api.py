"""HTTP client for the put.io API.

This module provides:
- PutioClient: HTTP client for the remote download service
- Torrent file upload into a remote folder
- Magnet link submission as a transfer
"""

from __future__ import annotations

import logging
from typing import IO, Protocol

import httpx

from krantor.core.config import WatchConfig
from krantor.core.types import Transfer

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Authentication failed."""


class RemoteTimeoutError(APIError):
    """Request did not complete before its timeout."""


class TransferClient(Protocol):
    """Capability needed by the intake core."""

    def upload(
        self,
        file: IO[bytes],
        filename: str,
        parent_id: int,
        timeout: float | None = None,
    ) -> Transfer: ...

    def add_transfer(
        self,
        url: str,
        parent_id: int,
        callback_url: str = "",
        timeout: float | None = None,
    ) -> Transfer: ...


class PutioClient:
    """HTTP client for the put.io v2 API.

    A single instance is shared by every in-flight intake; the underlying
    httpx connection pool is thread-safe.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.put.io/v2",
        upload_url: str = "https://upload.put.io/v2",
        timeout: float = 5.0,
    ) -> None:
        """Initialize the client.

        Args:
            token: OAuth access token.
            api_url: Base URL of the API.
            upload_url: Base URL of the upload endpoint.
            timeout: Default request timeout in seconds.
        """
        self._api_url = api_url.rstrip("/")
        self._upload_url = upload_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Authorization": f"Bearer {token}"},
        )

    @classmethod
    def from_config(cls, config: WatchConfig) -> PutioClient:
        """Create a client from the runtime configuration."""
        return cls(
            token=config.api_token,
            api_url=config.api_url,
            upload_url=config.upload_url,
            timeout=config.timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> PutioClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Handle API response and raise appropriate exceptions."""
        if response.status_code == 401:
            raise AuthenticationError("Invalid or expired token", 401)
        if response.status_code >= 400:
            raise APIError(_error_detail(response), response.status_code)
        return response

    def _post(
        self,
        url: str,
        timeout: float | None,
        **kwargs: object,
    ) -> httpx.Response:
        try:
            response = self._client.post(
                url,
                timeout=self._timeout if timeout is None else timeout,
                **kwargs,  # type: ignore[arg-type]
            )
        except httpx.TimeoutException as e:
            raise RemoteTimeoutError(f"Request to {url} timed out") from e
        except httpx.RequestError as e:
            raise APIError(f"Request to {url} failed: {e}") from e
        return self._handle_response(response)

    def upload(
        self,
        file: IO[bytes],
        filename: str,
        parent_id: int,
        timeout: float | None = None,
    ) -> Transfer:
        """Upload a torrent file into a remote folder.

        Args:
            file: Open binary file to upload.
            filename: Name of the file on the remote side.
            parent_id: Remote destination folder id.
            timeout: Optional per-call timeout in seconds.

        Returns:
            The transfer created from the torrent file.
        """
        logger.debug(f"Uploading {filename} to folder {parent_id}")
        response = self._post(
            f"{self._upload_url}/files/upload",
            timeout,
            files={"file": (filename, file, "application/x-bittorrent")},
            data={"filename": filename, "parent_id": str(parent_id)},
        )
        data = response.json()
        # Torrent uploads yield a transfer; other uploads yield a file
        payload = data.get("transfer") or data.get("file") or {}
        return Transfer.from_dict(payload)

    def add_transfer(
        self,
        url: str,
        parent_id: int,
        callback_url: str = "",
        timeout: float | None = None,
    ) -> Transfer:
        """Submit a link or magnet URI as a new transfer.

        Args:
            url: Magnet URI or download link.
            parent_id: Remote folder the transfer is saved into.
            callback_url: Optional URL notified when the transfer completes.
            timeout: Optional per-call timeout in seconds.

        Returns:
            The created transfer.
        """
        logger.debug(f"Adding transfer to folder {parent_id}")
        response = self._post(
            f"{self._api_url}/transfers/add",
            timeout,
            data={
                "url": url,
                "save_parent_id": str(parent_id),
                "callback_url": callback_url,
            },
        )
        return Transfer.from_dict(response.json().get("transfer") or {})


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(
            data.get("error_message")
            or data.get("error_type")
            or data.get("detail")
            or f"HTTP {response.status_code}"
        )
    return f"HTTP {response.status_code}"
