"""
HTTP transport for Swift-compatible object storage.

Handles the auth handshake, metadata probes, container checks and object
uploads. Every response is turned into a StorageResponse by parse_response
and handled in that typed form everywhere else.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import requests

from supload.exceptions import (
    AuthenticationError,
    PreconditionError,
    SourceReadError,
    TransportUnreachable,
)
from supload.models import Session, StorageResponse

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URL = "https://selcdn.ru/auth/v1.0/"

_SAFE_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.*()/-"
)


def url_encode(value: str) -> str:
    """Percent-encode an object path.

    Letters, digits and ``. * ( ) / -`` pass through, spaces become ``%20``,
    CR and LF are dropped and every other UTF-8 byte is written as ``%xx``.
    """
    encoded = []
    for byte in value.encode("utf-8"):
        char = chr(byte)
        if char in "\r\n":
            continue
        if char in _SAFE_CHARS:
            encoded.append(char)
        else:
            encoded.append(f"%{byte:02x}")
    return "".join(encoded)


def object_url(session: Session, object_name: str) -> str:
    """Full URL of an object under the session's storage account."""
    return session.storage_url + url_encode(object_name)


def container_name(destination: str) -> str:
    """Top-level container segment of a destination path."""
    return destination.lstrip("/").split("/", 1)[0]


def parse_response(response: requests.Response) -> StorageResponse:
    """Convert a requests response into a StorageResponse."""
    headers = response.headers
    etag = headers.get("ETag")
    if etag:
        etag = etag.strip().strip('"').lower() or None

    return StorageResponse(
        status_code=response.status_code,
        reason=response.reason or "",
        etag=etag,
        storage_url=headers.get("X-Storage-Url") or None,
        auth_token=headers.get("X-Auth-Token") or None,
        headers=dict(headers),
        body=response.text or "",
    )


class StorageClient:
    """Blocking client for the storage API, shared by every task in a run."""

    def __init__(self, timeout: float = 60, verify_ssl: bool = True):
        """Initialize the client.

        Args:
            timeout: Per-request timeout in seconds
            verify_ssl: Verify TLS certificates
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "supload"})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "StorageClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data=None,
    ) -> StorageResponse:
        """Send one request and parse the response.

        Raises:
            TransportUnreachable: On connection, TLS or timeout failures
        """
        logger.debug("%s %s", method, url)
        try:
            with self.session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=self.timeout,
                verify=self.verify_ssl,
            ) as response:
                parsed = parse_response(response)
        except requests.exceptions.RequestException as e:
            raise TransportUnreachable(f"Request failed: {method} {url}: {e}") from e

        logger.debug("%s %s -> %s", method, url, parsed.status_code)
        return parsed

    def authenticate(self, auth_url: str, user: str, key: str) -> Session:
        """
        Exchange user credentials for a storage URL and token.

        Raises:
            AuthenticationError: If the endpoint is unreachable or either header is missing
        """
        try:
            response = self._request(
                "GET",
                auth_url,
                headers={"X-Auth-User": user, "X-Auth-Key": key},
            )
        except TransportUnreachable as e:
            raise AuthenticationError(f"Auth failed: {e.message}") from e

        if not response.storage_url or not response.auth_token:
            raise AuthenticationError("Auth failed", details={"response": response.raw()})

        logger.info("Authenticated as %s, storage url %s", user, response.storage_url)
        return Session(storage_url=response.storage_url, auth_token=response.auth_token)

    def probe(self, session: Session, url: str) -> Optional[str]:
        """
        Fetch an object's stored digest without downloading its body.

        Returns:
            The lowercase ETag, or None when the object is missing or has no ETag

        Raises:
            TransportUnreachable: If the storage endpoint cannot be reached
        """
        response = self._request("HEAD", url, headers={"X-Auth-Token": session.auth_token})
        if not 200 <= response.status_code < 300:
            return None
        return response.etag

    def check_container(self, session: Session, destination: str) -> None:
        """
        Confirm the container holding ``destination`` exists.

        Raises:
            PreconditionError: If the container is missing or cannot be checked
        """
        container = container_name(destination)
        if not container:
            raise PreconditionError("Container not exist", details={"destination": destination})

        url = object_url(session, container)
        try:
            response = self._request("HEAD", url, headers={"X-Auth-Token": session.auth_token})
        except TransportUnreachable as e:
            raise PreconditionError(f"Container not exist: {e.message}", details={"url": url}) from e

        if response.status_code != 204:
            raise PreconditionError(
                "Container not exist",
                details={"url": url, "status": str(response.status_code)},
            )

    def put_object(
        self,
        session: Session,
        url: str,
        file_path: Path,
        content_type: str,
        etag: Optional[str] = None,
    ) -> StorageResponse:
        """
        Upload a file's bytes to ``url``.

        When ``etag`` is given it is sent as the expected MD5 so the server
        can reject a corrupted body.

        Raises:
            TransportUnreachable: If the storage endpoint cannot be reached
            SourceReadError: If the file cannot be opened or read
        """
        headers = {
            "X-Auth-Token": session.auth_token,
            "Content-Type": content_type,
        }
        if etag:
            headers["ETag"] = etag

        try:
            with open(file_path, "rb") as body:
                return self._request("PUT", url, headers=headers, data=body)
        except OSError as e:
            raise SourceReadError(
                f"Can not read file {file_path}: {e}", details={"source": str(file_path)}
            ) from e
