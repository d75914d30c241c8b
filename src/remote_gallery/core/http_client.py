"""Thin HTTP client for the device's file server."""

from typing import Dict, Optional

import requests

from .error_handling import with_error_handling
from .exceptions import RemoteFetchError
from .listing import normalize_base_url
from .logging_config import get_logger
from .models import REQUESTED_BY
from .protocols import Headers, HttpResponseProtocol, HttpSessionProtocol


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _safe_text(response: HttpResponseProtocol) -> str:
    try:
        return response.text
    except (UnicodeDecodeError, AttributeError):
        return ""


class RemoteFetchClient:
    """
    GET and DELETE against the device, one attempt per call.

    Non-2xx answers raise ``RemoteFetchError`` carrying the status; network
    failures raise ``TransportError``.
    """

    def __init__(
        self,
        session: Optional[HttpSessionProtocol] = None,
        timeout: Optional[float] = None,
        requested_by: str = REQUESTED_BY,
    ):
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout
        self._requested_by = requested_by
        self._logger = get_logger("remote-gallery.http")

    @with_error_handling
    def get(self, url: str) -> HttpResponseProtocol:
        self._logger.debug(f"GET {url}")
        response = self._session.get(url, timeout=self._timeout)
        if not _is_success(response.status_code):
            raise RemoteFetchError(response.status_code, url, _safe_text(response))
        return response

    def get_bytes(self, url: str) -> bytes:
        return self.get(url).content

    def get_text(self, url: str) -> str:
        """Body of ``url`` as text; UTF-8 unless the server declares a charset."""
        response = self.get(url)
        headers = getattr(response, "headers", None) or {}
        if "charset" in headers.get("Content-Type", "").lower():
            return response.text
        return response.content.decode("utf-8", errors="replace")

    def build_delete_headers(self, headers: Optional[Headers] = None) -> Dict[str, str]:
        merged = {"X-Requested-By": self._requested_by}
        merged.update(headers or {})
        return merged

    @with_error_handling
    def delete(
        self,
        url: str,
        headers: Optional[Headers] = None,
        force_trailing_slash: bool = True,
    ) -> HttpResponseProtocol:
        """
        Issue a DELETE for ``url``.

        Args:
            url: Remote resource
            headers: Extra headers, merged over the identifying header
            force_trailing_slash: Append "/" to the target (folders)

        Returns:
            The successful response
        """
        target = normalize_base_url(url) if force_trailing_slash else url
        self._logger.debug(f"DELETE {target}")
        response = self._session.delete(
            target, headers=self.build_delete_headers(headers), timeout=self._timeout
        )
        if not _is_success(response.status_code):
            raise RemoteFetchError(response.status_code, target, _safe_text(response))
        return response
