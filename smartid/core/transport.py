# smartid/core/transport.py
"""
HTTPS/JSON transport to the Smart-ID relying-party API
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from smartid.core.config import Settings
from smartid.core.errors import TransportError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiRequest:
    method: str
    path: str  # relative to the configured API base path
    body: Optional[Dict[str, Any]] = None
    params: Dict[str, Any] = field(default_factory=dict)
    # Extra seconds the remote may hold the request open (long poll)
    hold_seconds: float = 0.0


@dataclass(frozen=True)
class ApiResponse:
    status: int
    data: Any


class RequestsTransport:
    """Sends one request per call; no connection or session is kept between calls"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _headers(self, with_body: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.authorize_token:
            headers["Authorization"] = f"Bearer {self.settings.authorize_token}"
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def send(self, request: ApiRequest) -> ApiResponse:
        url = self.settings.base_url + request.path
        timeout = (self.settings.request_timeout, self.settings.request_timeout + request.hold_seconds)
        log.info("%s %s", request.method, url)
        try:
            response = requests.request(
                request.method,
                url,
                json=request.body,
                params=request.params or None,
                headers=self._headers(request.body is not None),
                timeout=timeout,
            )
        except requests.exceptions.Timeout as e:
            log.warning("Smart-ID request timed out: %s %s", request.method, url)
            raise TransportError(f"timeout calling {url}") from e
        except requests.exceptions.RequestException as e:
            log.error("Smart-ID request failed: %s %s: %s", request.method, url, str(e))
            raise TransportError(str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            log.error("Non-JSON response from %s (HTTP %s)", url, response.status_code)
            raise TransportError(f"invalid JSON in response (HTTP {response.status_code})") from e

        log.debug("Response HTTP %s: %s", response.status_code, data)
        return ApiResponse(status=response.status_code, data=data)
