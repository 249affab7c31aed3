"""
HTTP client for the Joplin Web Clipper REST service.

Every call is a single request with no body and a bounded timeout. Response
bodies are decoded into an :class:`Envelope`; an empty body (what the service
sends after a successful delete) decodes to an empty, successful envelope.

Reference: https://joplinapp.org/api/references/rest_api/
"""

import json
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from joplin_utils.error_utils import create_response_decode_error, create_service_connection_error
from joplin_utils.logging_utils import get_logger
from joplin_utils.models import Envelope

logger = get_logger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 41184
DEFAULT_TIMEOUT = 3.0


def resource_path(resource_id: str, *segments: str) -> str:
    """Build ``/resources/<id>[/<segment>...]`` with the identifier path-escaped"""
    parts = ["resources", quote(resource_id, safe="")] + list(segments)
    return "/" + "/".join(parts)


class JoplinClient:
    """Thin wrapper around a long-lived ``requests.Session``"""

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        token: str = "",
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.port = port
        self.token = token
        self.host = host
        self.timeout = timeout
        self.base_url = f"http://{host}:{port}"
        self.session = session or requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        self.session.close()

    def describe(self, path: str, params: Dict[str, Any]) -> str:
        """Return the request URL for logs and errors, with the token value masked."""
        shown = dict(params)
        if "token" in shown:
            shown["token"] = "****"
        query = "&".join(f"{k}={v}" for k, v in shown.items())
        return f"{self.base_url}{path}?{query}"

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> Envelope:
        """Issue one request and decode its body into an envelope.

        Args:
            method: HTTP method ("GET", "DELETE", ...)
            path: Path below the service root, e.g. "/resources"
            params: Extra query parameters; the token is always added

        Returns:
            Decoded envelope (empty on an empty body)

        Raises:
            TransportError: connection failure, timeout or undecodable body
        """
        query = {"token": self.token}
        if params:
            query.update(params)
        url = f"{self.base_url}{path}"
        described = self.describe(path, query)

        logger.debug(f"{method} {described}")
        try:
            with self.session.request(method, url, params=query, timeout=self.timeout) as response:
                status = response.status_code
                reason = response.reason
                body = response.content or b""
        except requests.RequestException as e:
            raise create_service_connection_error(described, e)

        envelope = self._decode(body, described)
        if status >= 400 and not envelope.error:
            envelope.error = f"HTTP {status} {reason or ''}".strip()
        return envelope

    def _decode(self, body: bytes, described: str) -> Envelope:
        if not body.strip():
            return Envelope()

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise create_response_decode_error(described, e, body)

        if not isinstance(payload, dict):
            raise create_response_decode_error(
                described, TypeError(f"expected a JSON object, got {type(payload).__name__}"), body
            )
        return Envelope.from_payload(payload)

    def ping(self) -> str:
        """Return the raw text of ``GET /ping`` (no token required)."""
        url = f"{self.base_url}/ping"
        try:
            with self.session.request("GET", url, timeout=self.timeout) as response:
                return response.text
        except requests.RequestException as e:
            raise create_service_connection_error(url, e)
