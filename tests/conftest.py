"""
Pytest configuration file.

Sets up the Python path so test files can import from the python/ directory,
and provides an in-memory Joplin Web Clipper service that stands in for the
HTTP session used by JoplinClient.
"""
import json
import os
import sys
from pathlib import Path
from typing import Dict, Optional
from unittest.mock import MagicMock
from urllib.parse import unquote, urlsplit

import pytest
import requests

# Add python directory to path for all tests
_python_dir = Path(__file__).parent.parent / 'python'
_python_dir_abs = str(_python_dir.absolute())
if _python_dir_abs not in sys.path:
    sys.path.insert(0, _python_dir_abs)

os.environ.setdefault("SKIP_CONFIG_VALIDATION", "true")

TEST_TOKEN = "2288804904e251f046bb730df0fe60a8"


def build_response(status_code: int = 200, body: bytes = b"", reason: str = "OK") -> requests.Response:
    """Create a real requests.Response with a mocked raw stream"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = body
    response.encoding = "utf-8"
    response.raw = MagicMock()
    return response


def json_response(payload: Dict, status_code: int = 200, reason: str = "OK") -> requests.Response:
    return build_response(status_code, json.dumps(payload).encode("utf-8"), reason)


class FakeJoplinService:
    """Mimics the Web Clipper endpoints the cleaner uses"""

    def __init__(self, resources: Optional[Dict[str, Optional[int]]] = None, referenced=None, token: str = TEST_TOKEN):
        self.resources = dict(resources or {})
        self.referenced = set(referenced or ())
        self.token = token
        self.listing_error: Optional[str] = None
        self.notes_errors: Dict[str, str] = {}
        self.delete_errors: Dict[str, str] = {}
        self.unreachable_deletes = set()
        self.ping_answer = "JoplinClipperServer"
        self.calls = []
        self.responses = []
        self.closed = False

    # requests.Session interface
    def request(self, method, url, params=None, timeout=None, **kwargs):
        path = urlsplit(url).path
        params = dict(params or {})
        self.calls.append((method, path, params))

        response = self._route(method, path, params)
        self.responses.append(response)
        return response

    def close(self):
        self.closed = True

    def calls_for(self, method: str, suffix: str = ""):
        return [call for call in self.calls if call[0] == method and call[1].endswith(suffix)]

    def _route(self, method, path, params):
        if path == "/ping":
            return build_response(200, self.ping_answer.encode("utf-8"))

        if params.get("token") != self.token:
            return json_response({"error": "Invalid token"}, 403, "Forbidden")

        parts = path.strip("/").split("/")
        if parts[0] != "resources":
            return json_response({"error": "Not Found"}, 404, "Not Found")

        if len(parts) == 1 and method == "GET":
            return self._list_resources(params)

        resource_id = unquote(parts[1])
        if len(parts) == 3 and parts[2] == "notes" and method == "GET":
            return self._resource_notes(resource_id)

        if len(parts) == 2 and method == "DELETE":
            return self._delete_resource(resource_id)

        return json_response({"error": "Not Found"}, 404, "Not Found")

    def _list_resources(self, params):
        if self.listing_error:
            return json_response({"error": self.listing_error, "items": [], "has_more": False})

        limit = int(params.get("limit", 100))
        page = int(params.get("page", 1))
        fields = str(params.get("fields", "id")).split(",")

        ordered = sorted(self.resources)
        start = (page - 1) * limit
        chunk = ordered[start:start + limit]

        items = []
        for resource_id in chunk:
            item = {"id": resource_id}
            if "size" in fields and self.resources[resource_id] is not None:
                item["size"] = self.resources[resource_id]
            items.append(item)

        return json_response({"items": items, "has_more": start + limit < len(ordered)})

    def _resource_notes(self, resource_id):
        if resource_id in self.notes_errors:
            return json_response({"error": self.notes_errors[resource_id]}, 500, "Internal Server Error")
        items = [{"id": f"note-{resource_id}"}] if resource_id in self.referenced else []
        return json_response({"items": items, "has_more": False})

    def _delete_resource(self, resource_id):
        if resource_id in self.unreachable_deletes:
            raise requests.ConnectionError(f"connection reset while deleting {resource_id}")
        if resource_id in self.delete_errors:
            return json_response({"error": self.delete_errors[resource_id]}, 500, "Internal Server Error")
        self.resources.pop(resource_id, None)
        return build_response(200, b"")


@pytest.fixture
def fake_service():
    return FakeJoplinService()


@pytest.fixture
def client(fake_service):
    from joplin_utils.joplin_client import JoplinClient

    return JoplinClient(port=41184, token=TEST_TOKEN, session=fake_service)
