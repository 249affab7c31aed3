"""Unit tests for joplin_utils/error_utils.py"""

import pytest
import requests

from joplin_utils.error_utils import (
    ActionableError,
    ErrorCategory,
    ServiceError,
    TransportError,
    create_config_error,
    create_response_decode_error,
    create_service_connection_error,
    create_service_error,
)

URL = "http://localhost:41184/resources?token=****"


class TestFormatMessage:
    def test_includes_suggestions_and_details(self):
        error = ActionableError("Something broke", suggestions=["Restart Joplin"], details={"url": URL})

        text = str(error)
        assert text.startswith("❌ Something broke")
        assert "1. Restart Joplin" in text
        assert f"url: {URL}" in text

    def test_plain_message(self):
        assert str(ActionableError("Something broke")) == "❌ Something broke"


class TestFactories:
    @pytest.mark.parametrize("error,category", [
        (requests.ConnectionError("Connection refused"), ErrorCategory.CONNECTION),
        (requests.Timeout("Read timed out. (read timeout=3)"), ErrorCategory.TIMEOUT),
    ])
    def test_connection_error(self, error, category):
        result = create_service_connection_error(URL, error)

        assert isinstance(result, TransportError)
        assert result.category == category
        assert result.details["url"] == URL
        assert result.details["error_type"] == type(error).__name__

    def test_decode_error_preview_is_truncated(self):
        result = create_response_decode_error(URL, ValueError("bad"), b"x" * 200)

        assert result.category == ErrorCategory.DECODING
        assert len(result.details["body_preview"]) == 80

    @pytest.mark.parametrize("message,category", [
        ("Invalid token", ErrorCategory.AUTHENTICATION),
        ("database is locked", ErrorCategory.SERVICE),
    ])
    def test_service_error(self, message, category):
        result = create_service_error(URL, message)

        assert isinstance(result, ServiceError)
        assert result.server_message == message
        assert result.url == URL
        assert result.category == category

    def test_config_error(self):
        result = create_config_error("port", 70000, "out of range")

        assert result.category == ErrorCategory.CONFIGURATION
        assert result.details == {"field": "port", "value": 70000, "reason": "out of range"}
        assert any("0 and 65535" in s for s in result.suggestions)
