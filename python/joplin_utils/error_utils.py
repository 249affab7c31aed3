"""
Error message utilities for providing actionable guidance to users.

This module provides the exception types raised while talking to the Joplin
Web Clipper service, plus factory functions that attach suggested fixes and
troubleshooting details to them.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(Enum):
    """Categories of errors for better error handling"""
    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    CONFIGURATION = "configuration"
    SERVICE = "service"
    DECODING = "decoding"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class ActionableError(Exception):
    """Exception with actionable guidance for users"""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN,
                 suggestions: Optional[List[str]] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize actionable error

        Args:
            message: Primary error message
            category: Error category for classification
            suggestions: List of suggested fixes
            details: Additional context information
        """
        self.message = message
        self.category = category
        self.suggestions = suggestions or []
        self.details = details or {}
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message with suggestions"""
        lines = [f"❌ {self.message}"]

        if self.suggestions:
            lines.append("\n💡 Suggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        if self.details:
            lines.append("\n📋 Additional details:")
            for key, value in self.details.items():
                lines.append(f"   {key}: {value}")

        return "\n".join(lines)


class TransportError(ActionableError):
    """Raised when an HTTP exchange fails or its body cannot be decoded"""


class ServiceError(ActionableError):
    """Raised when the service answers with a non-empty ``error`` field"""

    def __init__(self, server_message: str, url: str, **kwargs):
        self.server_message = server_message
        self.url = url
        super().__init__(**kwargs)


def create_service_connection_error(url: str, error: Exception) -> TransportError:
    """Create actionable error for Web Clipper connection failures"""
    error_str = str(error).lower()

    suggestions = [
        "Verify Joplin is running and the Web Clipper service is enabled",
        "Check the port under 'Tools > Options > Web Clipper'",
        "Verify nothing else is bound to the configured port",
    ]

    category = ErrorCategory.CONNECTION
    if "timeout" in error_str or "timed out" in error_str:
        category = ErrorCategory.TIMEOUT
        suggestions.insert(0, "Joplin may be busy synchronising; try again once it is idle")

    return TransportError(
        message=f"Failed to reach Joplin Web Clipper service at {url}",
        category=category,
        suggestions=suggestions,
        details={
            "url": url,
            "error_type": type(error).__name__,
            "error_message": str(error)
        }
    )


def create_response_decode_error(url: str, error: Exception, body: bytes = b"") -> TransportError:
    """Create actionable error for response bodies that are not a JSON object"""
    preview = body[:80].decode("utf-8", errors="replace")

    return TransportError(
        message=f"Could not decode response from {url}",
        category=ErrorCategory.DECODING,
        suggestions=[
            "Verify the port belongs to the Joplin Web Clipper service",
            "Check that the Joplin version supports the REST API",
        ],
        details={
            "url": url,
            "error_type": type(error).__name__,
            "error_message": str(error),
            "body_preview": preview
        }
    )


def create_service_error(url: str, server_message: str) -> ServiceError:
    """Create actionable error for an error reported inside the response envelope"""
    suggestions = []
    category = ErrorCategory.SERVICE

    if "token" in server_message.lower():
        category = ErrorCategory.AUTHENTICATION
        suggestions = [
            "Copy the authorization token from 'Tools > Options > Web Clipper'",
            "Pass it with -t or set the JOPLIN_TOKEN environment variable",
        ]

    return ServiceError(
        server_message=server_message,
        url=url,
        message=f"Joplin service error: {server_message}",
        category=category,
        suggestions=suggestions,
        details={"url": url}
    )


def create_config_error(field: str, value: Any, reason: str) -> ActionableError:
    """Create actionable error for configuration validation failures"""
    suggestions = [
        f"Check the '{field}' value in config.yaml or on the command line",
        "Check the config-example.yaml for correct format",
    ]

    if "port" in field.lower():
        suggestions.insert(1, "Port must be an integer between 0 and 65535")
    elif "token" in field.lower():
        suggestions.insert(1, "Use -t <token> or set JOPLIN_TOKEN")

    return ActionableError(
        message=f"Configuration error: Invalid value for '{field}'",
        category=ErrorCategory.CONFIGURATION,
        suggestions=suggestions,
        details={
            "field": field,
            "value": value,
            "reason": reason
        }
    )
