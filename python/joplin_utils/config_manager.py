#!/usr/bin/env python3
"""
Configuration Manager for the Joplin resource cleaner

This module handles loading and managing configuration from config.yaml
and environment variables.
"""

import logging
import os
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""


class ConfigManager:
    """Manages configuration for the Joplin resource cleaner"""

    def __init__(self, config_file: str = None, validate: bool = True):
        """Initialize ConfigManager

        Args:
            config_file: Path to configuration YAML file (defaults to config.yaml or CONFIG_FILE env var)
            validate: If True, validate configuration on initialization
        """
        if config_file is None:
            config_file = os.environ.get("CONFIG_FILE", "config.yaml")
        self.config_file = config_file
        self.config = self._load_config()

        if validate:
            self.validate_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with defaults"""
        default_config = {
            "joplin": {"host": "localhost", "port": 41184, "token": ""},
            "http": {"timeout": 3},
            "listing": {"page_size": 100},
            "reports": {"output_dir": "reports"},
            "security": {"require_confirmation": True},
        }

        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r") as f:
                    user_config = yaml.safe_load(f) or {}
                return self._merge_config(default_config, user_config)
            else:
                logger.debug(f"Config file {self.config_file} not found, using defaults")
                return default_config
        except Exception as e:
            logger.error(f"Error loading config file: {e}")
            return default_config

    def _merge_config(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge user config with defaults"""
        result = default.copy()
        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    # Joplin Web Clipper service
    def get_host(self) -> str:
        """Get service host from environment or config"""
        return os.environ.get("JOPLIN_HOST") or self.config["joplin"]["host"]

    def get_port(self) -> int:
        """Get service port from environment or config, with type coercion"""
        port = os.environ.get("JOPLIN_PORT") or self.config["joplin"]["port"]
        try:
            return int(port)
        except (ValueError, TypeError):
            raise ConfigValidationError(f"joplin.port must be an integer, got: {port} (type: {type(port).__name__})")

    def get_token(self) -> str:
        """Get the Web Clipper authorization token from environment or config"""
        return os.environ.get("JOPLIN_TOKEN") or self.config["joplin"].get("token") or ""

    # HTTP configuration
    def get_timeout(self) -> float:
        """Get per-request timeout in seconds, with type coercion"""
        timeout = self.config.get("http", {}).get("timeout", 3)
        try:
            return float(timeout)
        except (ValueError, TypeError):
            raise ConfigValidationError(
                f"http.timeout must be a number, got: {timeout} (type: {type(timeout).__name__})"
            )

    def get_page_size(self) -> int:
        """Get listing page size, with type coercion"""
        page_size = self.config.get("listing", {}).get("page_size", 100)
        try:
            return int(page_size)
        except (ValueError, TypeError):
            raise ConfigValidationError(
                f"listing.page_size must be an integer, got: {page_size} (type: {type(page_size).__name__})"
            )

    def get_output_dir(self) -> str:
        """Get report output directory from config"""
        return self.config.get("reports", {}).get("output_dir", "reports")

    def requires_confirmation(self) -> bool:
        """Get whether deletions must be confirmed interactively"""
        return bool(self.config.get("security", {}).get("require_confirmation", True))

    def validate_config(self) -> None:
        """Validate configuration values

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        errors = []
        warnings = []

        host = self.get_host()
        if not host or not str(host).strip():
            errors.append("joplin.host is required and cannot be empty")

        try:
            port = self.get_port()
            if port < 0 or port > 65535:
                errors.append(f"joplin.port must be an integer between 0 and 65535, got: {port}")
        except ConfigValidationError as e:
            errors.append(str(e))

        try:
            timeout = self.get_timeout()
            if timeout <= 0:
                errors.append(f"http.timeout must be a positive number (seconds), got: {timeout}")
            elif timeout > 60:
                warnings.append(f"http.timeout is very high ({timeout}s), a stalled service will block the run")
        except ConfigValidationError as e:
            errors.append(str(e))

        try:
            page_size = self.get_page_size()
            if page_size < 1 or page_size > 100:
                errors.append(f"listing.page_size must be between 1 and 100, got: {page_size}")
        except ConfigValidationError as e:
            errors.append(str(e))

        output_dir = self.get_output_dir()
        if not output_dir or not str(output_dir).strip():
            errors.append("reports.output_dir is required and cannot be empty")

        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")

        if errors:
            error_msg = "Configuration validation failed:\n  " + "\n  ".join(errors)
            logger.error(error_msg)
            raise ConfigValidationError(error_msg)

    def print_config(self):
        """Print current configuration"""
        print("Current Configuration:")
        print(f"  Config File: {self.config_file}")
        print(f"  Host: {self.get_host()}")
        print(f"  Port: {self.get_port()}")
        print(f"  Timeout: {self.get_timeout()}s")
        print(f"  Page Size: {self.get_page_size()}")
        print(f"  Output Directory: {self.get_output_dir()}")
        print(f"  Require Confirmation: {self.requires_confirmation()}")

        token = self.get_token()
        if token:
            print(f"  Token: {'*' * 8}{token[-4:] if len(token) > 8 else ''}")
        else:
            print("  Token: Not set")


# Global config manager instance
# Validation can be disabled by setting SKIP_CONFIG_VALIDATION=true environment variable
config_manager = ConfigManager(
    validate=os.environ.get("SKIP_CONFIG_VALIDATION", "").lower() not in ("true", "1", "yes")
)
