"""
Health check utilities for verifying service connectivity and configuration.

This module provides health checks for:
- Configuration validity
- Joplin Web Clipper service reachability (/ping)
- Authorization token acceptance
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from joplin_utils.config_manager import ConfigManager, ConfigValidationError, config_manager
from joplin_utils.error_utils import ActionableError
from joplin_utils.joplin_client import JoplinClient
from joplin_utils.logging_utils import get_logger

logger = get_logger(__name__)

PING_RESPONSE = "JoplinClipperServer"


@dataclass
class HealthCheckResult:
    """Result of a health check"""

    name: str
    status: bool  # True if healthy, False if unhealthy
    message: str
    details: Optional[Dict] = None


class HealthChecker:
    """Performs health checks on the service and local configuration"""

    def __init__(self, client: JoplinClient, config: ConfigManager = None):
        self.client = client
        self.config = config or config_manager
        self.logger = get_logger(self.__class__.__name__)

    def check_configuration(self) -> HealthCheckResult:
        """Check that the loaded configuration is valid"""
        try:
            self.config.validate_config()
        except ConfigValidationError as e:
            return HealthCheckResult(name="configuration", status=False, message=str(e))

        return HealthCheckResult(
            name="configuration",
            status=True,
            message="Configuration is valid",
            details={"config_file": self.config.config_file},
        )

    def check_service_connectivity(self) -> HealthCheckResult:
        """Check that the Web Clipper service answers /ping"""
        self.logger.info(f"Checking Joplin Web Clipper service at {self.client.base_url}")
        try:
            answer = self.client.ping().strip()
        except ActionableError as e:
            return HealthCheckResult(
                name="service_connectivity",
                status=False,
                message=e.message,
                details=e.details,
            )

        if answer != PING_RESPONSE:
            return HealthCheckResult(
                name="service_connectivity",
                status=False,
                message=f"Unexpected /ping answer from {self.client.base_url}",
                details={"answer": answer[:80]},
            )

        return HealthCheckResult(
            name="service_connectivity",
            status=True,
            message=f"Web Clipper service reachable at {self.client.base_url}",
        )

    def check_token(self) -> HealthCheckResult:
        """Check that the service accepts the authorization token"""
        if not self.client.token:
            return HealthCheckResult(name="token", status=False, message="No token configured")

        try:
            envelope = self.client.request("GET", "/resources", {"fields": "id", "limit": 1})
        except ActionableError as e:
            return HealthCheckResult(name="token", status=False, message=e.message, details=e.details)

        if envelope.error:
            return HealthCheckResult(name="token", status=False, message=f"Token rejected: {envelope.error}")

        return HealthCheckResult(name="token", status=True, message="Token accepted")

    def run_all_checks(self, skip_optional: bool = False) -> List[HealthCheckResult]:
        """Run all health checks

        Args:
            skip_optional: If True, only check configuration and connectivity

        Returns:
            List of health check results
        """
        results = [self.check_configuration(), self.check_service_connectivity()]
        if not skip_optional:
            results.append(self.check_token())
        return results

    def print_health_report(self, results: List[HealthCheckResult]) -> bool:
        """Print health check results

        Returns:
            True if all checks passed, False otherwise
        """
        print("\n" + "=" * 60)
        print("   HEALTH CHECK REPORT")
        print("=" * 60)

        all_passed = True
        for result in results:
            icon = "✓" if result.status else "✗"
            print(f"  {icon} {result.name}: {result.message}")
            if result.details and not result.status:
                for key, value in result.details.items():
                    print(f"      {key}: {value}")
            all_passed = all_passed and result.status

        print("=" * 60)
        print("All checks passed" if all_passed else "Some checks failed")
        return all_passed
