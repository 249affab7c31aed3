"""Unit tests for joplin_utils/health_checks.py"""

from unittest.mock import MagicMock

import pytest
import requests

from conftest import TEST_TOKEN
from joplin_utils.config_manager import ConfigManager
from joplin_utils.health_checks import HealthChecker, HealthCheckResult
from joplin_utils.joplin_client import JoplinClient


@pytest.fixture
def config():
    return ConfigManager(config_file="/nonexistent/config.yaml", validate=False)


@pytest.fixture
def checker(client, config):
    return HealthChecker(client, config)


class TestHealthChecker:
    """Tests for individual checks"""

    def test_configuration_ok(self, checker):
        result = checker.check_configuration()
        assert result.status is True
        assert result.name == "configuration"

    def test_configuration_invalid(self, checker, config):
        config.config["listing"]["page_size"] = 0

        result = checker.check_configuration()

        assert result.status is False
        assert "listing.page_size" in result.message

    def test_service_reachable(self, checker):
        assert checker.check_service_connectivity().status is True

    def test_service_wrong_ping_answer(self, checker, fake_service):
        fake_service.ping_answer = "nginx"

        result = checker.check_service_connectivity()

        assert result.status is False
        assert result.details == {"answer": "nginx"}

    def test_service_unreachable(self, config):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("Connection refused")
        checker = HealthChecker(JoplinClient(token=TEST_TOKEN, session=session), config)

        result = checker.check_service_connectivity()

        assert result.status is False
        assert "Failed to reach" in result.message

    def test_token_accepted(self, checker, fake_service):
        result = checker.check_token()

        assert result.status is True
        _, path, params = fake_service.calls[-1]
        assert path == "/resources"
        assert params["limit"] == 1

    def test_token_rejected(self, fake_service, config):
        checker = HealthChecker(JoplinClient(token="wrong", session=fake_service), config)

        result = checker.check_token()

        assert result.status is False
        assert "Invalid token" in result.message

    def test_token_missing(self, fake_service, config):
        checker = HealthChecker(JoplinClient(token="", session=fake_service), config)

        assert checker.check_token().status is False
        assert fake_service.calls == []

    def test_run_all_checks(self, checker):
        results = checker.run_all_checks()
        assert [r.name for r in results] == ["configuration", "service_connectivity", "token"]

    def test_run_all_checks_skip_optional(self, checker):
        results = checker.run_all_checks(skip_optional=True)
        assert [r.name for r in results] == ["configuration", "service_connectivity"]


class TestPrintHealthReport:
    """Tests for print_health_report"""

    def test_all_passed(self, checker, capsys):
        results = [HealthCheckResult("configuration", True, "ok")]

        assert checker.print_health_report(results) is True
        assert "All checks passed" in capsys.readouterr().out

    def test_failure_prints_details(self, checker, capsys):
        results = [
            HealthCheckResult("configuration", True, "ok"),
            HealthCheckResult("token", False, "Token rejected", {"url": "http://localhost:41184/resources"}),
        ]

        assert checker.print_health_report(results) is False
        out = capsys.readouterr().out
        assert "✗ token: Token rejected" in out
        assert "url: http://localhost:41184/resources" in out
        assert "Some checks failed" in out
