"""Shared fixtures: configuration, a scripted scan engine and payloads."""

import copy

import pytest
import structlog

from depaudit.core.config import Config


class FakeEngine:
    """Scan engine returning scripted responses per path.

    A response that is an exception is raised, anything else is returned.
    """

    name = "fake"

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls = []

    async def test(self, path, options):
        self.calls.append((path, options))
        response = self.responses[path]
        if isinstance(response, BaseException):
            raise response
        return copy.deepcopy(response)


@pytest.fixture(autouse=True)
def reset_structlog():
    """The CLI points structlog at its captured stderr; undo after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def config():
    """Configuration that never reads the environment."""
    return Config(
        api_token="test-token",
        org="acme",
        root_url="https://depaudit.io",
        engine_command="depaudit-engine",
        engine_timeout=5,
        is_ci=False,
    )


@pytest.fixture
def clean_payload():
    """Engine payload for a project without vulnerabilities."""
    return {
        "ok": True,
        "vulnerabilities": [],
        "dependencyCount": 42,
        "org": "acme",
        "packageManager": "npm",
        "isPrivate": True,
        "uniqueCount": 0,
    }


@pytest.fixture
def ms_vuln():
    """High severity ReDoS reached through a direct dependency."""
    return {
        "id": "npm:ms:20170412",
        "name": "ms",
        "version": "0.7.1",
        "severity": "high",
        "title": "Regular Expression Denial of Service (ReDoS)",
        "from": ["demo-app@1.0.0", "debug@2.2.0", "ms@0.7.1"],
        "upgradePath": [False, "debug@2.6.9", "ms@2.0.0"],
    }


@pytest.fixture
def vulnerable_payload(ms_vuln):
    """Engine payload for a project with one vulnerability."""
    return {
        "ok": False,
        "vulnerabilities": [ms_vuln],
        "dependencyCount": 12,
        "org": "acme",
        "packageManager": "npm",
        "isPrivate": False,
        "uniqueCount": 1,
        "code": "VULNS",
    }
