"""Shared fixtures: a call-recording stand-in for the GitHub client."""

import threading

import pytest

from mcp_github.audit import AuditLogger
from mcp_github.github_client import APIResponse
from mcp_github.server import create_tool_handlers


class FakeGitHubClient:
    """
    Records every call and answers from ``responses``.

    A response entry may be plain data (success), an APIResponse (returned
    as is), or a callable receiving the call arguments. Methods without an
    entry answer with a 404 failure.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self._lock = threading.Lock()

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            with self._lock:
                self.calls.append((name, args, kwargs))
            reply = self.responses.get(name)
            if callable(reply):
                reply = reply(*args, **kwargs)
            if isinstance(reply, APIResponse):
                return reply
            if reply is None:
                return APIResponse(success=False, error=f"Not found: {name}", http_code=404)
            return APIResponse(success=True, data=reply, http_code=200)

        return method

    @property
    def call_names(self):
        return [name for name, _, _ in self.calls]


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture
def fake_logs_client():
    return FakeGitHubClient()


@pytest.fixture
def audit_log(tmp_path):
    return tmp_path / "audit.log"


@pytest.fixture
def handlers(fake_client, fake_logs_client, audit_log):
    return create_tool_handlers(fake_client, fake_logs_client, AuditLogger(audit_log))
