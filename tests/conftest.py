"""Shared fixtures for uploader tests."""

import os

import httpx
import pytest

from splunk_integration.config import load_settings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep stray SPLUNK_HEC_* variables, .env and properties files out of tests."""
    for name in list(os.environ):
        if name.upper().startswith("SPLUNK_HEC_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class FakeHEC:
    """In-process HEC endpoint that records every request it receives."""

    def __init__(self, status_code=200, body='{"text":"Success","code":0}', fail_on_call=None):
        self.status_code = status_code
        self.body = body
        self.fail_on_call = fail_on_call
        self.requests = []
        self.calls = 0

    def handler(self, request):
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise httpx.ConnectError("Connection refused", request=request)
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    @property
    def bodies(self):
        return [request.content for request in self.requests]


@pytest.fixture
def fake_hec():
    return FakeHEC()


@pytest.fixture
def settings():
    return load_settings(
        properties_file=None,
        token="11111111-2222-3333-4444-555555555555",
        host="splunk.example.com",
        port=8088,
        source="app",
        sourcetype="applog",
    )
