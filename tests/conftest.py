"""Pytest configuration for har-to-jmeter tests."""

import json
import sys
from pathlib import Path

import pytest

# Ensure har_to_jmeter is importable without installation
root_path = str(Path(__file__).parent.parent)
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from har_to_jmeter.config import Settings


JMX_DOCUMENT = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<jmeterTestPlan version="1.2" properties="5.0" jmeter="5.6.3">\n'
    '  <hashTree/>\n'
    '</jmeterTestPlan>'
)


def make_entry(method, url, time, status=200):
    return {
        "startedDateTime": "2025-01-01T10:00:00.000Z",
        "time": time,
        "request": {
            "method": method,
            "url": url,
            "headers": [{"name": "Accept", "value": "application/json"}],
            "queryString": [],
        },
        "response": {"status": status, "headers": []},
    }


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Records posts and replays a canned response"""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(payload={})
        self.error = error
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def openai_payload(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def google_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture()
def har_data():
    return {
        "log": {
            "version": "1.2",
            "entries": [
                make_entry("GET", "https://api.example.com/users", 100),
                make_entry("POST", "https://api.example.com/login", 250),
                make_entry("GET", "https://cdn.example.org/app.js", 50),
            ],
        }
    }


@pytest.fixture()
def settings():
    return Settings(openai_api_key="sk-test", google_ai_api_key="google-test")
