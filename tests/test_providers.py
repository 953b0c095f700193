"""Unit tests for LLM provider clients: no real API calls, only wire shapes and error paths."""

import pytest
import requests

from har_to_jmeter.config import Settings
from har_to_jmeter.errors import (
    ConfigurationError,
    GenerationError,
    ProviderRequestError,
    UpstreamAPIError,
)
from har_to_jmeter.providers import (
    SYSTEM_PROMPT,
    GoogleProvider,
    OpenAIProvider,
    get_provider,
)
from conftest import FakeResponse, FakeSession, google_payload, openai_payload


class TestOpenAIProvider:
    """Test the chat completions request and response handling."""

    def test_request_shape(self):
        session = FakeSession(FakeResponse(payload=openai_payload("hello")))
        OpenAIProvider("sk-test", session=session).generate("the prompt")

        call = session.calls[0]
        assert call["url"] == "https://api.openai.com/v1/chat/completions"
        assert call["headers"]["Authorization"] == "Bearer sk-test"
        assert call["json"] == {
            "model": "gpt-5-2025-08-07",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": "the prompt"},
            ],
            "max_completion_tokens": 8000,
        }
        assert call["timeout"] is None

    def test_returns_message_content(self):
        session = FakeSession(FakeResponse(payload=openai_payload("raw answer")))
        assert OpenAIProvider("sk-test", session=session).generate("p") == "raw answer"

    def test_missing_content_returns_empty(self):
        session = FakeSession(FakeResponse(payload={"choices": [{"message": {}}]}))
        assert OpenAIProvider("sk-test", session=session).generate("p") == ""

    def test_null_content_returns_empty(self):
        session = FakeSession(FakeResponse(payload=openai_payload(None)))
        assert OpenAIProvider("sk-test", session=session).generate("p") == ""

    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="not configured"):
            OpenAIProvider(None, session=FakeSession())

    def test_error_status(self):
        session = FakeSession(FakeResponse(status_code=401, text="invalid key", reason="Unauthorized"))
        with pytest.raises(UpstreamAPIError) as exc_info:
            OpenAIProvider("sk-bad", session=session).generate("p")
        assert exc_info.value.provider == "openai"
        assert exc_info.value.status_text == "Unauthorized"

    def test_non_json_body(self):
        session = FakeSession(FakeResponse(status_code=200, text="<html>gateway</html>"))
        with pytest.raises(GenerationError, match="invalid JSON"):
            OpenAIProvider("sk-test", session=session).generate("p")


class TestGoogleProvider:
    """Test the generateContent request and response handling."""

    def test_request_shape(self):
        session = FakeSession(FakeResponse(payload=google_payload("hello")))
        GoogleProvider("g-key", session=session, timeout=30).generate("the prompt")

        call = session.calls[0]
        assert call["url"] == (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            "gemini-1.5-flash:generateContent?key=g-key"
        )
        assert "Authorization" not in call["headers"]
        assert call["json"] == {"contents": [{"parts": [{"text": "the prompt"}]}]}
        assert call["timeout"] == 30

    def test_returns_first_part_text(self):
        session = FakeSession(FakeResponse(payload=google_payload("gemini says")))
        assert GoogleProvider("g-key", session=session).generate("p") == "gemini says"

    def test_no_candidates_returns_empty(self):
        session = FakeSession(FakeResponse(payload={"promptFeedback": {"blockReason": "SAFETY"}}))
        assert GoogleProvider("g-key", session=session).generate("p") == ""

    def test_error_status(self):
        session = FakeSession(FakeResponse(status_code=500, text="boom", reason="Internal Server Error"))
        with pytest.raises(UpstreamAPIError, match="google API error: Internal Server Error"):
            GoogleProvider("g-key", session=session).generate("p")

    def test_connection_error_hides_key(self):
        error = requests.ConnectionError(
            "HTTPConnectionPool(host='127.0.0.1', port=9): Max retries exceeded "
            "with url: /gen?key=SUPERSECRET123"
        )
        session = FakeSession(error=error)
        with pytest.raises(ProviderRequestError) as exc_info:
            GoogleProvider("SUPERSECRET123", session=session).generate("p")

        message = str(exc_info.value)
        assert "SUPERSECRET123" not in message
        assert message == "Failed to generate JMX file using AI: google API request failed: ConnectionError"
        assert exc_info.value.__cause__ is error

    def test_timeout_hides_key(self):
        session = FakeSession(error=requests.Timeout("read timed out: /v1beta?key=SUPERSECRET123"))
        with pytest.raises(ProviderRequestError) as exc_info:
            GoogleProvider("SUPERSECRET123", session=session, timeout=5).generate("p")
        assert "SUPERSECRET123" not in str(exc_info.value)
        assert exc_info.value.reason == "Timeout"


class TestDefaultTransport:
    """Without an injected session the module-level requests.post is used."""

    def test_uses_requests_post(self, monkeypatch):
        calls = []

        def fake_post(url, headers=None, json=None, timeout=None):
            calls.append(url)
            return FakeResponse(payload=openai_payload("via requests.post"))

        monkeypatch.setattr(requests, "post", fake_post)
        provider = OpenAIProvider("sk-test")
        assert provider.session is None
        assert provider.generate("p") == "via requests.post"
        assert calls == ["https://api.openai.com/v1/chat/completions"]


class TestGetProvider:
    """Test provider selection from the request value."""

    def test_default_is_openai(self, settings):
        assert isinstance(get_provider(None, settings, session=FakeSession()), OpenAIProvider)

    def test_google(self, settings):
        assert isinstance(get_provider("google", settings, session=FakeSession()), GoogleProvider)

    def test_unknown_value_is_openai(self, settings):
        assert isinstance(get_provider("mistral", settings, session=FakeSession()), OpenAIProvider)

    def test_missing_google_key(self):
        with pytest.raises(ConfigurationError, match="^Google AI API key not configured$"):
            get_provider("google", Settings(openai_api_key="sk-test"))

    def test_timeout_from_settings(self):
        provider = get_provider("openai", Settings(openai_api_key="sk", request_timeout=12.5),
                                session=FakeSession())
        assert provider.timeout == 12.5
