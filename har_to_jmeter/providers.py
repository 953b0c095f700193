"""
LLM provider clients.

Each provider turns a prompt into the raw text answer of its model through a
single blocking HTTP call. Extraction and validation of the JMeter XML happen
in the generator and are shared by all providers.
"""

import logging
from typing import Optional, Tuple

import requests

from .config import Settings
from .errors import (
    GENERATION_FAILURE_PREFIX,
    ConfigurationError,
    GenerationError,
    ProviderRequestError,
    UpstreamAPIError,
)
from .models import AIProvider

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an expert JMeter test plan generator. "
    "Generate only valid JMeter XML files based on HAR file data."
)


class LLMProvider:
    """Base class: subclasses build the request and read the answer text."""

    name: str = ""
    display_name: str = ""
    key_label: str = ""

    def __init__(self,
                 api_key: Optional[str],
                 session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        """
        Args:
            api_key: Provider API key
            session: HTTP session to post through (requests.post when omitted)
            timeout: Request timeout in seconds, None blocks until the provider answers

        Raises:
            ConfigurationError: If the API key is missing
        """
        if not api_key:
            raise ConfigurationError(f"{self.key_label} API key not configured")
        self.api_key = api_key
        self.session = session
        self.timeout = timeout

    def build_request(self, prompt: str) -> Tuple[str, dict, dict]:
        """Return (url, headers, json payload) for the prompt."""
        raise NotImplementedError

    def extract_text(self, data: dict) -> str:
        """Return the answer text, or an empty string if the shape is unexpected."""
        raise NotImplementedError

    def generate(self, prompt: str) -> str:
        """
        Send the prompt and return the model's raw text.

        Raises:
            ProviderRequestError: If the provider cannot be reached
            UpstreamAPIError: If the provider answers with a non-success status
            GenerationError: If the provider body is not JSON
        """
        url, headers, payload = self.build_request(prompt)
        logger.info(f"Sending prompt to {self.name} ({len(prompt)} chars)...")
        post = self.session.post if self.session is not None else requests.post

        # The request URL may carry the API key, only the exception type is reported
        try:
            response = post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"{self.name} API timeout after {self.timeout}s")
            raise ProviderRequestError(self.name, type(e).__name__) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{self.name} API request failed: {type(e).__name__}")
            raise ProviderRequestError(self.name, type(e).__name__) from e

        if not response.ok:
            logger.error(f"{self.name} API error: {response.text}")
            raise UpstreamAPIError(self.name, response.status_code, response.reason or '', response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(f"{GENERATION_FAILURE_PREFIX}: {self.name} returned invalid JSON: {e}") from e

        logger.info(f"{self.name} JMX Generation Response received")
        return self.extract_text(data)


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions"""

    name = AIProvider.OPENAI.value
    display_name = "OpenAI"
    key_label = "OpenAI"

    API_URL = "https://api.openai.com/v1/chat/completions"
    MODEL = "gpt-5-2025-08-07"
    MAX_COMPLETION_TOKENS = 8000

    def build_request(self, prompt: str) -> Tuple[str, dict, dict]:
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }
        payload = {
            'model': self.MODEL,
            'messages': [
                {'role': 'system', 'content': SYSTEM_PROMPT},
                {'role': 'user', 'content': prompt},
            ],
            'max_completion_tokens': self.MAX_COMPLETION_TOKENS,
        }
        return self.API_URL, headers, payload

    def extract_text(self, data: dict) -> str:
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            logger.warning("OpenAI response has no choices[0].message.content")
            return ''
        return content if isinstance(content, str) else ''


class GoogleProvider(LLMProvider):
    """Google AI Studio generative content"""

    name = AIProvider.GOOGLE.value
    display_name = "Google AI Studio"
    key_label = "Google AI"

    MODEL = "gemini-1.5-flash"
    API_URL = f"https://generativelanguage.googleapis.com/v1beta/models/{MODEL}:generateContent"

    def build_request(self, prompt: str) -> Tuple[str, dict, dict]:
        headers = {'Content-Type': 'application/json'}
        payload = {
            'contents': [{
                'parts': [{'text': prompt}],
            }],
        }
        return f"{self.API_URL}?key={self.api_key}", headers, payload

    def extract_text(self, data: dict) -> str:
        try:
            text = data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError):
            logger.warning("Google response has no candidates[0].content.parts[0].text")
            return ''
        return text if isinstance(text, str) else ''


PROVIDERS = {
    AIProvider.OPENAI: OpenAIProvider,
    AIProvider.GOOGLE: GoogleProvider,
}


def get_provider(ai_provider: Optional[str],
                 settings: Settings,
                 session: Optional[requests.Session] = None) -> LLMProvider:
    """
    Build the provider selected by the caller.

    Raises:
        ConfigurationError: If the selected provider has no API key
    """
    selected = AIProvider.resolve(ai_provider)
    api_key = settings.google_ai_api_key if selected is AIProvider.GOOGLE else settings.openai_api_key
    return PROVIDERS[selected](api_key, session=session, timeout=settings.request_timeout)
