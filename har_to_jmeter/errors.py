"""
Exceptions raised while turning a HAR document into a JMeter test plan.
"""


class HarToJmeterError(Exception):
    """Base class for all conversion failures"""


class ConfigurationError(HarToJmeterError):
    """Raised when required environment settings are missing or invalid."""


class MalformedInputError(HarToJmeterError, ValueError):
    """Raised when the HAR content is not valid JSON or lacks log.entries."""


GENERATION_FAILURE_PREFIX = "Failed to generate JMX file using AI"


class UpstreamAPIError(HarToJmeterError):
    """Raised when an LLM provider answers with a non-success status."""

    def __init__(self, provider: str, status_code: int, status_text: str, body: str = ""):
        self.provider = provider
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(f"{GENERATION_FAILURE_PREFIX}: {provider} API error: {status_text}")


class ProviderRequestError(HarToJmeterError):
    """Raised when the provider could not be reached (connection error, timeout)."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{GENERATION_FAILURE_PREFIX}: {provider} API request failed: {reason}")


class GenerationError(HarToJmeterError):
    """Raised when the provider output cannot be turned into valid JMeter XML."""
