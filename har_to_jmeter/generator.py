"""
LLM-powered JMeter test plan generation.
"""

import json
import logging
import re
from typing import Optional

import requests

from .config import Settings
from .errors import GenerationError
from .models import GenerateResponse, GenerationMetadata, LoadConfig
from .parser import compute_summary, get_entries
from .providers import get_provider

logger = logging.getLogger(__name__)


# ============================================================================
# GENERATION PROMPT TEMPLATE
# ============================================================================

JMX_PROMPT_TEMPLATE = """You are an expert in Apache JMeter test plan creation.
Your task is to generate a complete Apache JMeter (.jmx) file based on the provided HAR file (HTTP Archive).

### Requirements:
1. Parse the HAR file and extract:
   - All HTTP requests (method, URL, headers, body, query params, cookies).
   - Request order and sequence should be preserved as in the HAR file.
   - Response payloads that may contain dynamic values (IDs, tokens).

2. Create a JMeter Test Plan (.jmx) with the following:
   - Thread Group with configurable threads, ramp-up, and loop count.
   - HTTP Request Samplers for every request from HAR.
   - Group requests by domain or sequence for readability.
   - Add `HTTP Header Manager` for common headers (Authorization, Content-Type, User-Agent, etc.).
   - Add `CSV Data Set Config` to externalize dynamic values (e.g., user IDs, emails, tokens).
   - Replace hardcoded parameters with variables `${{varName}}`.

3. Correlation and Dynamic Data Handling:
   - Use `JSON Extractor` or `Regular Expression Extractor` to capture response values (auth token, IDs, session keys).
   - Replace dependent requests with extracted variables.
   - If HAR contains repeated values (like auth tokens), store them in variables.

4. Enhancements:
   - Insert default test data where needed (if request body is empty or HAR doesn't provide enough).
   - Add a `View Results Tree` listener for debugging.
   - Ensure the JMX is well-formed XML and directly runnable in JMeter.

### Output:
- Provide the final JMX file content as valid XML inside a code block.
- Do not summarize, only return the JMX file.
- Ensure all nodes (`TestPlan`, `ThreadGroup`, `HTTPSamplerProxy`, `HeaderManager`, etc.) follow correct JMeter XML structure.

### Input:
HAR file content (JSON format) will be provided.

### Task:
Generate the complete JMX file according to the above rules.

### HAR file content:
{har_json}"""

JMX_ROOT_MARKER = '<jmeterTestPlan'

# Fenced block, optionally tagged xml
_FENCED_BLOCK_RE = re.compile(r'```(?:xml)?\s*(.*?)\s*```', re.DOTALL)
# XML prolog through the closing root element
_XML_DOCUMENT_RE = re.compile(r'<\?xml.*</jmeterTestPlan>', re.DOTALL)


def build_jmx_prompt(har_data: dict) -> str:
    """Embed the pretty-printed HAR document into the generation prompt."""
    har_json = json.dumps(har_data, indent=2, ensure_ascii=False)
    return JMX_PROMPT_TEMPLATE.format(har_json=har_json)


def extract_jmx_content(text: str) -> str:
    """
    Pull the JMeter XML out of a free-form model answer.

    Tries, in order: the interior of the first fenced code block, the span from
    an XML prolog to the closing jmeterTestPlan tag, and finally the whole text.

    Examples:
        "```xml\\n<jmeterTestPlan/>\\n```" -> "<jmeterTestPlan/>"
        "Here: <?xml ...?><jmeterTestPlan>..</jmeterTestPlan> done" -> "<?xml ...</jmeterTestPlan>"
    """
    if not text:
        return ''

    match = _FENCED_BLOCK_RE.search(text)
    if match:
        # An empty fence falls back to the whole match
        return match.group(1) or match.group(0)

    match = _XML_DOCUMENT_RE.search(text)
    if match:
        return match.group(0)

    return text


def validate_jmx_content(jmx_content: str) -> str:
    """
    Raises:
        GenerationError: If the candidate is empty or has no jmeterTestPlan root
    """
    if not jmx_content or JMX_ROOT_MARKER not in jmx_content:
        raise GenerationError('AI did not generate valid JMeter XML content')
    return jmx_content


# ============================================================================
# JMX GENERATOR CLASS
# ============================================================================

class JMXGenerator:
    """Orchestrates prompt building, the provider call and post-processing"""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        Args:
            settings: Resolved configuration (API keys, timeout)
            session: Optional HTTP session shared with the provider clients
        """
        self.settings = settings
        self.session = session

    def generate(self,
                 har_data: dict,
                 ai_provider: Optional[str] = None,
                 test_plan_name: Optional[str] = "HAR Performance Test",
                 load_config: Optional[LoadConfig] = None) -> GenerateResponse:
        """
        Generate a JMeter test plan for a decoded HAR document.

        Args:
            har_data: Decoded HAR document
            ai_provider: "openai" (default) or "google"
            test_plan_name: Name echoed back in the metadata, None is echoed as-is
            load_config: Requested load profile; not forwarded to the prompt

        Returns:
            GenerateResponse with the JMX content, metadata and summary

        Raises:
            ConfigurationError: If the selected provider has no API key
            ProviderRequestError: If the provider cannot be reached
            UpstreamAPIError: If the provider answers with an error status
            GenerationError: If no valid JMeter XML could be extracted
            MalformedInputError: If the HAR entries are malformed
        """
        entries = get_entries(har_data)
        logger.info(f"Found {len(entries)} HTTP requests in HAR file")

        if load_config is not None:
            logger.debug(f"Load config received but not applied to the prompt: {load_config.model_dump()}")

        provider = get_provider(ai_provider, self.settings, session=self.session)
        prompt = build_jmx_prompt(har_data)

        raw_text = provider.generate(prompt)
        jmx_content = validate_jmx_content(extract_jmx_content(raw_text))
        logger.info("JMeter XML generated successfully")

        summary = compute_summary(entries)

        return GenerateResponse(
            jmx_content=jmx_content,
            metadata=GenerationMetadata(
                provider=provider.display_name,
                generated_by_ai=True,
                test_plan_name=test_plan_name,
            ),
            summary=summary,
        )
