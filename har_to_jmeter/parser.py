"""
HAR decoding and summary statistics.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union
from urllib.parse import urlparse

from .errors import MalformedInputError
from .models import ResultSummary


# ============================================================================
# HAR LOADING AND DECODING
# ============================================================================

def parse_har_content(har_content: Union[str, Dict[str, Any]]) -> dict:
    """
    Decode HAR content received from a caller.

    Args:
        har_content: Raw HAR JSON text or an already parsed HAR object

    Returns:
        HAR data dict

    Raises:
        MalformedInputError: If the text is not valid JSON or the HAR has no log.entries
    """
    if isinstance(har_content, str):
        try:
            har_data = json.loads(har_content)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"HAR content is not valid JSON: {e}") from e
    else:
        har_data = har_content

    get_entries(har_data)
    return har_data


def load_har_file(har_path: Path) -> dict:
    """
    Load HAR file from disk with validation.

    Args:
        har_path: Path to HAR file

    Returns:
        HAR data dict

    Raises:
        MalformedInputError: If HAR format is invalid
        FileNotFoundError: If file doesn't exist
    """
    if not har_path.exists():
        raise FileNotFoundError(f"HAR file not found: {har_path}")

    with open(har_path, 'r', encoding='utf-8') as f:
        return parse_har_content(f.read())


def get_entries(har_data: Any) -> List[dict]:
    """Return the ordered entry list of a HAR document."""
    log = har_data.get('log') if isinstance(har_data, dict) else None
    entries = log.get('entries') if isinstance(log, dict) else None
    if not isinstance(entries, list):
        raise MalformedInputError("Invalid HAR format: missing log.entries")
    return entries


# ============================================================================
# SUMMARY STATISTICS
# ============================================================================

def extract_hostname(url: str) -> str:
    """
    Hostname of a request URL.

    Raises:
        MalformedInputError: If the URL is not absolute
    """
    if not isinstance(url, str):
        raise MalformedInputError(f"Invalid URL: {url!r}")
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise MalformedInputError(f"Invalid URL: {url}")
    return parsed.hostname or ''


def compute_summary(entries: List[dict]) -> ResultSummary:
    """
    Aggregate HAR entries into the result summary.

    Domains and methods keep first-seen order. The average response time
    is None for an empty entry list.

    Args:
        entries: HAR entries in capture order

    Returns:
        ResultSummary

    Raises:
        MalformedInputError: If an entry lacks request.url, request.method or time
    """
    domains: Dict[str, None] = {}
    methods: Dict[str, None] = {}
    total_time = 0.0

    for index, entry in enumerate(entries):
        try:
            request = entry['request']
            domains[extract_hostname(request['url'])] = None
            methods[request['method']] = None
            total_time += entry['time']
        except (KeyError, TypeError) as e:
            raise MalformedInputError(f"HAR entry {index} is malformed: {e!r}") from e

    avg_response_time = total_time / len(entries) if entries else None

    return ResultSummary(
        total_requests=len(entries),
        unique_domains=list(domains),
        methods_used=list(methods),
        avg_response_time=avg_response_time,
    )
