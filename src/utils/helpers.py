"""Utility functions for recipe field coercion and sanitizing"""

import logging
import math
import re
from typing import Any, Iterable, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def coerce_text(value: Any) -> str:
    """
    Coerce a scalar field value to text

    Args:
        value: Raw input value

    Returns:
        The string itself, numbers as text, empty string for anything else
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def coerce_string_list(value: Any) -> List[str]:
    """
    Coerce an array field value to a list of strings

    Numbers are kept as text; None, mappings and nested lists are dropped.

    Args:
        value: Raw input value

    Returns:
        List of strings (empty when value is not a list)
    """
    if not isinstance(value, (list, tuple)):
        return []

    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            items.append(str(item))
        else:
            logger.debug(f"Dropping non-string list element: {item!r}")
    return items


def unique_tags(tags: Iterable[str]) -> List[str]:
    """Drop empty and repeated tags, keeping first-seen order (exact match)"""
    seen = set()
    result = []
    for tag in tags:
        if not tag or tag in seen:
            continue
        seen.add(tag)
        result.append(tag)
    return result


def parse_int(raw: Any) -> int:
    """
    Read a non-negative integer from widget input

    Mirrors browser parseInt: the leading integer is used, anything
    unparseable becomes 0 and negatives are clamped to 0.

    Args:
        raw: Raw input (string, number or None)

    Returns:
        Non-negative integer
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return max(0, raw)
    if isinstance(raw, float):
        return max(0, int(raw)) if math.isfinite(raw) else 0

    match = LEADING_INT_PATTERN.match(str(raw) if raw is not None else "")
    if not match:
        return 0
    return max(0, int(match.group(1)))


def sanitize_text(value: Any) -> str:
    """
    Strip markup and collapse whitespace in a single-line text value

    Args:
        value: Raw text from agent parameters

    Returns:
        Plain text
    """
    text = coerce_text(value)
    if not text:
        return ""

    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text()

    # Remove extra whitespace
    return " ".join(text.split())


def sanitize_url(value: Any) -> str:
    """
    Keep a URL only if it is a proper http(s) URL

    Args:
        value: Raw URL

    Returns:
        Trimmed URL, or empty string when invalid
    """
    url = coerce_text(value).strip()
    return url if validate_url(url) else ""


def validate_url(url: str) -> bool:
    """
    Validate if string is a proper URL

    Args:
        url: URL string to validate

    Returns:
        True if valid URL, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme in ['http', 'https'], result.netloc])
    except ValueError:
        return False
