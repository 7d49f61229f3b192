"""ISO 8601 duration codec for recipe timing fields"""

import logging
import re
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Hours before minutes, each optional, nothing else after the PT marker
DURATION_PATTERN = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?$")


@dataclass(frozen=True)
class Duration:
    """Non-negative span of whole hours and minutes"""
    hours: int = 0
    minutes: int = 0

    def is_zero(self) -> bool:
        return self.hours == 0 and self.minutes == 0

    def __str__(self) -> str:
        return format_duration(self)


ZERO_DURATION = Duration()


def parse_duration(value: Any) -> Duration:
    """
    Parse an ISO 8601 duration such as PT1H30M

    The parser is lenient: anything that does not look like
    PT[<n>H][<n>M] yields the zero duration instead of an error.

    Args:
        value: Duration string (other types are treated as empty)

    Returns:
        Parsed Duration
    """
    if not isinstance(value, str) or not value:
        return ZERO_DURATION

    match = DURATION_PATTERN.match(value.strip())
    if not match:
        logger.debug(f"Ignoring unparseable duration: {value!r}")
        return ZERO_DURATION

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return Duration(hours=hours, minutes=minutes)


def format_duration(duration: Duration) -> str:
    """
    Format a Duration as ISO 8601

    Args:
        duration: Duration to format

    Returns:
        String like PT1H30M, PT2H or PT45M; empty string for zero
    """
    if duration.is_zero():
        return ""

    result = "PT"
    if duration.hours > 0:
        result += f"{duration.hours}H"
    if duration.minutes > 0:
        result += f"{duration.minutes}M"
    return result


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def humanize_duration(value: Any) -> str:
    """
    Render an ISO 8601 duration as natural language

    Args:
        value: ISO 8601 duration string or Duration

    Returns:
        Phrase like "1 hour 30 minutes"; empty string for zero
    """
    duration = value if isinstance(value, Duration) else parse_duration(value)

    parts = []
    if duration.hours > 0:
        parts.append(_plural(duration.hours, "hour"))
    if duration.minutes > 0:
        parts.append(_plural(duration.minutes, "minute"))
    return " ".join(parts)


def coerce_duration(value: Any) -> Duration:
    """Coerce arbitrary field input into a Duration, falling back to zero"""
    if isinstance(value, Duration):
        return value
    if isinstance(value, str):
        return parse_duration(value)
    if isinstance(value, dict):
        try:
            hours = max(0, int(value.get("hours") or 0))
            minutes = max(0, int(value.get("minutes") or 0))
        except (TypeError, ValueError, OverflowError):
            return ZERO_DURATION
        return Duration(hours=hours, minutes=minutes)
    return ZERO_DURATION
