"""Parsing of the cache-control response header."""

import re
from typing import Any, Optional

from .constants import MAX_AGE_DIRECTIVE

_LEADING_INT = re.compile(r'\s*(\d+)')


def first_header_value(value: Any) -> Optional[str]:
    """Reduce a header value to a single string.

    Some clients report repeated headers as a list; only the first
    occurrence is used.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    return str(value)


def parse_max_age(cache_control: Any) -> Optional[int]:
    """Extract the max-age directive from a cache-control header.

    Directives are comma separated; when max-age occurs more than once the
    last one wins. Only the leading integer of the value is used.

    Args:
        cache_control: Raw header value (string or list of strings)

    Returns:
        max-age in seconds, or None if the directive is missing or has no
        usable value
    """
    header = first_header_value(cache_control)
    if not header:
        return None

    max_age = None
    for directive in header.strip().split(','):
        directive = directive.strip()
        if not directive.lower().startswith(MAX_AGE_DIRECTIVE):
            continue
        _name, _sep, raw_value = directive.partition('=')
        match = _LEADING_INT.match(raw_value)
        max_age = int(match.group(1)) if match else None

    return max_age
