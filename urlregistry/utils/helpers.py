"""Helper utilities shared by the registry and its callers.

Functions:
    get_short_url(shortcode: str, base_url: str) -> str
        Get string representation of short URL for a given shortcode
    is_valid_url(value: str) -> bool
        Check that a string is a syntactically valid absolute URL
    is_valid_shortcode(value: str) -> bool
        Check that a string is 3-10 alphanumeric characters
    utcnow() -> datetime
        Current instant as a timezone-aware UTC datetime

Example:
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/abc123'
    >>> is_valid_url('not a url')
    False
    >>> is_valid_shortcode('ab')
    False
"""

import re
import urllib.parse
from datetime import datetime, UTC

from urlregistry.constants import Shortcode


_SHORTCODE_RE = re.compile(Shortcode.PATTERN)
_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*$')


def get_short_url(shortcode: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): public origin supplied by the caller, e.g. 'https://sho.rt'

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'


def is_valid_url(value: str) -> bool:
    """Check that a string is a syntactically valid absolute URL

    A valid URL has a scheme and a network location and contains no whitespace.
    Reachability is not checked.

    NOTE: host-less absolute URLs such as 'mailto:user@example.com' or
          'file:///etc/hosts' are rejected, even though a WHATWG URL parser
          accepts them. Only links that can be redirected to over a network
          location are registered.

    Args:
        value (str): candidate URL

    Returns:
        bool: True if the URL is absolute and well formed, False otherwise.

    Example:
        >>> is_valid_url('https://example.com/a?b=c')
        True
        >>> is_valid_url('example.com')
        False
    """
    if not isinstance(value, str) or not value or any(c.isspace() for c in value):
        return False

    try:
        components = urllib.parse.urlsplit(value)
        # Accessing .port validates the port component
        components.port
    except ValueError:
        return False

    return bool(_SCHEME_RE.match(components.scheme)) and bool(components.netloc) and bool(components.hostname)


def is_valid_shortcode(value: str) -> bool:
    return isinstance(value, str) and _SHORTCODE_RE.fullmatch(value) is not None


def utcnow() -> datetime:
    return datetime.now(UTC)

