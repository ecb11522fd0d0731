"""
Remote image allow-list

Patterns have the form ``protocol://hostname-glob``. ``*`` matches a single
hostname label and ``**`` matches any number of labels, so ``https://**``
allows every https host.
"""
import re
from functools import lru_cache
from typing import Iterable, Optional
from urllib.parse import urlparse

from reflect.core.config import get_settings


@lru_cache(maxsize=64)
def _compile_host_glob(glob: str) -> "re.Pattern[str]":
    parts = []
    for chunk in re.split(r"(\*\*|\*)", glob):
        if chunk == "**":
            parts.append(r".+")
        elif chunk == "*":
            parts.append(r"[^.]+")
        else:
            parts.append(re.escape(chunk))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


def _split_pattern(pattern: str):
    protocol, sep, host_glob = pattern.partition("://")
    if not sep:
        return "https", pattern
    return protocol.lower(), host_glob


def is_allowed_image_url(url: Optional[str], patterns: Optional[Iterable[str]] = None) -> bool:
    """Check a remote image URL against the configured patterns"""
    if not url:
        return False

    parsed = urlparse(url)
    if not parsed.scheme or not parsed.hostname:
        return False

    if patterns is None:
        patterns = get_settings().image_remote_patterns_list

    for pattern in patterns:
        protocol, host_glob = _split_pattern(pattern)
        if parsed.scheme.lower() != protocol:
            continue
        if _compile_host_glob(host_glob).match(parsed.hostname):
            return True
    return False
