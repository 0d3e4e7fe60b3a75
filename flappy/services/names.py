"""
Display-name sanitization.

Player names come from outside the process and are treated as untrusted.
Everything that stores, submits or displays a name passes it through
sanitize_display_name first.
"""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_MAX_LENGTH = 20

_TAG_RE = re.compile(r"<[^>]*>")
_HANDLER_RE = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
_SCRIPT_WORD_RE = re.compile(r"javascript|vbscript|script", re.IGNORECASE)
_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9 \-]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_display_name(raw: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Reduce an untrusted name to a safe display string.

    Strips markup tags and script-like fragments, keeps only ASCII letters,
    digits, spaces and hyphens, collapses whitespace and caps the length.

    Args:
        raw: Untrusted input. None yields an empty string.
        max_length: Maximum length of the result.

    Returns:
        Sanitized name, possibly empty.

    Example:
        >>> sanitize_display_name("<script>alert(1)</script>")
        'alert1'
    """
    if raw is None:
        return ""

    text = _TAG_RE.sub("", str(raw))
    text = _HANDLER_RE.sub("", text)
    # Tabs and newlines separate words too; turn them into spaces before filtering
    text = _WHITESPACE_RE.sub(" ", text)
    text = _DISALLOWED_RE.sub("", text)

    # Removal can splice a new match together ("scrscriptipt"), so repeat
    previous = None
    while previous != text:
        previous = text
        text = _SCRIPT_WORD_RE.sub("", text)

    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:max(0, max_length)].strip()
