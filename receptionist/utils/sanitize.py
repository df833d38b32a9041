"""
Error message sanitization.

Turns raw exception text into something safe to show an end user or log
at lower sensitivity: first line only, with paths, token-like strings,
email addresses and phone-number-like runs replaced by placeholders.

Example:
    >>> sanitize_error_message("Bad key abc...xyz in /srv/app/tools.py:12")
    'Bad key abc...xyz in [path]'
"""

from __future__ import annotations

import re

MAX_ERROR_LENGTH = 200

_UNIX_PATH = re.compile(r"/\S+")
_WINDOWS_PATH = re.compile(r"\\\S+")
_TOKEN = re.compile(r"[A-Za-z0-9]{32,}")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE = re.compile(r"\+?[\d\s\-()]{10,}")


def sanitize_error_message(error: str | BaseException) -> str:
    """
    Sanitize an error for user-facing responses.

    Args:
        error: Error message or exception

    Returns:
        Sanitized single-line message, at most MAX_ERROR_LENGTH characters
    """
    message = str(error)

    # Stack traces and chained context live below the first line
    sanitized = message.split("\n", 1)[0]

    sanitized = _UNIX_PATH.sub("[path]", sanitized)
    sanitized = _WINDOWS_PATH.sub("[path]", sanitized)
    sanitized = _TOKEN.sub("[redacted]", sanitized)
    sanitized = _EMAIL.sub("[email]", sanitized)
    sanitized = _PHONE.sub(_replace_phone, sanitized)

    if len(sanitized) > MAX_ERROR_LENGTH:
        sanitized = sanitized[: MAX_ERROR_LENGTH - 3] + "..."

    return sanitized.strip()


def _replace_phone(match: re.Match[str]) -> str:
    # Keep surrounding whitespace so "call +1 555 123 4567 now" stays readable
    text = match.group(0)
    if not any(c.isdigit() for c in text):
        return text
    leading = text[: len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()) :]
    return f"{leading}[phone]{trailing}"
