"""
Input validators for account data: framework-agnostic, pure functions.

Validators return booleans; the service layer decides which error to raise.
"""

from __future__ import annotations

import re
from typing import Optional

import validators as _validators

_PHONE_RE = re.compile(r"^\+?[0-9][0-9 ()-]{5,19}$")


def normalize_email(email: Optional[str]) -> str:
    """Canonical form used for every email write and lookup: trimmed, lowercase."""
    return (email or "").strip().lower()


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address."""
    return bool(email) and _validators.email(email) is True


def validate_password(
    password: str, min_length: int = 6, max_length: int = 128
) -> bool:
    """Return True if *password* length lies within ``[min_length, max_length]``."""
    return min_length <= len(password or "") <= max_length


def validate_phone(phone: str) -> bool:
    """Return True if *phone* looks like a phone number.

    Accepts an optional leading ``+``, then 6–20 characters of digits, spaces,
    parentheses or hyphens, starting with a digit.
    """
    return bool(_PHONE_RE.match(phone))


# Profile picture content types and the extension each is stored under
IMAGE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def image_extension(content_type: Optional[str]) -> Optional[str]:
    """Return the storage extension for an accepted image *content_type*.

    Parameters such as ``; charset=...`` are ignored. Anything outside
    ``IMAGE_EXTENSIONS`` (including ``image/svg+xml``) yields ``None``.
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return IMAGE_EXTENSIONS.get(mime)
