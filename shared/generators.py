"""
Random code and identifier generators: pure, side-effect-free functions.

All generators use cryptographically secure sources (``secrets`` module).
"""

from __future__ import annotations

import secrets

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp_code() -> str:
    """Generate a 6-digit numeric OTP, uniform over 100000–999999.

    Unlike a digit-by-digit draw, the code never starts with ``0``.

    Returns:
        String of six decimal digits.
    """
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def generate_token_id() -> str:
    """Generate a random identifier for the ``jti`` claim of issued tokens."""
    return secrets.token_hex(16)


def generate_upload_filename(owner_id: str, ext: str) -> str:
    """Build a collision-resistant storage name for an uploaded file.

    The client-supplied filename is never used; *ext* comes from the
    validated content type so the static mount serves the file as an image.

    Returns:
        ``"<owner_id>_<random hex><ext>"``
    """
    return f"{owner_id}_{secrets.token_hex(8)}{ext}"
