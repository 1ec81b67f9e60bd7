"""Authentication token generation and comparison.

Tokens are opaque random strings stored on each authenticatable record.
Their format is deliberately simple: verification is a constant-time
string comparison against the stored value.
"""

from __future__ import annotations

import hmac
import secrets
from typing import Optional

DEFAULT_TOKEN_LENGTH = 20

# Characters easily confused when a token is read or typed by hand
_AMBIGUOUS = str.maketrans("lIO0", "sxyz")


class TokenGenerator:
    """Generates URL-safe "friendly" tokens.

    Example:
        token = TokenGenerator().generate_token()
        len(token)  # 20
    """

    def __init__(self, length: int = DEFAULT_TOKEN_LENGTH) -> None:
        if length < 8:
            raise ValueError("Token length must be at least 8 characters")
        self.length = length

    def generate_token(self) -> str:
        # token_urlsafe(n) yields ceil(4n/3) characters
        raw = secrets.token_urlsafe((self.length * 3) // 4 + 1)
        return raw[: self.length].translate(_AMBIGUOUS)


class TokenComparator:
    """Constant-time token comparison."""

    def compare(self, a: Optional[str], b: Optional[str]) -> bool:
        """Return True when both tokens are present and equal.

        Blank or missing values never match, even each other.
        """
        if not a or not b:
            return False
        return hmac.compare_digest(a.encode(), b.encode())
