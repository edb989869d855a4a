"""
Password hashing and access token handling.

Passwords are hashed with bcrypt at a fixed cost factor.
Access tokens are Fernet tokens (AES-128 + HMAC-SHA256) whose payload is the
user id; expiry is enforced with the timestamp Fernet embeds in every token.
"""

import base64
import hashlib
import logging
import time
from typing import Optional

import bcrypt
from cryptography.fernet import Fernet, InvalidToken

from config import settings

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class AuthenticationError(Exception):
    """Credentials or access token could not be verified."""
    pass


# ==================== PASSWORDS ====================

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


# ==================== ACCESS TOKENS ====================

class TokenSigner:
    """Issues and verifies access tokens carrying a user id."""

    def __init__(self, secret: str, ttl_days: int = 30):
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
        self._fernet = Fernet(key)
        self.ttl_seconds = ttl_days * SECONDS_PER_DAY

    def issue(self, user_id: int, issued_at: Optional[int] = None) -> str:
        """Create a token for a user. issued_at is a unix timestamp (defaults to now)."""
        payload = str(user_id).encode("utf-8")
        if issued_at is None:
            issued_at = int(time.time())
        return self._fernet.encrypt_at_time(payload, issued_at).decode("utf-8")

    def resolve(self, token: str, now: Optional[int] = None) -> int:
        """
        Verify a token and return the user id it carries.

        Raises:
            AuthenticationError: if the token is malformed, tampered with or expired
        """
        if not token:
            raise AuthenticationError("Missing token")

        if now is None:
            now = int(time.time())

        try:
            payload = self._fernet.decrypt_at_time(token.encode("utf-8"), self.ttl_seconds, now)
            return int(payload.decode("utf-8"))
        except (InvalidToken, ValueError) as e:
            raise AuthenticationError("Invalid token") from e


# Global instance
_token_signer: Optional[TokenSigner] = None


def get_token_signer() -> TokenSigner:
    """Get the token signer configured from settings."""
    global _token_signer
    if _token_signer is None:
        _token_signer = TokenSigner(settings.token_secret, settings.token_ttl_days)
    return _token_signer
