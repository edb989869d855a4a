"""
Bot token encryption utilities.

Encrypts Telegram bot tokens at rest using Fernet (AES-128).
Requires ENCRYPTION_KEY environment variable (generate with: Fernet.generate_key()).
"""

import logging
from typing import Optional
from cryptography.fernet import Fernet, InvalidToken
from config.settings import settings

logger = logging.getLogger(__name__)


class TokenEncryption:
    """Handles encryption/decryption of stored bot tokens."""

    def __init__(self, key: Optional[str] = None):
        """Initialize with an explicit key or the ENCRYPTION_KEY setting."""
        self._cipher: Optional[Fernet] = None
        self._initialized = False

        if key is None:
            key = settings.encryption_key

        if not key:
            logger.warning(
                "ENCRYPTION_KEY not configured - bot tokens will be stored in plaintext! "
                "Generate key with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'"
            )
            return

        try:
            if isinstance(key, str):
                key = key.encode()

            self._cipher = Fernet(key)
            self._initialized = True
            logger.info("Token encryption initialized successfully")

        except (ValueError, TypeError) as e:
            logger.error(f"Failed to initialize token encryption: {e}")

    def encrypt(self, plaintext: Optional[str]) -> Optional[str]:
        """
        Encrypt a plaintext token.

        Empty values are stored as-is so that "not configured" stays detectable.
        """
        if not plaintext or not self._initialized:
            return plaintext

        return self._cipher.encrypt(plaintext.encode()).decode()

    def decrypt(self, encrypted: Optional[str]) -> Optional[str]:
        """
        Decrypt a stored token.

        Returns the input unchanged when encryption is disabled or the value
        was stored before encryption was enabled.
        """
        if not encrypted or not self._initialized:
            return encrypted

        try:
            return self._cipher.decrypt(encrypted.encode()).decode()
        except InvalidToken:
            # Plaintext token from before encryption was enabled
            logger.debug("Stored token is not Fernet-encrypted, returning as-is")
            return encrypted


# Global instance
_encryption_instance: Optional[TokenEncryption] = None


def get_token_encryption() -> TokenEncryption:
    """Get singleton token encryption instance."""
    global _encryption_instance
    if _encryption_instance is None:
        _encryption_instance = TokenEncryption()
    return _encryption_instance
