"""
Encryption of credentials kept in the settings record

Uses Fernet symmetric encryption (AES-128-CBC with HMAC-SHA256)
"""

import base64
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
import structlog

logger = structlog.get_logger(__name__)

FERNET_PREFIX = "gAAAAA"


class CredentialCipher:
    """
    Encrypts and decrypts secrets such as the Telegram bot token

    Usage:
        cipher = CredentialCipher(master_key="your-secret-master-key")
        stored = cipher.encrypt("123456:ABC-DEF")
        token = cipher.decrypt(stored)
    """

    def __init__(self, master_key: str):
        if not master_key:
            raise ValueError("master_key is required for CredentialCipher")

        self._fernet = self._create_fernet(master_key)
        logger.info("credential_cipher_initialized")

    def _create_fernet(self, master_key: str) -> Fernet:
        """Derive the Fernet key from the master key with PBKDF2"""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b"repair-shop-settings-v1",
            iterations=480000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(master_key.encode()))
        return Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string; empty strings stay empty"""
        if not plaintext:
            return ""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a string; empty strings stay empty

        Raises:
            InvalidToken: Wrong master key or corrupted value
        """
        if not ciphertext:
            return ""

        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken:
            logger.error("credential_decryption_failed", reason="invalid_token")
            raise

    @staticmethod
    def is_encrypted(value: str) -> bool:
        """Fernet tokens are base64 and always start with 'gAAAAA'"""
        return bool(value) and value.startswith(FERNET_PREFIX)

    def encrypt_if_needed(self, value: str) -> str:
        if self.is_encrypted(value):
            return value
        return self.encrypt(value)

    def decrypt_if_needed(self, value: str) -> str:
        if not self.is_encrypted(value):
            return value
        return self.decrypt(value)


def build_cipher(master_key: Optional[str]) -> Optional[CredentialCipher]:
    """Cipher for the configured master key, or None when encryption is off"""
    if not master_key:
        return None
    return CredentialCipher(master_key)
