"""
Shared utilities
"""

from .crypto import CredentialCipher, build_cipher
from .dates import ensure_aware, local_date, parse_datetime, to_local_date, utcnow

__all__ = [
    "CredentialCipher",
    "build_cipher",
    "ensure_aware",
    "local_date",
    "parse_datetime",
    "to_local_date",
    "utcnow",
]
