"""
Hybrid Hill/RSA cipher.

Hill cipher over A-Z for the message body, textbook RSA to wrap the key
matrix for transport.
"""

from .hybrid import decrypt, encrypt, handle_decrypt, handle_encrypt
from .errors import (
    HybridCipherError,
    InvalidKeyError,
    NotInvertibleError,
    MalformedInputError,
    InvalidCharacterError,
    MalformedCiphertextError,
    KeyTooLargeError,
    AmbiguousOrMissingKeyError,
)


__all__ = [
    'encrypt',
    'decrypt',
    'handle_encrypt',
    'handle_decrypt',
    'HybridCipherError',
    'InvalidKeyError',
    'NotInvertibleError',
    'MalformedInputError',
    'InvalidCharacterError',
    'MalformedCiphertextError',
    'KeyTooLargeError',
    'AmbiguousOrMissingKeyError',
]


__version__ = '1.0.0'
