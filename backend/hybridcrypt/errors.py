"""
Error types for the hybrid Hill/RSA cipher.

Every error carries a machine-readable ``kind`` that the orchestrator and the
HTTP layer report back to the caller.
"""


class HybridCipherError(Exception):
    """Base exception for cipher operations."""
    kind = "CipherError"


class InvalidKeyError(HybridCipherError):
    """Raised when a key matrix is not square or its determinant is not invertible."""
    kind = "InvalidKey"


class NotInvertibleError(HybridCipherError):
    """Raised when a modular inverse does not exist."""
    kind = "NotInvertible"


class MalformedInputError(HybridCipherError):
    """Raised when key material or text cannot be parsed."""
    kind = "MalformedInput"


class InvalidCharacterError(MalformedInputError):
    """Raised when text contains a symbol outside the alphabet."""
    kind = "InvalidCharacter"


class MalformedCiphertextError(HybridCipherError):
    """Raised when ciphertext length is not a multiple of the block size."""
    kind = "MalformedCiphertext"


class KeyTooLargeError(HybridCipherError):
    """Raised when a serialized key value does not fit under the RSA modulus."""
    kind = "KeyTooLarge"


class AmbiguousOrMissingKeyError(HybridCipherError):
    """Raised when a decrypt request gives neither or both key paths."""
    kind = "AmbiguousOrMissingKey"
