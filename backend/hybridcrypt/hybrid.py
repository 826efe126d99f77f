"""
Hybrid Hill/RSA orchestration.

encrypt: validate key -> Hill-encrypt message -> optionally RSA-wrap the key.
decrypt: resolve the key (direct matrix, or wrapped key + private key) ->
Hill-decrypt.

The top-level operations never raise for cipher errors; failures come back
as a CipherFailure on the outcome.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict

from .alphabet import ALPHABET, PASSTHROUGH
from .config import Settings, get_settings
from .errors import AmbiguousOrMissingKeyError, HybridCipherError, NotInvertibleError
from .hill_engine import HillCipher
from .parsing import format_wrapped_key, parse_key_matrix, parse_rsa_key, parse_wrapped_key
from .rsa_wrap import RSAKey, unwrap, wrap
from .schemas import DecryptRequest, DecryptResponse, EncryptRequest, EncryptResponse

logger = logging.getLogger(__name__)


class CipherFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    message: str


class EncryptionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ciphertext: str
    wrapped_key: Optional[List[int]] = None
    timestamp: str
    message_length: int


class EncryptOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: Optional[EncryptionResult] = None
    error: Optional[CipherFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DecryptOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: Optional[str] = None
    error: Optional[CipherFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failure(exc: HybridCipherError, operation: str) -> CipherFailure:
    if isinstance(exc, NotInvertibleError):
        # Validation should have stopped this key earlier
        logger.error("%s hit NotInvertible past key validation: %s", operation, exc)
    else:
        logger.warning("%s failed: %s", operation, exc.kind)
    return CipherFailure(kind=exc.kind, message=str(exc))


def _count_letters(message: str) -> int:
    return sum(1 for c in message if ALPHABET.is_letter(c))


def encrypt(
    message: str,
    key_matrix,
    public_key: Optional[RSAKey] = None,
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> EncryptOutcome:
    settings = settings or get_settings()
    try:
        cipher = HillCipher(key_matrix, fill_symbol=settings.fill_symbol)
        if settings.text_policy == PASSTHROUGH:
            ciphertext = cipher.encrypt_preserving(message)
        else:
            ciphertext = cipher.encrypt(message)

        wrapped_key = None
        if public_key is not None:
            wrapped_key = wrap(cipher.key, public_key, settings.wrap_encoding)
    except HybridCipherError as exc:
        return EncryptOutcome(error=_failure(exc, "encrypt"))

    result = EncryptionResult(
        ciphertext=ciphertext,
        wrapped_key=wrapped_key,
        timestamp=clock().strftime(settings.timestamp_format),
        message_length=_count_letters(message),
    )
    logger.debug("Encrypted %d symbols with a %dx%d key", result.message_length, cipher.n, cipher.n)
    return EncryptOutcome(result=result)


DIRECT_KEY = "direct"
WRAPPED_KEY = "wrapped"


def select_key_path(has_key_matrix: bool, has_wrapped_key: bool, has_private_key: bool) -> str:
    """Exactly one of: key matrix, or wrapped key together with a private key."""
    if has_key_matrix and (has_wrapped_key or has_private_key):
        raise AmbiguousOrMissingKeyError(
            "Provide either a key matrix or an encrypted key with a private key, not both"
        )
    if has_key_matrix:
        return DIRECT_KEY
    if not (has_wrapped_key and has_private_key):
        raise AmbiguousOrMissingKeyError(
            "Provide either a key matrix or an encrypted key with a private key"
        )
    return WRAPPED_KEY


def resolve_key(key_matrix=None, wrapped_key=None, private_key: Optional[RSAKey] = None):
    path = select_key_path(
        key_matrix is not None, wrapped_key is not None, private_key is not None
    )
    if path == DIRECT_KEY:
        return key_matrix
    return unwrap(wrapped_key, private_key)


def decrypt(
    ciphertext: str,
    key_matrix=None,
    wrapped_key: Optional[List[int]] = None,
    private_key: Optional[RSAKey] = None,
    message_length: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> DecryptOutcome:
    settings = settings or get_settings()
    try:
        key = resolve_key(key_matrix, wrapped_key, private_key)
        cipher = HillCipher(key, fill_symbol=settings.fill_symbol)
        if settings.text_policy == PASSTHROUGH:
            message = cipher.decrypt_preserving(ciphertext, message_length)
        else:
            message = cipher.decrypt(ciphertext, message_length)
    except HybridCipherError as exc:
        return DecryptOutcome(error=_failure(exc, "decrypt"))
    return DecryptOutcome(message=message)


# --- WIRE LEVEL ---

def handle_encrypt(req: EncryptRequest, settings: Optional[Settings] = None):
    """Parse an encrypt request and run it. Returns EncryptResponse or CipherFailure."""
    try:
        key = parse_key_matrix(req.key_matrix)
        public_key = parse_rsa_key(req.public_key) if req.public_key else None
    except HybridCipherError as exc:
        return _failure(exc, "encrypt")

    outcome = encrypt(req.message, key, public_key, settings=settings)
    if not outcome.ok:
        return outcome.error
    result = outcome.result
    return EncryptResponse(
        encrypted_message=result.ciphertext,
        encrypted_key=format_wrapped_key(result.wrapped_key) if result.wrapped_key is not None else None,
        timestamp=result.timestamp,
        message_length=result.message_length,
    )


def handle_decrypt(req: DecryptRequest, settings: Optional[Settings] = None):
    """Parse a decrypt request and run it. Returns DecryptResponse or CipherFailure."""
    try:
        select_key_path(bool(req.key_matrix), bool(req.encrypted_key), bool(req.private_key))
        key = parse_key_matrix(req.key_matrix) if req.key_matrix else None
        wrapped_key = parse_wrapped_key(req.encrypted_key) if req.encrypted_key else None
        private_key = parse_rsa_key(req.private_key) if req.private_key else None
    except HybridCipherError as exc:
        return _failure(exc, "decrypt")

    outcome = decrypt(
        req.encrypted_message,
        key_matrix=key,
        wrapped_key=wrapped_key,
        private_key=private_key,
        message_length=req.message_length,
        settings=settings,
    )
    if not outcome.ok:
        return outcome.error
    return DecryptResponse(decrypted_message=outcome.message)
