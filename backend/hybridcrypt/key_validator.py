import logging
from math import gcd

import numpy as np

from .alphabet import ALPHABET
from .errors import InvalidKeyError
from .matrix_math import matrix_math

logger = logging.getLogger(__name__)


def validate_key(matrix, modulus: int = ALPHABET.size) -> np.ndarray:
    """
    Single acceptance gate for Hill key matrices.

    Accepts a square matrix (n >= 2) of integers in [0, modulus) whose
    determinant is invertible mod modulus. Returns a read-only int64 copy.
    """
    try:
        key = np.array(matrix)
    except ValueError:
        raise InvalidKeyError("Key matrix rows have different lengths")

    if key.ndim != 2 or key.shape[0] != key.shape[1]:
        raise InvalidKeyError(f"Key matrix must be square, got shape {key.shape}")
    if key.shape[0] < 2:
        raise InvalidKeyError("Key matrix dimension must be at least 2")
    if not np.issubdtype(key.dtype, np.integer):
        raise InvalidKeyError("Key matrix entries must be integers")
    if key.min() < 0 or key.max() >= modulus:
        raise InvalidKeyError(f"Key matrix entries must lie in [0, {modulus})")

    det = matrix_math.determinant(key.tolist()) % modulus
    if gcd(det, modulus) != 1:
        raise InvalidKeyError(
            f"Determinant {det} (mod {modulus}) is not invertible; "
            f"it shares a factor with {modulus}"
        )

    key = key.astype(np.int64)
    key.setflags(write=False)
    return key


def is_valid_key(matrix, modulus: int = ALPHABET.size) -> bool:
    try:
        validate_key(matrix, modulus)
    except InvalidKeyError:
        return False
    return True


def random_key(size: int = 2, max_attempts: int = 1000, modulus: int = ALPHABET.size) -> np.ndarray:
    # Keep drawing until the validator accepts a matrix
    if size < 2:
        raise InvalidKeyError("Key matrix dimension must be at least 2")
    for attempt in range(1, max_attempts + 1):
        mat = np.random.randint(0, modulus, (size, size), dtype=np.int64)
        if is_valid_key(mat, modulus):
            logger.debug("Random %dx%d key accepted after %d attempts", size, size, attempt)
            return validate_key(mat, modulus)
    raise InvalidKeyError(
        f"No invertible {size}x{size} key found in {max_attempts} attempts"
    )
