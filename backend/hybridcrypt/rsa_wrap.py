"""
Textbook RSA used to wrap the Hill key matrix for transport.

The key matrix is serialized to integers below the RSA modulus and each
integer is raised to the public exponent. Unwrapping reverses this and sends
the recovered matrix back through the key validator.
"""

import logging
from math import gcd, isqrt
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

from .alphabet import ALPHABET
from .errors import InvalidKeyError, KeyTooLargeError, MalformedInputError
from .key_validator import validate_key
from .matrix_math import matrix_math

logger = logging.getLogger(__name__)

PER_ENTRY = "per_entry"
PACKED = "packed"


class RSAKey(NamedTuple):
    exponent: int
    modulus: int


def mod_pow(base: int, exp: int, modulus: int) -> int:
    """Square-and-multiply modular exponentiation."""
    if modulus < 2:
        raise MalformedInputError("RSA modulus must be at least 2")
    if exp < 0:
        raise MalformedInputError("RSA exponent must be non-negative")
    result = 1
    base %= modulus
    while exp > 0:
        if exp & 1:
            result = (result * base) % modulus
        exp >>= 1
        base = (base * base) % modulus
    return result


def generate_keypair(p: int, q: int, e: int) -> Tuple[RSAKey, RSAKey]:
    """
    Derive (public, private) keys from two primes and a public exponent.

    d = e^-1 mod lcm(p-1, q-1). The primes are taken as given; no primality
    test is done.
    """
    if p < 2 or q < 2:
        raise InvalidKeyError("p and q must both be at least 2")
    if p == q:
        raise InvalidKeyError("p and q must be distinct")
    lam = (p - 1) * (q - 1) // gcd(p - 1, q - 1)
    if e < 2 or gcd(e, lam) != 1:
        raise InvalidKeyError(f"Public exponent {e} is not coprime to lambda(n)={lam}")
    d = matrix_math.mod_inverse(e, lam)
    n = p * q
    return RSAKey(e, n), RSAKey(d, n)


# --- KEY SERIALIZATION ---

def serialize_key(key: np.ndarray, encoding: str = PER_ENTRY) -> List[int]:
    entries = [int(v) for v in np.asarray(key).reshape(-1)]
    if encoding == PER_ENTRY:
        return entries
    if encoding == PACKED:
        # Leading 1 keeps leading zero entries from vanishing
        value = 1
        for v in entries:
            value = value * ALPHABET.size + v
        return [value]
    raise ValueError(f"Unknown wrap encoding: {encoding}")


def deserialize_key(values: Sequence[int]) -> List[List[int]]:
    """Inverse of serialize_key. One value means packed, more means per-entry."""
    values = list(values)
    if len(values) == 1:
        value = values[0]
        entries = []
        while value > 1:
            value, digit = divmod(value, ALPHABET.size)
            entries.append(digit)
        if value != 1:
            raise InvalidKeyError("Packed key is missing its sentinel digit")
        entries.reverse()
    else:
        entries = values

    n = isqrt(len(entries))
    if n < 2 or n * n != len(entries):
        raise InvalidKeyError(f"{len(entries)} key entries do not form a square matrix")
    return [entries[i * n:(i + 1) * n] for i in range(n)]


# --- WRAP / UNWRAP ---

def wrap(key, public_key: RSAKey, encoding: str = PER_ENTRY) -> List[int]:
    e, m = public_key
    values = serialize_key(validate_key(key), encoding)
    for v in values:
        if v >= m:
            raise KeyTooLargeError(
                f"Serialized key value {v} is not below the RSA modulus {m}; "
                f"use a larger modulus or per-entry encoding"
            )
    logger.debug("Wrapping %d key value(s) under modulus %d", len(values), m)
    return [mod_pow(v, e, m) for v in values]


def unwrap(wrapped: Sequence[int], private_key: RSAKey) -> np.ndarray:
    d, m = private_key
    # Accept lists, tuples and numpy arrays alike
    try:
        wrapped = [int(w) for w in wrapped]
    except (TypeError, ValueError):
        raise MalformedInputError("Wrapped key must be a sequence of integers")
    if not wrapped:
        raise MalformedInputError("Wrapped key is empty")
    for w in wrapped:
        if w < 0 or w >= m:
            raise InvalidKeyError(f"Wrapped value {w} is outside [0, {m})")
    values = [mod_pow(w, d, m) for w in wrapped]
    # Wrong key or tampering shows up here as a matrix the validator rejects
    return validate_key(deserialize_key(values))
