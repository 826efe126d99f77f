import re
from typing import List, Sequence, Union

from .alphabet import ALPHABET
from .errors import MalformedInputError
from .rsa_wrap import RSAKey


def _is_decimal(token: str) -> bool:
    return token.isascii() and token.isdigit()


def parse_key_matrix(text: str) -> List[List[int]]:
    """
    Parse "2 3\\n1 4" into [[2, 3], [1, 4]].
    Rows are newline separated, entries whitespace separated; entries are
    reduced mod 26.
    """
    if not text or not text.strip():
        raise MalformedInputError("Key matrix is empty")
    rows = []
    for line_no, line in enumerate(text.strip().splitlines(), start=1):
        if not line.strip():
            continue
        row = []
        for token in line.split():
            if not _is_decimal(token):
                raise MalformedInputError(
                    f"Key matrix entry {token!r} on row {line_no} is not a non-negative integer"
                )
            row.append(int(token) % ALPHABET.size)
        rows.append(row)
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise MalformedInputError("Key matrix rows have different lengths")
    if len(rows) != width:
        raise MalformedInputError(f"Key matrix must be square, got {len(rows)}x{width}")
    return rows


def format_key_matrix(matrix) -> str:
    return "\n".join(" ".join(str(int(v)) for v in row) for row in matrix)


def parse_rsa_key(text: str) -> RSAKey:
    """Parse "<exponent>,<modulus>"."""
    parts = [p.strip() for p in (text or "").split(",")]
    if len(parts) != 2 or not all(_is_decimal(p) for p in parts):
        raise MalformedInputError(
            f"RSA key must look like '<exponent>,<modulus>', got {text!r}"
        )
    exponent, modulus = int(parts[0]), int(parts[1])
    if modulus < 2:
        raise MalformedInputError("RSA modulus must be at least 2")
    return RSAKey(exponent, modulus)


def format_rsa_key(key: RSAKey) -> str:
    return f"{key.exponent},{key.modulus}"


def parse_wrapped_key(value: Union[str, Sequence[int]]) -> List[int]:
    """
    Accept a wrapped key as a list of ints or as a string like "27,27,8,31",
    "[27, 27, 8, 31]" or "27 27 8 31".
    """
    if isinstance(value, str):
        tokens = [t for t in re.split(r"[\s,]+", value.strip().strip("[]")) if t]
        if not tokens or not all(_is_decimal(t) for t in tokens):
            raise MalformedInputError(f"Wrapped key {value!r} is not a list of integers")
        return [int(t) for t in tokens]
    values = list(value)
    if not values:
        raise MalformedInputError("Wrapped key is empty")
    if any(isinstance(v, bool) or not isinstance(v, int) or v < 0 for v in values):
        raise MalformedInputError("Wrapped key values must be non-negative integers")
    return values


def format_wrapped_key(values: Sequence[int]) -> str:
    return ",".join(str(int(v)) for v in values)
