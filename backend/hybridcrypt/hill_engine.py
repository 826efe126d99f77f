import numpy as np
from typing import Optional

from .alphabet import ALPHABET, PASSTHROUGH, STRICT
from .errors import MalformedCiphertextError, MalformedInputError
from .key_validator import validate_key
from .matrix_math import matrix_math


class HillCipher:
    def __init__(self, key, fill_symbol: str = "X"):
        # Every key goes through the validator before use
        self.key = validate_key(key, ALPHABET.size)
        self.n = self.key.shape[0]
        self.modulus = ALPHABET.size
        self.fill_symbol = fill_symbol

        self.inv_key = matrix_math.inverse(self.key, self.modulus)
        self.inv_key.setflags(write=False)

    def encrypt_block(self, block) -> np.ndarray:
        block = np.asarray(block, dtype=np.int64)
        if block.shape != (self.n,):
            raise ValueError(f"Block must have length {self.n}")
        return matrix_math.multiply(self.key, block, self.modulus)

    def decrypt_block(self, block) -> np.ndarray:
        block = np.asarray(block, dtype=np.int64)
        if block.shape != (self.n,):
            raise ValueError(f"Block must have length {self.n}")
        return matrix_math.multiply(self.inv_key, block, self.modulus)

    def _apply(self, matrix: np.ndarray, symbols: str) -> str:
        # All blocks at once: each column of `blocks` is one block
        blocks = ALPHABET.to_blocks(ALPHABET.encode(symbols), self.n)
        out = matrix_math.multiply(matrix, blocks, self.modulus)
        return ALPHABET.decode(ALPHABET.from_blocks(out))

    def encrypt(self, message: str) -> str:
        symbols = ALPHABET.normalize(message, STRICT)
        padded = ALPHABET.pad(symbols, self.n, self.fill_symbol)
        return self._apply(self.key, padded)

    def decrypt(self, ciphertext: str, message_length: Optional[int] = None) -> str:
        """
        Decrypt ciphertext produced by encrypt().

        Fill symbols stay at the tail unless message_length is given, in which
        case the output is cut to that many symbols.
        """
        symbols = ALPHABET.normalize(ciphertext, STRICT)
        if len(symbols) % self.n != 0:
            raise MalformedCiphertextError(
                f"Ciphertext length {len(symbols)} is not a multiple of block size {self.n}"
            )
        plaintext = self._apply(self.inv_key, symbols)
        if message_length is not None:
            if message_length < 0 or message_length > len(plaintext):
                raise MalformedInputError(
                    f"Message length {message_length} does not fit ciphertext of length {len(plaintext)}"
                )
            plaintext = plaintext[:message_length]
        return plaintext

    # --- PASSTHROUGH MODE ---

    def encrypt_preserving(self, message: str) -> str:
        """Encrypt the letters only; other characters keep their positions."""
        text = ALPHABET.normalize(message, PASSTHROUGH)
        letters, layout = ALPHABET.split_layout(text)
        if not letters:
            raise MalformedInputError("Message contains no letters to encrypt")
        return ALPHABET.reinsert(self.encrypt(letters), layout)

    def decrypt_preserving(self, ciphertext: str, message_length: Optional[int] = None) -> str:
        text = ALPHABET.normalize(ciphertext, PASSTHROUGH)
        letters, layout = ALPHABET.split_layout(text)
        if not letters:
            raise MalformedCiphertextError("Ciphertext contains no letters")
        plaintext = self.decrypt(letters, message_length)
        # Drop the letter slots of truncated padding, last ones first
        excess = len(letters) - len(plaintext)
        for pos in range(len(layout) - 1, -1, -1):
            if excess == 0:
                break
            if layout[pos] is None:
                del layout[pos]
                excess -= 1
        return ALPHABET.reinsert(plaintext, layout)
