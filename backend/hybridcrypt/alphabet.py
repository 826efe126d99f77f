import string
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidCharacterError, MalformedInputError

STRICT = "strict"
PASSTHROUGH = "passthrough"


class Alphabet:
    """Fixed bijection between the 26 Latin letters and residues mod 26."""

    def __init__(self, symbols: str = string.ascii_uppercase):
        self.symbols = symbols
        self.size = len(symbols)
        self._index: Dict[str, int] = {c: i for i, c in enumerate(symbols)}
        self._lower: Dict[str, str] = {c.lower(): c for c in symbols if c.lower() != c}

    @property
    def last_symbol(self) -> str:
        return self.symbols[-1]

    def __contains__(self, c) -> bool:
        return c in self._index

    def symbol_to_index(self, c: str) -> int:
        try:
            return self._index[c]
        except KeyError:
            raise InvalidCharacterError(f"Character {c!r} is not in the alphabet")

    def index_to_symbol(self, i: int) -> str:
        if not 0 <= i < self.size:
            raise InvalidCharacterError(f"Index {i} is outside [0, {self.size})")
        return self.symbols[i]

    def fold(self, c: str) -> str:
        """Map a lowercase alphabet letter to its symbol; anything else is returned as is."""
        return self._lower.get(c, c)

    def is_letter(self, c: str) -> bool:
        return c in self._index or c in self._lower

    def normalize(self, text: str, policy: str = STRICT) -> str:
        """
        Uppercase the text and apply the character policy.

        Only the alphabet's own letters are case-folded. Characters such as
        'ß' or 'ı', whose uppercase form happens to be Latin, are not letters.

        strict: every character must be a letter of the alphabet.
        passthrough: characters outside the alphabet are kept as they are.
        """
        if not text:
            raise MalformedInputError("Message must not be empty")
        if policy == PASSTHROUGH:
            return "".join(self.fold(c) for c in text)
        if policy != STRICT:
            raise ValueError(f"Unknown text policy: {policy}")
        for pos, c in enumerate(text):
            if not self.is_letter(c):
                raise InvalidCharacterError(
                    f"Character {c!r} at position {pos} is not in the alphabet"
                )
        return "".join(self.fold(c) for c in text)

    def encode(self, text: str) -> List[int]:
        return [self.symbol_to_index(c) for c in text]

    def decode(self, indices: Sequence[int]) -> str:
        return "".join(self.index_to_symbol(int(i)) for i in indices)

    def pad(self, seq: str, block_size: int, fill_symbol: Optional[str] = None) -> str:
        fill_symbol = fill_symbol or self.last_symbol
        if fill_symbol not in self._index:
            raise InvalidCharacterError(f"Fill symbol {fill_symbol!r} is not in the alphabet")
        remainder = len(seq) % block_size
        if remainder:
            seq = seq + fill_symbol * (block_size - remainder)
        return seq

    def to_blocks(self, indices: Sequence[int], block_size: int) -> np.ndarray:
        """
        Segment an index sequence into blocks.
        Returns an (n, k) array where column j is block j.
        """
        if len(indices) % block_size:
            raise ValueError("Sequence length must be a multiple of the block size")
        arr = np.asarray(indices, dtype=np.int64)
        return arr.reshape(-1, block_size).T

    def from_blocks(self, blocks: np.ndarray) -> List[int]:
        return blocks.T.reshape(-1).tolist()

    # --- PASSTHROUGH LAYOUT ---

    def split_layout(self, text: str) -> Tuple[str, List[Optional[str]]]:
        """
        Separate letters from everything else.
        The layout holds None where a letter stood, or the original character.
        """
        letters = []
        layout: List[Optional[str]] = []
        for c in text:
            if c in self._index:
                letters.append(c)
                layout.append(None)
            else:
                layout.append(c)
        return "".join(letters), layout

    def reinsert(self, symbols: str, layout: Sequence[Optional[str]]) -> str:
        out = []
        it = iter(symbols)
        for slot in layout:
            if slot is None:
                c = next(it, None)
                if c is None:
                    raise MalformedInputError("Layout has more letter slots than symbols")
                out.append(c)
            else:
                out.append(slot)
        # Padding symbols have no slot in the layout; they go at the end
        out.extend(it)
        return "".join(out)


ALPHABET = Alphabet()
