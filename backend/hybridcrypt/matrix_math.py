import numpy as np
from typing import List, Tuple

from .errors import NotInvertibleError


class MatrixMath:
    def __init__(self, modulus: int = 26):
        # Residue ring Z/26 for the 26-letter alphabet
        self.MODULUS = modulus

    def egcd(self, a: int, b: int) -> Tuple[int, int, int]:
        """Extended Euclid: returns (g, x, y) with a*x + b*y = g."""
        x0, x1 = 1, 0
        y0, y1 = 0, 1
        while b:
            q = a // b
            a, b = b, a - q * b
            x0, x1 = x1, x0 - q * x1
            y0, y1 = y1, y0 - q * y1
        return a, x0, y0

    def _modulus(self, modulus: int = None) -> int:
        m = self.MODULUS if modulus is None else modulus
        if m < 2:
            raise ValueError(f"Modulus must be at least 2, got {m}")
        return m

    def mod_inverse(self, a: int, modulus: int = None) -> int:
        """Multiplicative inverse of a modulo m."""
        m = self._modulus(modulus)
        g, x, _ = self.egcd(a % m, m)
        if g != 1:
            raise NotInvertibleError(f"{a} has no inverse modulo {m} (gcd={g})")
        return x % m

    def determinant(self, matrix) -> int:
        """
        Exact integer determinant using fraction-free Bareiss elimination.
        Works on Python ints so there is no float rounding.
        """
        a = [[int(v) for v in row] for row in matrix]
        n = len(a)
        if n == 0:
            return 1
        sign = 1
        prev = 1
        for k in range(n - 1):
            if a[k][k] == 0:
                # Swap in a row with a non-zero pivot
                for r in range(k + 1, n):
                    if a[r][k] != 0:
                        a[k], a[r] = a[r], a[k]
                        sign = -sign
                        break
                else:
                    return 0
            for i in range(k + 1, n):
                for j in range(k + 1, n):
                    a[i][j] = (a[i][j] * a[k][k] - a[i][k] * a[k][j]) // prev
            prev = a[k][k]
        return sign * a[n - 1][n - 1]

    def minor(self, matrix, row: int, col: int) -> List[List[int]]:
        return [
            [int(v) for j, v in enumerate(r) if j != col]
            for i, r in enumerate(matrix) if i != row
        ]

    def adjugate(self, matrix) -> List[List[int]]:
        """Transpose of the cofactor matrix."""
        n = len(matrix)
        adj = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(n):
                cofactor = self.determinant(self.minor(matrix, i, j))
                if (i + j) % 2:
                    cofactor = -cofactor
                adj[j][i] = cofactor
        return adj

    def multiply(self, a, b, modulus: int = None) -> np.ndarray:
        m = self._modulus(modulus)
        return (np.asarray(a, dtype=np.int64) @ np.asarray(b, dtype=np.int64)) % m

    def inverse(self, matrix, modulus: int = None) -> np.ndarray:
        """
        Modular inverse: det^-1 * adj(A) mod m.
        Raises NotInvertibleError when det(A) shares a factor with m.
        """
        m = self._modulus(modulus)
        det_inv = self.mod_inverse(self.determinant(matrix) % m, m)
        adj = np.array(self.adjugate(matrix), dtype=np.int64) % m
        return (det_inv * adj) % m


matrix_math = MatrixMath()
