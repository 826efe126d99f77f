"""
Tests for RSA key wrapping of the Hill key matrix.
"""

from math import gcd

import numpy as np
import pytest

from hybridcrypt.errors import InvalidKeyError, KeyTooLargeError, MalformedInputError
from hybridcrypt.rsa_wrap import (
    PACKED,
    PER_ENTRY,
    RSAKey,
    deserialize_key,
    generate_keypair,
    mod_pow,
    serialize_key,
    unwrap,
    wrap,
)


class TestModPow:
    def test_matches_builtin(self):
        for base, exp, mod in [(4, 13, 497), (2, 0, 7), (123456789, 65537, 1000003), (0, 5, 33)]:
            assert mod_pow(base, exp, mod) == pow(base, exp, mod)

    def test_large_exponent(self):
        assert mod_pow(3, 2 ** 200 + 1, 10 ** 9 + 7) == pow(3, 2 ** 200 + 1, 10 ** 9 + 7)

    def test_rejects_bad_arguments(self):
        with pytest.raises(MalformedInputError):
            mod_pow(2, -1, 33)
        with pytest.raises(MalformedInputError):
            mod_pow(2, 3, 1)


class TestKeyPair:
    def test_demo_parameters(self):
        public, private = generate_keypair(3, 11, 3)
        assert public == RSAKey(3, 33)
        assert private == RSAKey(7, 33)

    def test_larger_primes(self):
        p, q, e = 4001, 4003, 65537
        public, private = generate_keypair(p, q, e)
        lam = (p - 1) * (q - 1) // gcd(p - 1, q - 1)
        assert (public.exponent * private.exponent) % lam == 1
        assert public.modulus == private.modulus == p * q

    @pytest.mark.parametrize("p,q,e", [(3, 3, 3), (1, 11, 3), (3, 11, 5), (5, 7, 2)])
    def test_rejected(self, p, q, e):
        with pytest.raises(InvalidKeyError):
            generate_keypair(p, q, e)


class TestSerialization:
    def test_per_entry(self, hello_key):
        assert serialize_key(np.array(hello_key), PER_ENTRY) == [2, 3, 1, 4]

    def test_packed_keeps_leading_zeros(self):
        key = [[0, 1], [1, 0]]
        packed = serialize_key(np.array(key), PACKED)
        assert len(packed) == 1
        assert deserialize_key(packed) == key

    def test_per_entry_round_trip(self):
        key = [[6, 24, 1], [13, 16, 10], [20, 17, 15]]
        assert deserialize_key(serialize_key(np.array(key))) == key

    def test_non_square_count(self):
        with pytest.raises(InvalidKeyError):
            deserialize_key([1, 2, 3])

    def test_unknown_encoding(self, hello_key):
        with pytest.raises(ValueError):
            serialize_key(np.array(hello_key), "base64")


class TestWrap:
    def test_wrap_values(self, hello_key, demo_keypair):
        e, d, m = demo_keypair
        assert wrap(hello_key, RSAKey(e, m)) == [8, 27, 1, 31]

    def test_round_trip(self, hello_key, demo_keypair):
        e, d, m = demo_keypair
        wrapped = wrap(hello_key, RSAKey(e, m))
        assert unwrap(wrapped, RSAKey(d, m)).tolist() == hello_key

    def test_unwrap_numpy_array(self, hello_key, demo_keypair):
        e, d, m = demo_keypair
        wrapped = np.array(wrap(hello_key, RSAKey(e, m)), dtype=np.int64)
        assert unwrap(wrapped, RSAKey(d, m)).tolist() == hello_key

    def test_round_trip_every_residue(self, demo_keypair):
        e, d, m = demo_keypair
        for v in range(m):
            assert mod_pow(mod_pow(v, e, m), d, m) == v

    def test_packed_round_trip(self):
        p, q, e = 4001, 4003, 65537
        lam = (p - 1) * (q - 1) // gcd(p - 1, q - 1)
        d = pow(e, -1, lam)
        key = [[0, 3], [5, 25]]
        wrapped = wrap(key, RSAKey(e, p * q), PACKED)
        assert len(wrapped) == 1
        assert unwrap(wrapped, RSAKey(d, p * q)).tolist() == key

    def test_entry_above_modulus(self):
        # det = 77 = 25 mod 26, valid key with an entry >= 15
        with pytest.raises(KeyTooLargeError):
            wrap([[20, 3], [1, 4]], RSAKey(3, 15))

    def test_packed_needs_big_modulus(self, hello_key, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(KeyTooLargeError):
            wrap(hello_key, RSAKey(e, m), PACKED)

    def test_invalid_key_not_wrapped(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(InvalidKeyError):
            wrap([[1, 1], [1, 1]], RSAKey(e, m))


class TestUnwrapFailures:
    def test_wrong_private_key(self, hello_key, demo_keypair):
        e, d, m = demo_keypair
        wrapped = wrap(hello_key, RSAKey(e, m))
        with pytest.raises(InvalidKeyError):
            unwrap(wrapped, RSAKey(3, m))

    def test_tampered_value(self, demo_keypair):
        e, d, m = demo_keypair
        # 20 unwraps to 26, outside the alphabet
        with pytest.raises(InvalidKeyError):
            unwrap([20, 27, 1, 31], RSAKey(d, m))

    def test_value_outside_modulus(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(InvalidKeyError):
            unwrap([8, 27, 1, 40], RSAKey(d, m))

    def test_wrong_count(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(InvalidKeyError):
            unwrap([8, 27, 1], RSAKey(d, m))

    def test_empty(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(MalformedInputError):
            unwrap([], RSAKey(d, m))

    def test_empty_numpy_array(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(MalformedInputError, match="empty"):
            unwrap(np.array([], dtype=np.int64), RSAKey(d, m))

    def test_non_integer_entries(self, demo_keypair):
        e, d, m = demo_keypair
        with pytest.raises(MalformedInputError):
            unwrap([8, None, 1, 31], RSAKey(d, m))
