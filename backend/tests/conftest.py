from math import gcd

import pytest

from hybridcrypt.config import Settings


@pytest.fixture
def hello_key():
    # det = 5, invertible mod 26
    return [[2, 3], [1, 4]]


@pytest.fixture
def demo_keypair():
    """(e, d, m) for p=3, q=11 computed without the code under test."""
    p, q, e = 3, 11, 3
    lam = (p - 1) * (q - 1) // gcd(p - 1, q - 1)
    d = pow(e, -1, lam)
    assert (e * d) % lam == 1
    return e, d, p * q


@pytest.fixture
def strict_settings():
    return Settings()


@pytest.fixture
def passthrough_settings():
    return Settings(text_policy="passthrough")
