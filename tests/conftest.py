"""
tests/conftest.py
Shared keys and claim fixtures.
"""
import itertools

import pytest
from joserfc.jwk import OKPKey, RSAKey

from helpers import ISSUER


@pytest.fixture(scope="session")
def issuer_key():
    """Ed25519 issuer key pair."""
    return OKPKey.generate_key("Ed25519", auto_kid=True)


@pytest.fixture(scope="session")
def rsa_issuer_key():
    """RSA issuer key pair."""
    return RSAKey.generate_key(2048, auto_kid=True)


@pytest.fixture(scope="session")
def holder_key():
    """Ed25519 holder key pair."""
    return OKPKey.generate_key("Ed25519", auto_kid=True)


@pytest.fixture(scope="session")
def other_holder_key():
    """A second holder key pair, never bound to any credential."""
    return OKPKey.generate_key("Ed25519", auto_kid=True)


@pytest.fixture
def trusted_issuers(issuer_key):
    """Trust table with the issuer's public JWK."""
    return {ISSUER: issuer_key.as_dict(private=False)}


@pytest.fixture
def claims():
    """Sample person claims with nested object and array."""
    return {
        "given_name": "Alice",
        "family_name": "Smith",
        "email": "alice@example.com",
        "birthdate": "1990-01-01",
        "address": {
            "street_address": "Schulstr. 12",
            "locality": "Schulpforta",
            "country": "DE"
        },
        "nationalities": ["DE", "FR"]
    }


@pytest.fixture
def counting_rng():
    """Deterministic byte source: every call returns a new counter value."""
    counter = itertools.count(1)

    def rng(length):
        return next(counter).to_bytes(length, "big")

    return rng
