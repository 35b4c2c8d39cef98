"""
tests/helpers.py
Constants shared by the test modules.
"""

ISSUER = "https://issuer.example.com"
AUDIENCE = "https://verifier.example.com"
NONCE = "12345"
NOW = 1_700_000_000
