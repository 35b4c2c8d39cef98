"""
sd_jwt/crypto.py
Digest, salt and encoding primitives for salted disclosures.
"""
import base64
import binascii
import hashlib
import hmac
import json
import secrets
from typing import Any, Callable, Optional

from .errors import MalformedInputError

# Protocol constants
SALT_LENGTH = 16  # 128 bits per disclosure
HASH_ALG_NAME = 'sha-256'  # value of the sd_hash_alg claim
CREDENTIAL_LIFETIME = 24 * 3600  # seconds between iat and exp
IAT_LEEWAY = 30  # seconds a token may appear to be issued in the future

RandomSource = Callable[[int], bytes]


def b64url_encode(data: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def b64url_decode(data: str) -> bytes:
    """Decode URL-safe base64 with or without padding.

    Raises:
        MalformedInputError: If the input is not valid base64url
    """
    if not isinstance(data, str):
        raise MalformedInputError("base64url segment must be a string")
    padded = data + '=' * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode('ascii'))
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputError(f"Invalid base64url segment: {exc}") from exc


def generate_salt(rng: Optional[RandomSource] = None) -> str:
    """Generate a 128-bit salt, base64url encoded.

    The default source is the secrets module (OS CSPRNG), which is
    safe to share between threads. Tests may pass any callable that
    returns the requested number of bytes.

    Args:
        rng: Optional byte source, called as rng(SALT_LENGTH)

    Returns:
        URL-safe base64 salt string
    """
    source = rng if rng is not None else secrets.token_bytes
    randomness = source(SALT_LENGTH)
    if len(randomness) != SALT_LENGTH:
        raise ValueError(f"Random source returned {len(randomness)} bytes, expected {SALT_LENGTH}")
    return b64url_encode(randomness)


def compact_json(data: Any) -> str:
    """Serialize to compact JSON, preserving key order and unicode."""
    return json.dumps(data, separators=(',', ':'), ensure_ascii=False)


def hash_disclosure(disclosure: str) -> str:
    """Digest a salted disclosure string.

    Format: BASE64URL(SHA256(UTF8(disclosure)))

    Args:
        disclosure: Canonical salted disclosure string

    Returns:
        Unpadded base64url digest

    Raises:
        MalformedInputError: If the text cannot be encoded as UTF-8
    """
    try:
        encoded = disclosure.encode('utf-8')
    except UnicodeEncodeError as exc:
        raise MalformedInputError(f"Disclosure is not valid UTF-8 text: {exc}") from exc
    return b64url_encode(hashlib.sha256(encoded).digest())


def constant_time_compare(a: str, b: str) -> bool:
    """Compare two digests in constant time."""
    try:
        return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))
    except UnicodeEncodeError:
        return False
