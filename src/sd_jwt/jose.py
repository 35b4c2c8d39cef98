"""
sd_jwt/jose.py
JWS signing and verification dispatched by key type, plus JWK handling.

Supported keys: Ed25519 (JWS alg EdDSA) and RSA (JWS alg RS256).
Keys may be given as joserfc keys, JWK dicts, JWK JSON strings, PEM
text/bytes, or native cryptography key objects.
"""
import logging
from typing import Any, Dict, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa
from joserfc import jws
from joserfc.errors import JoseError
from joserfc.jwk import ECKey, OctKey, OKPKey, RSAKey, import_key

from .crypto import b64url_decode, b64url_encode, compact_json
from .errors import (
    MalformedInputError,
    UnsupportedAlgorithmError,
)
from .tree import parse_json_object

logger = logging.getLogger(__name__)

AsymmetricJWK = Union[OKPKey, RSAKey]

NONE_ALG = 'none'
NATIVE_KEY_TYPES = (
    ed25519.Ed25519PrivateKey,
    ed25519.Ed25519PublicKey,
    rsa.RSAPrivateKey,
    rsa.RSAPublicKey,
)


def parse_key(material: Any) -> AsymmetricJWK:
    """Load key material into a joserfc key.

    Args:
        material: OKPKey/RSAKey, JWK dict, JWK JSON text, PEM text/bytes,
            or a cryptography Ed25519/RSA key object

    Returns:
        OKPKey or RSAKey

    Raises:
        UnsupportedAlgorithmError: Key type other than Ed25519 or RSA
        MalformedInputError: Material cannot be parsed as a key
    """
    if isinstance(material, (OKPKey, RSAKey)):
        key = material
    elif isinstance(material, (ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey)):
        key = OKPKey(material, material)
    elif isinstance(material, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        key = RSAKey(material, material)
    elif isinstance(material, (ECKey, OctKey)):
        raise UnsupportedAlgorithmError(f"JWT signing algorithm not implemented for key type {material.key_type!r}")
    elif isinstance(material, dict):
        key = _import_jwk(material)
    elif isinstance(material, (str, bytes)):
        raw = material.encode('utf-8') if isinstance(material, str) else material
        if raw.lstrip().startswith(b'-----BEGIN'):
            native = _load_pem(raw)
            if not isinstance(native, NATIVE_KEY_TYPES):
                raise UnsupportedAlgorithmError(f"JWT signing algorithm not implemented for {type(native).__name__}")
            return parse_key(native)
        key = _import_jwk(parse_json_object(raw, "JWK"))
    else:
        raise MalformedInputError(f"Unsupported key material of type {type(material).__name__}")

    algorithm_for_key(key)
    return key


def _import_jwk(data: Dict[str, Any]) -> AsymmetricJWK:
    kty = data.get('kty')
    if kty not in ('OKP', 'RSA'):
        raise UnsupportedAlgorithmError(f"JWT signing algorithm not implemented for key type {kty!r}")
    try:
        return import_key(data, kty)
    except (JoseError, ValueError) as exc:
        raise MalformedInputError(f"Invalid JWK: {exc}") from exc


def _load_pem(raw: bytes) -> Any:
    try:
        if b'PRIVATE KEY' in raw:
            return serialization.load_pem_private_key(raw, password=None)
        return serialization.load_pem_public_key(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"Invalid PEM key: {exc}") from exc


def algorithm_for_key(key: Any) -> str:
    """Map a key to its JWS algorithm.

    Raises:
        UnsupportedAlgorithmError: For any key other than Ed25519 or RSA
    """
    if isinstance(key, OKPKey) and key.curve_name == 'Ed25519':
        return 'EdDSA'
    if isinstance(key, RSAKey):
        return 'RS256'
    raise UnsupportedAlgorithmError("JWT signing algorithm not implemented")


def public_jwk(key: Any) -> Dict[str, Any]:
    """Public members of a key as a JWK dict, suitable for a cnf claim."""
    return parse_key(key).as_dict(private=False)


def thumbprint(key: Any) -> str:
    """RFC 7638 thumbprint, equal for a private key and its public half."""
    return parse_key(key).thumbprint()


def sign(payload: Dict[str, Any], private_key: Any) -> str:
    """Sign a claims dict as a compact JWS.

    The header carries the algorithm and, when the key has one, its kid.

    Raises:
        UnsupportedAlgorithmError: Key type not supported
        MalformedInputError: Key has no private part
    """
    key = parse_key(private_key)
    if not key.is_private:
        raise MalformedInputError("A private key is required for signing")

    alg = algorithm_for_key(key)
    header = {'alg': alg}
    if key.kid:
        header['kid'] = key.kid

    return jws.serialize_compact(
        header,
        compact_json(payload).encode('utf-8'),
        key,
        algorithms=[alg]
    )


def sign_unsigned(payload: Dict[str, Any]) -> str:
    """Encode a claims dict as an unsecured JWS (alg none, empty signature)."""
    header = b64url_encode(compact_json({'alg': NONE_ALG}).encode('utf-8'))
    body = b64url_encode(compact_json(payload).encode('utf-8'))
    return f"{header}.{body}."


def verify(token: str, public_key: Any) -> bool:
    """Verify a compact JWS signature against a public key.

    Unsecured tokens (alg none) and tokens whose alg does not match the
    key type never verify.

    Raises:
        UnsupportedAlgorithmError: Key type not supported
    """
    key = parse_key(public_key)
    alg = algorithm_for_key(key)
    header = decode_header(token)
    if header.get('alg') != alg:
        logger.debug("JWS alg %r does not match key algorithm %s", header.get('alg'), alg)
        return False

    try:
        jws.deserialize_compact(token, key, algorithms=[alg])
    except JoseError as exc:
        logger.debug("JWS verification failed: %s", exc)
        return False
    return True


def split_token(token: str) -> list:
    """Split a compact JWS into its three segments.

    Raises:
        MalformedInputError: If there are not exactly three segments
    """
    parts = token.split('.')
    if len(parts) != 3:
        raise MalformedInputError("JWT must have 3 parts separated by '.'")
    return parts


def decode_header(token: str) -> Dict[str, Any]:
    """Decode the protected header without verifying the signature."""
    return parse_json_object(b64url_decode(split_token(token)[0]), "JWT header")


def decode_payload(token: str) -> Dict[str, Any]:
    """Decode the claims of a compact JWS without verifying the signature."""
    return parse_json_object(b64url_decode(split_token(token)[1]), "JWT payload")
