"""
sd_jwt/verify.py
Presentation verification - signatures, time, binding, and digests.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type

from . import jose
from .crypto import HASH_ALG_NAME, IAT_LEEWAY, constant_time_compare, hash_disclosure
from .disclosure import parse_salted_disclosure
from .errors import (
    ClaimMismatchError,
    ClaimShapeInvalidError,
    DigestMismatchError,
    HolderBindingViolationError,
    MalformedInputError,
    SdJwtError,
    SignatureInvalidError,
    TemporalInvalidError,
    UntrustedIssuerError,
)
from .tree import NodeKind, from_tree, kind_of
from .walk import walk_by_structure
from .wire import split_presentation

logger = logging.getLogger(__name__)

# Marks a disclosure the holder chose not to reveal
_WITHHELD = object()


@dataclass
class VerificationResult:
    """Result of presentation verification."""
    is_valid: bool
    claims: Any = None
    error_kind: str = ""
    error_message: str = ""


def verify_claim(sd_digest: Any, disclosure: Any) -> Any:
    """Combinator: check one disclosure against its committed digest.

    Returns the disclosed value, or a withheld marker for a None entry.

    Raises:
        ClaimShapeInvalidError: Digest/disclosure are not strings, or the
            disclosure is not a [salt, value] pair
        DigestMismatchError: Disclosure does not hash to the digest
    """
    if disclosure is None:
        return _WITHHELD
    if not isinstance(sd_digest, str) or not isinstance(disclosure, str):
        raise ClaimShapeInvalidError("sd_digest and SVC structure is different")
    if not constant_time_compare(hash_disclosure(disclosure), sd_digest):
        raise DigestMismatchError("Could not verify credential claims (Claim has wrong hash value)")
    return parse_salted_disclosure(disclosure).value


def _drop_withheld(node: Any) -> Any:
    """Remove withheld entries; an object whose every entry was withheld
    is itself withheld. Array positions are kept as None."""
    if node is _WITHHELD:
        return _WITHHELD
    kind = kind_of(node)
    if kind is NodeKind.OBJECT:
        if not node:
            return node
        kept = {}
        for key, value in node.items():
            value = _drop_withheld(value)
            if value is not _WITHHELD:
                kept[key] = value
        return kept if kept else _WITHHELD
    if kind is NodeKind.ARRAY:
        if not node:
            return node
        items = [_drop_withheld(value) for value in node]
        if all(item is _WITHHELD for item in items):
            return _WITHHELD
        return [None if item is _WITHHELD else item for item in items]
    return node


def _check_time(claims: Dict[str, Any], now: int, leeway: int) -> None:
    iat = claims.get('iat')
    if iat is not None:
        if not isinstance(iat, (int, float)) or isinstance(iat, bool):
            raise MalformedInputError("iat must be a number")
        if not now > iat - leeway:
            raise TemporalInvalidError("JWT not yet valid")
    exp = claims.get('exp')
    if exp is not None:
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise MalformedInputError("exp must be a number")
        if not now < exp:
            raise TemporalInvalidError("JWT is expired")


def _verify_sd_jwt(sd_jwt: str, trusted_issuers: Mapping[str, Any]) -> Dict[str, Any]:
    body = jose.decode_payload(sd_jwt)
    issuer = body.get('iss')
    if issuer is None:
        raise UntrustedIssuerError("Could not find issuer in JWT")
    if not isinstance(issuer, str) or issuer not in trusted_issuers:
        raise UntrustedIssuerError(f"Issuer {issuer!r} is not trusted")
    if not jose.verify(sd_jwt, trusted_issuers[issuer]):
        raise SignatureInvalidError("Could not verify SD-JWT")
    if body.get('sd_hash_alg', HASH_ALG_NAME) != HASH_ALG_NAME:
        raise MalformedInputError(f"Unsupported sd_hash_alg {body['sd_hash_alg']!r}")
    if not isinstance(body.get('sd_digests'), dict):
        raise MalformedInputError("SD-JWT has no sd_digests object")
    return body


def _verify_release(release_jwt: str, holder_public_key: Any, allow_unbound: bool) -> Dict[str, Any]:
    body = jose.decode_payload(release_jwt)
    if holder_public_key is None:
        if not allow_unbound:
            raise HolderBindingViolationError(
                "SD-JWT has no holder binding; pass allow_unbound=True to accept it"
            )
    elif not jose.verify(release_jwt, holder_public_key):
        raise SignatureInvalidError("Could not verify SD-JWT-Release")
    if not isinstance(body.get('sd_release'), dict):
        raise MalformedInputError("SD-JWT-Release has no sd_release object")
    return body


def verify_presentation(
    presentation: str,
    trusted_issuers: Mapping[str, Any],
    expected_nonce: str,
    expected_audience: str,
    *,
    record_type: Optional[Type[Any]] = None,
    allow_unbound: bool = False,
    now: Optional[int] = None,
    leeway: int = IAT_LEEWAY
) -> Any:
    """Verify a presentation and return the disclosed claims.

    Checks run in order and the first failure aborts verification:
    segment count, issuer trust, issuer signature, iat/exp, holder
    binding signature, nonce/audience, then every disclosed digest.

    Withheld claims are left out of the result. Inside a partly disclosed
    array a withheld element keeps its position as None, so it cannot be
    told apart from a disclosed null.

    Args:
        presentation: ``header.payload.signature.rheader.rpayload.rsignature``
        trusted_issuers: Issuer id -> public key (JWK dict/JSON, PEM, key)
        expected_nonce: Nonce the verifier handed to the holder
        expected_audience: Verifier's own audience identifier
        record_type: Optional dataclass to map the disclosed claims into
        allow_unbound: Accept credentials without holder binding, whose
            release document is then not checked against any key
        now: Verification time as epoch seconds (defaults to current time)
        leeway: Seconds of clock skew tolerated on iat

    Returns:
        Dict of disclosed claims, or an instance of ``record_type``

    Raises:
        SdJwtError: The specific subclass for the failed check
    """
    parts = split_presentation(presentation)
    current_time = int(time.time()) if now is None else int(now)

    sd_jwt_claims = _verify_sd_jwt(parts.sd_jwt, trusted_issuers)
    _check_time(sd_jwt_claims, current_time, leeway)

    release_claims = _verify_release(parts.release, sd_jwt_claims.get('cnf'), allow_unbound)
    _check_time(release_claims, current_time, leeway)
    if release_claims.get('nonce') != expected_nonce:
        raise ClaimMismatchError("JWT claims verification failed (invalid nonce)")
    if release_claims.get('aud') != expected_audience:
        raise ClaimMismatchError("JWT claims verification failed (invalid audience)")

    disclosed = walk_by_structure(
        sd_jwt_claims['sd_digests'],
        release_claims['sd_release'],
        verify_claim,
        broadcast=False
    )
    disclosed = _drop_withheld(disclosed)
    if disclosed is _WITHHELD:
        disclosed = {}

    logger.info(
        "Verified presentation iss=%s disclosed=%d",
        sd_jwt_claims['iss'], len(disclosed)
    )
    if record_type is not None:
        return from_tree(record_type, disclosed)
    return disclosed


def verify_presentation_result(
    presentation: str,
    trusted_issuers: Mapping[str, Any],
    expected_nonce: str,
    expected_audience: str,
    **options: Any
) -> VerificationResult:
    """Verify a presentation, reporting failure in the result instead of raising.

    Accepts the same keyword options as ``verify_presentation``.
    """
    try:
        claims = verify_presentation(
            presentation, trusted_issuers, expected_nonce, expected_audience, **options
        )
    except SdJwtError as e:
        logger.warning("Presentation rejected: %s: %s", e.kind, e)
        return VerificationResult(
            is_valid=False,
            error_kind=e.kind,
            error_message=str(e)
        )
    return VerificationResult(is_valid=True, claims=claims)
