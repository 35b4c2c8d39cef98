"""
sd_jwt/issuer.py
Credential issuance: salted disclosures, digests and the signed SD-JWT.
"""
import logging
import time
from typing import Any, Optional

from . import jose
from .crypto import CREDENTIAL_LIFETIME, HASH_ALG_NAME, RandomSource
from .disclosure import build_digests, build_svc
from .errors import MalformedInputError, SigningKeyRequiredError
from .tree import NodeKind, kind_of, to_tree
from .wire import encode_svc, join_credential

logger = logging.getLogger(__name__)


def create_credential(
    claims: Any,
    issuer: str,
    issuer_key: Any,
    holder_public_key: Any = None,
    disclosure_structure: Any = None,
    *,
    allow_unsigned: bool = False,
    lifetime: int = CREDENTIAL_LIFETIME,
    now: Optional[int] = None,
    rng: Optional[RandomSource] = None
) -> str:
    """Create an SD-JWT credential plus the SVC for the holder.

    Every atomic position of the claims, as chosen by the disclosure
    structure, gets its own salt. The SVC carries the salted values,
    the signed body carries only their digests.

    Example:
        credential = create_credential(
            {"given_name": "Alice", "address": {"city": "Berlin"}},
            issuer="https://issuer.example",
            issuer_key=issuer_jwk,
            disclosure_structure={"address": {}},
        )

    Args:
        claims: Claim tree (dict) or dataclass instance
        issuer: Value of the iss claim
        issuer_key: Issuer private key (Ed25519 or RSA)
        holder_public_key: Holder public key to bind the credential to
        disclosure_structure: Tree with a composite node for every claim
            object/array that should be disclosable per field; default {}
            discloses each top-level claim as one unit
        allow_unsigned: Emit an alg "none" credential when issuer_key is None
        lifetime: Seconds between iat and exp
        now: Issuance time as epoch seconds (defaults to current time)
        rng: Optional random byte source for salts

    Returns:
        ``header.payload.signature.svc``

    Raises:
        SigningKeyRequiredError: No issuer key and allow_unsigned not set
        UnsupportedAlgorithmError: Issuer or holder key type not supported
        MalformedInputError: Claims are not a JSON object
    """
    if issuer_key is None and not allow_unsigned:
        raise SigningKeyRequiredError(
            "No issuer key given; pass allow_unsigned=True to emit an unsigned credential"
        )

    claims_tree = to_tree(claims)
    if kind_of(claims_tree) is not NodeKind.OBJECT:
        raise MalformedInputError("Claims must be a JSON object")
    structure = to_tree(disclosure_structure) if disclosure_structure is not None else {}

    svc_release = build_svc(structure, claims_tree, rng=rng)
    sd_digests = build_digests(structure, svc_release)

    issued_at = int(time.time()) if now is None else int(now)
    body = {
        'iss': issuer,
        'iat': issued_at,
        'exp': issued_at + lifetime,
        'sd_hash_alg': HASH_ALG_NAME,
        'sd_digests': sd_digests,
    }
    if holder_public_key is not None:
        body['cnf'] = jose.public_jwk(holder_public_key)

    if issuer_key is None:
        logger.warning("Issuing unsigned credential for issuer %s", issuer)
        sd_jwt = jose.sign_unsigned(body)
    else:
        sd_jwt = jose.sign(body, issuer_key)

    logger.info(
        "Issued credential iss=%s claims=%d holder_bound=%s",
        issuer, len(claims_tree), 'cnf' in body
    )
    return join_credential(sd_jwt, encode_svc(svc_release))
