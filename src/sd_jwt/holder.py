"""
sd_jwt/holder.py
Presentation construction: pick disclosures from the SVC and bind them
to a verifier's nonce and audience.
"""
import logging
from typing import Any, Dict

from . import jose
from .crypto import constant_time_compare, hash_disclosure
from .disclosure import parse_salted_disclosure
from .errors import (
    ClaimShapeInvalidError,
    DigestMismatchError,
    HolderBindingViolationError,
    SigningKeyRequiredError,
)
from .tree import ClaimNode, NodeKind, kind_of, to_tree
from .walk import walk_by_structure
from .wire import SVC_RELEASE_KEY, decode_svc, join_presentation, split_credential

logger = logging.getLogger(__name__)


def _withhold(svc_node: Any) -> Any:
    """Keep the shape of an SVC subtree with every disclosure replaced by None."""
    kind = kind_of(svc_node)
    if kind is NodeKind.OBJECT:
        return {key: _withhold(value) for key, value in svc_node.items()}
    if kind is NodeKind.ARRAY:
        return [_withhold(value) for value in svc_node]
    return None


def choose_claim(release_claim: Any, svc_node: Any) -> Any:
    """Combinator: reveal the SVC subtree when the holder selected it."""
    if release_claim is None:
        return _withhold(svc_node)
    return svc_node


def select_disclosures(svc_release: ClaimNode, release_claims: Any) -> ClaimNode:
    """Select the disclosures to reveal, without touching the SVC.

    ``release_claims`` mirrors the claim tree; any non-None value reveals
    the disclosure(s) at that position, a missing key or None withholds
    them. Withheld positions stay in the result as None.
    """
    return walk_by_structure(to_tree(release_claims), svc_release, choose_claim)


def create_presentation(
    credential: str,
    release_claims: Any,
    audience: str,
    nonce: str,
    holder_key: Any = None,
    *,
    allow_unbound: bool = False
) -> str:
    """Create an SD-JWT presentation disclosing only the selected claims.

    Args:
        credential: ``header.payload.signature.svc`` from the issuer
        release_claims: Tree (or dataclass) with a non-None value for
            every claim to disclose
        audience: Value of the aud claim in the release document
        nonce: Value of the nonce claim in the release document
        holder_key: Holder private key, required for bound credentials
        allow_unbound: Emit an unsigned release document when the
            credential is not holder bound and no holder key is given

    Returns:
        ``header.payload.signature.rheader.rpayload.rsignature``

    Raises:
        HolderBindingViolationError: Bound credential without the bound key
        SigningKeyRequiredError: Unbound, no holder key, allow_unbound unset
        MalformedInputError: Credential or selection cannot be decoded
    """
    parts = split_credential(credential)
    svc = decode_svc(parts.svc)
    body = jose.decode_payload(parts.sd_jwt)

    release_document = {
        'nonce': nonce,
        'aud': audience,
        'sd_release': select_disclosures(svc[SVC_RELEASE_KEY], release_claims),
    }

    bound_key = body.get('cnf')
    if bound_key is not None:
        if holder_key is None:
            raise HolderBindingViolationError(
                "SD-JWT has holder binding. SD-JWT-R must be signed with the holder key."
            )
        if jose.thumbprint(bound_key) != jose.thumbprint(holder_key):
            raise HolderBindingViolationError("Passed holder key is not the same as in the credential")

    if holder_key is not None:
        release_jwt = jose.sign(release_document, holder_key)
    elif allow_unbound:
        release_jwt = jose.sign_unsigned(release_document)
    else:
        raise SigningKeyRequiredError(
            "No holder key given; pass allow_unbound=True to emit an unsigned release document"
        )

    logger.info("Created presentation aud=%s holder_bound=%s", audience, bound_key is not None)
    return join_presentation(parts.sd_jwt, release_jwt)


def _reveal(structure_node: Any, disclosure: Any) -> Any:
    if not isinstance(disclosure, str):
        raise ClaimShapeInvalidError("SVC value is not a string")
    digest = structure_node if isinstance(structure_node, str) else None
    if digest is None or not constant_time_compare(hash_disclosure(disclosure), digest):
        raise DigestMismatchError("SVC entry does not match the committed digest")
    return parse_salted_disclosure(disclosure).value


def read_credential(credential: str) -> Dict[str, Any]:
    """Return the full claim set held in a credential's SVC.

    Each disclosure is checked against the digest in the (unverified)
    credential body, so a holder can confirm the SVC belongs to the
    credential before presenting it.

    Raises:
        DigestMismatchError: An SVC entry does not match its digest
        MalformedInputError: Credential cannot be decoded or an SVC entry is not UTF-8 text
    """
    parts = split_credential(credential)
    svc = decode_svc(parts.svc)
    body = jose.decode_payload(parts.sd_jwt)
    return walk_by_structure(body.get('sd_digests', {}), svc[SVC_RELEASE_KEY], _reveal, broadcast=False)
