"""
sd_jwt/wire.py
Dot-separated wire formats for credentials and presentations.

Credential:   header.payload.signature.svc
Presentation: header.payload.signature.rheader.rpayload.rsignature
"""
from dataclasses import dataclass
from typing import Any, Dict

from .crypto import b64url_decode, b64url_encode, compact_json
from .errors import MalformedInputError
from .tree import parse_json_object

CREDENTIAL_SEGMENTS = 4
PRESENTATION_SEGMENTS = 6
SVC_RELEASE_KEY = 'sd_release'


@dataclass
class CredentialParts:
    """A credential split into the issuer JWT and the SVC segment."""
    sd_jwt: str
    svc: str


@dataclass
class PresentationParts:
    """A presentation split into the issuer JWT and the release JWT."""
    sd_jwt: str
    release: str


def _split(value: str, expected: int, what: str) -> list:
    if not isinstance(value, str):
        raise MalformedInputError(f"{what} must be a string")
    parts = value.split('.')
    if len(parts) != expected:
        raise MalformedInputError(
            f"{what} has wrong format (Needed {expected} parts separated by '.')"
        )
    return parts


def split_credential(credential: str) -> CredentialParts:
    """Split ``header.payload.signature.svc``."""
    parts = _split(credential, CREDENTIAL_SEGMENTS, "Credential")
    return CredentialParts(sd_jwt='.'.join(parts[:3]), svc=parts[3])


def split_presentation(presentation: str) -> PresentationParts:
    """Split ``header.payload.signature.rheader.rpayload.rsignature``."""
    parts = _split(presentation, PRESENTATION_SEGMENTS, "Presentation")
    return PresentationParts(sd_jwt='.'.join(parts[:3]), release='.'.join(parts[3:]))


def join_credential(sd_jwt: str, svc_segment: str) -> str:
    return f"{sd_jwt}.{svc_segment}"


def join_presentation(sd_jwt: str, release_jwt: str) -> str:
    return f"{sd_jwt}.{release_jwt}"


def encode_svc(svc_release: Any) -> str:
    """Wrap the salted disclosure tree as {"sd_release": ...} and encode it."""
    return b64url_encode(compact_json({SVC_RELEASE_KEY: svc_release}).encode('utf-8'))


def decode_svc(segment: str) -> Dict[str, Any]:
    """Decode the SVC segment of a credential.

    Raises:
        MalformedInputError: Bad base64/JSON or no sd_release object
    """
    svc = parse_json_object(b64url_decode(segment), "SVC")
    release = svc.get(SVC_RELEASE_KEY)
    if not isinstance(release, dict):
        raise MalformedInputError("SVC has no sd_release object")
    return svc
