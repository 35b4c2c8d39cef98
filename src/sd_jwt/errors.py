"""
sd_jwt/errors.py
Error kinds raised by issuance, presentation and verification.
"""


class SdJwtError(Exception):
    """Base class for every selective disclosure failure.

    Each subclass carries a stable ``kind`` string so callers can
    report or branch on the failure without matching messages.
    """
    kind = "SdJwtError"


class MalformedInputError(SdJwtError):
    """Wrong segment count, unparsable JSON/base64, or mismatched arrays."""
    kind = "MalformedInput"


class UnsupportedAlgorithmError(SdJwtError):
    """Key type or JWS algorithm is not implemented."""
    kind = "UnsupportedAlgorithm"


class UntrustedIssuerError(SdJwtError):
    """Credential issuer is missing from the trust table."""
    kind = "UntrustedIssuer"


class SignatureInvalidError(SdJwtError):
    """Credential or release document signature does not verify."""
    kind = "SignatureInvalid"


class HolderBindingViolationError(SdJwtError):
    """Holder binding is required but missing or bound to another key."""
    kind = "HolderBindingViolation"


class DigestMismatchError(SdJwtError):
    """A disclosure does not hash to the digest the issuer committed to."""
    kind = "DigestMismatch"


class ClaimShapeInvalidError(SdJwtError):
    """A disclosure is not a string holding a two-element salted pair."""
    kind = "ClaimShapeInvalid"


class TemporalInvalidError(SdJwtError):
    """Token is not yet valid or already expired."""
    kind = "TemporalInvalid"


class ClaimMismatchError(SdJwtError):
    """Release document nonce or audience differs from the expected value."""
    kind = "ClaimMismatch"


class SigningKeyRequiredError(SdJwtError):
    """An unsigned token was requested without explicitly opting in."""
    kind = "SigningKeyRequired"
