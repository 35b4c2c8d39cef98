"""
sd_jwt: Selective Disclosure for JWT credentials.

An issuer commits to a full claim set with salted SHA-256 digests in a
signed SD-JWT; the holder keeps the salted disclosures and later reveals
a chosen subset to a verifier in a signed, nonce-bound release document.
"""

from .crypto import (
    generate_salt,
    hash_disclosure,
    b64url_encode,
    b64url_decode,
    constant_time_compare,
    SALT_LENGTH,
    HASH_ALG_NAME,
    CREDENTIAL_LIFETIME,
    IAT_LEEWAY,
)

from .errors import (
    SdJwtError,
    MalformedInputError,
    UnsupportedAlgorithmError,
    UntrustedIssuerError,
    SignatureInvalidError,
    HolderBindingViolationError,
    DigestMismatchError,
    ClaimShapeInvalidError,
    TemporalInvalidError,
    ClaimMismatchError,
    SigningKeyRequiredError,
)

from .tree import (
    NodeKind,
    kind_of,
    to_tree,
    from_tree,
)

from .walk import walk_by_structure

from .disclosure import (
    SaltedDisclosure,
    build_salted_disclosure,
    build_digest,
    build_svc,
    build_digests,
    parse_salted_disclosure,
)

from .issuer import create_credential

from .holder import (
    create_presentation,
    select_disclosures,
    read_credential,
)

from .verify import (
    VerificationResult,
    verify_presentation,
    verify_presentation_result,
)

__version__ = "0.1.0"

__all__ = [
    # Crypto
    "generate_salt",
    "hash_disclosure",
    "b64url_encode",
    "b64url_decode",
    "constant_time_compare",
    "SALT_LENGTH",
    "HASH_ALG_NAME",
    "CREDENTIAL_LIFETIME",
    "IAT_LEEWAY",
    # Errors
    "SdJwtError",
    "MalformedInputError",
    "UnsupportedAlgorithmError",
    "UntrustedIssuerError",
    "SignatureInvalidError",
    "HolderBindingViolationError",
    "DigestMismatchError",
    "ClaimShapeInvalidError",
    "TemporalInvalidError",
    "ClaimMismatchError",
    "SigningKeyRequiredError",
    # Tree
    "NodeKind",
    "kind_of",
    "to_tree",
    "from_tree",
    "walk_by_structure",
    # Disclosures
    "SaltedDisclosure",
    "build_salted_disclosure",
    "build_digest",
    "build_svc",
    "build_digests",
    "parse_salted_disclosure",
    # Roles
    "create_credential",
    "create_presentation",
    "select_disclosures",
    "read_credential",
    "VerificationResult",
    "verify_presentation",
    "verify_presentation_result",
    # Meta
    "__version__",
]
