"""
examples/complete_workflow.py
End-to-end example: Issue → Store → Present → Verify
"""
import json
import sys
import os

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from joserfc.jwk import OKPKey

from sd_jwt import (
    create_credential,
    create_presentation,
    read_credential,
    verify_presentation_result,
)

# ============================================================
# STEP 1: ISSUER - Keys and Claims
# ============================================================

issuer = "https://issuer.example.com"
issuer_key = OKPKey.generate_key("Ed25519", auto_kid=True)
holder_key = OKPKey.generate_key("Ed25519", auto_kid=True)

user_claims = {
    "sub": "6c5c0a49-b589-431d-bae7-219122a9ec2c",
    "given_name": "John",
    "family_name": "Doe",
    "email": "johndoe@example.com",
    "phone_number": "+1-202-555-0101",
    "address": {
        "street_address": "123 Main St",
        "locality": "Anytown",
        "region": "Anystate",
        "country": "US"
    },
    "birthdate": "1940-01-01",
    "nationalities": ["US", "DE"]
}

# Address fields and nationalities are disclosable one by one
disclosure_structure = {"address": {}, "nationalities": [None]}

print("=" * 60)
print("SD-JWT: Selective Disclosure for JSON Web Tokens")
print("=" * 60)
print()

# ============================================================
# STEP 2: Issue Credential
# ============================================================

credential = create_credential(
    user_claims,
    issuer,
    issuer_key,
    holder_public_key=holder_key.as_dict(private=False),
    disclosure_structure=disclosure_structure
)

print(f"✓ Credential issued by {issuer}")
print(f"✓ Wire format: {len(credential.split('.'))} segments, {len(credential)} chars")

# ============================================================
# STEP 3: HOLDER - Store and Inspect Credential
# ============================================================

print()
print("-" * 60)
print("HOLDER WALLET")
print("-" * 60)

stored_claims = read_credential(credential)
print(f"\n✓ Credential checked against its digests")
print(f"  - Claims held: {len(stored_claims)}")
for name in stored_claims:
    print(f"    • {name}")

# ============================================================
# STEP 4: VERIFIER - Request
# ============================================================

verifier = "https://verifier.example.com"
nonce = "XZOUco1u_gEPknxS78sWWg"

print()
print("-" * 60)
print("PRESENTATION REQUEST")
print("-" * 60)
print(f"\n✓ Verifier {verifier} sent nonce {nonce}")

# ============================================================
# STEP 5: HOLDER - Present Selected Claims
# ============================================================

release_claims = {
    "given_name": True,
    "family_name": True,
    "address": {"country": True},
    "nationalities": [None, True]
}

presentation = create_presentation(credential, release_claims, verifier, nonce, holder_key)
print(f"✓ Presentation created ({len(presentation.split('.'))} segments)")

# ============================================================
# STEP 6: VERIFIER - Verify Presentation
# ============================================================

print()
print("-" * 60)
print("VERIFICATION")
print("-" * 60)

trusted_issuers = {issuer: issuer_key.as_dict(private=False)}
result = verify_presentation_result(presentation, trusted_issuers, nonce, verifier)

print(f"\n✓ Verification result:")
print(f"  - Valid: {result.is_valid}")
print(f"  - Disclosed claims: {json.dumps(result.claims, indent=2)}")

# ============================================================
# STEP 7: Replay to Another Verifier
# ============================================================

replayed = verify_presentation_result(presentation, trusted_issuers, nonce, "https://other.example.com")
print(f"\n✓ Replay to another audience rejected: {not replayed.is_valid}")
print(f"  - Reason: {replayed.error_kind}: {replayed.error_message}")

print()
print("=" * 60)
print("COMPLETE WORKFLOW SUCCESSFUL")
print("=" * 60)
