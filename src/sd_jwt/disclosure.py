"""
sd_jwt/disclosure.py
Salted disclosures and the digests that commit to them.
"""
import json
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from .crypto import RandomSource, compact_json, generate_salt, hash_disclosure
from .errors import ClaimShapeInvalidError
from .tree import ClaimNode
from .walk import walk_by_structure


@dataclass(frozen=True)
class SaltedDisclosure:
    """A claim subtree paired with the salt that blinds its digest."""
    salt: str
    value: Any

    def encode(self) -> str:
        """Canonical string form: compact JSON array [salt, value]."""
        return compact_json([self.salt, self.value])


def build_salted_disclosure(
    structure_node: Any,
    value: Any,
    rng: Optional[RandomSource] = None
) -> str:
    """Combinator turning one atomic claim subtree into a disclosure string.

    The structure node is ignored; the walk has already decided that
    ``value`` is disclosed as one unit.
    """
    return SaltedDisclosure(salt=generate_salt(rng), value=value).encode()


def build_digest(structure_node: Any, disclosure: Any) -> str:
    """Combinator turning a disclosure string into its digest.

    Raises:
        ClaimShapeInvalidError: If the SVC position does not hold a string
    """
    if not isinstance(disclosure, str):
        raise ClaimShapeInvalidError("SVC value is not a string. Can't create digest.")
    return hash_disclosure(disclosure)


def parse_salted_disclosure(disclosure: str) -> SaltedDisclosure:
    """Decode a disclosure string back into salt and value.

    Raises:
        ClaimShapeInvalidError: If it is not a two-element [salt, value] array
    """
    try:
        pair = json.loads(disclosure)
    except (TypeError, ValueError) as exc:
        raise ClaimShapeInvalidError(f"Disclosure is not valid JSON: {exc}") from exc

    if not isinstance(pair, list) or len(pair) != 2:
        raise ClaimShapeInvalidError("Disclosure has wrong number of array entries")
    if not isinstance(pair[0], str):
        raise ClaimShapeInvalidError("Disclosure salt is not a string")
    return SaltedDisclosure(salt=pair[0], value=pair[1])


def build_svc(
    structure: ClaimNode,
    claims: ClaimNode,
    rng: Optional[RandomSource] = None
) -> ClaimNode:
    """Salt every atomic claim position selected by the disclosure structure."""
    return walk_by_structure(structure, claims, partial(build_salted_disclosure, rng=rng))


def build_digests(structure: ClaimNode, svc: ClaimNode) -> ClaimNode:
    """Digest an SVC tree built from the same disclosure structure."""
    return walk_by_structure(structure, svc, build_digest)
