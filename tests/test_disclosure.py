"""
tests/test_disclosure.py
Tests for salted disclosures and digest trees.
"""
import itertools
import json

import pytest
from sd_jwt.crypto import hash_disclosure
from sd_jwt.disclosure import (
    SaltedDisclosure,
    build_salted_disclosure,
    build_digest,
    build_svc,
    build_digests,
    parse_salted_disclosure,
)
from sd_jwt.errors import ClaimShapeInvalidError


class TestSaltedDisclosure:
    """Tests for disclosure strings."""

    def test_encode_is_compact_pair(self):
        assert SaltedDisclosure("abc", {"x": 1}).encode() == '["abc",{"x":1}]'

    def test_build_uses_fresh_salts(self):
        """Two disclosures of the same value differ."""
        a = build_salted_disclosure(None, "Alice")
        b = build_salted_disclosure(None, "Alice")
        assert a != b
        assert json.loads(a)[1] == json.loads(b)[1] == "Alice"

    def test_build_is_string(self):
        """Disclosures are always string leaves, even for composite values."""
        value = build_salted_disclosure(None, {"street": "Main"})
        assert isinstance(value, str)

    def test_parse(self):
        parsed = parse_salted_disclosure('["salt",[1,2]]')
        assert parsed == SaltedDisclosure("salt", [1, 2])

    @pytest.mark.parametrize("text", [
        '["only-salt"]',
        '["a","b","c"]',
        '{"salt":"a"}',
        '[1,"value"]',
        'not json',
    ])
    def test_parse_rejects_bad_shapes(self, text):
        with pytest.raises(ClaimShapeInvalidError):
            parse_salted_disclosure(text)


class TestBuildDigest:
    """Tests for the digest combinator."""

    def test_digest_of_string(self):
        assert build_digest(None, '["s","v"]') == hash_disclosure('["s","v"]')

    def test_non_string_rejected(self):
        """Digest walk over a composite SVC value fails."""
        with pytest.raises(ClaimShapeInvalidError, match="not a string"):
            build_digest(None, {"nested": "x"})


class TestDigestTrees:
    """SVC and sd_digests built from the same structure."""

    def test_trees_are_isomorphic(self, claims):
        structure = {"address": {}}
        svc = build_svc(structure, claims)
        digests = build_digests(structure, svc)

        assert list(svc) == list(digests) == list(claims)
        assert set(svc["address"]) == set(digests["address"]) == set(claims["address"])
        for key, disclosure in svc["address"].items():
            assert digests["address"][key] == hash_disclosure(disclosure)

    def test_atomic_subtree_is_one_disclosure(self, claims):
        """Without structure the address is disclosed as one unit."""
        svc = build_svc({}, claims)
        assert isinstance(svc["address"], str)
        assert json.loads(svc["address"])[1] == claims["address"]

    def test_array_broadcast_salts_each_element(self):
        """A one-element structure array gives N independent disclosures."""
        claims = {"nationalities": ["DE", "FR", "IT"]}
        svc = build_svc({"nationalities": [None]}, claims)
        digests = build_digests({"nationalities": [None]}, svc)

        salts = [json.loads(d)[0] for d in svc["nationalities"]]
        assert len(set(salts)) == 3
        assert [json.loads(d)[1] for d in svc["nationalities"]] == ["DE", "FR", "IT"]
        assert len(set(digests["nationalities"])) == 3

    def test_injected_rng_is_deterministic(self, claims, counting_rng):
        """Same random source sequence yields identical SVC."""
        def make_rng():
            counter = itertools.count(1)
            return lambda n: next(counter).to_bytes(n, "big")

        assert build_svc({}, claims, rng=make_rng()) == build_svc({}, claims, rng=make_rng())
        first = build_svc({}, {"a": 1}, rng=counting_rng)
        assert json.loads(first["a"])[0] == "AAAAAAAAAAAAAAAAAAAAAQ"
