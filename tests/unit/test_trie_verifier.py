"""
Trie Verifier Unit Tests
Tests for core/trie/verifier.py

Tests:
- inclusion of stored keys
- absence via an empty node and via a leaf holding another key
- tamper detection anywhere on the path
- fixed-size keys rejecting leaves whose key absorbed value bytes
- malformed proofs and caller errors
"""
import hashlib

import pytest

from core.schemas.errors import (
    InvalidInputException,
    MalformedProofException,
    RootMismatchException,
)
from core.trie.hashing import hash_empty, hash_leaf
from core.trie.nodes import EmptyNode, InteriorNode, LeafNode, TrieInclusionProof
from core.trie.verifier import (
    Existence,
    TrieVerifier,
    exists,
    inspect_path,
    proof_root,
)
from fixtures.trie_fixtures import make_trie


def _flip(data: bytes) -> bytes:
    return bytes([data[0] ^ 0x01]) + data[1:]


class TestInclusion:

    @pytest.mark.parametrize("key", [b"\x80", b"\xc0", b"\x10"])
    def test_stored_keys_present(self, trie, key):
        proof = trie.prove(key)
        assert exists(proof, key, trie.root) is Existence.PRESENT

    def test_path_depths(self, trie):
        assert trie.prove(b"\x80").depth == 2
        assert trie.prove(b"\x10").depth == 1

    def test_proof_root_matches_trie(self, trie):
        assert proof_root(trie.prove(b"\x80")) == trie.root

    def test_result_details(self, trie):
        result = inspect_path(trie.prove(b"\xc0"), b"\xc0", trie.root)
        assert result.present
        assert result.authenticated
        assert result.depth == 2

    def test_single_key_trie(self):
        """One key: a single interior root with the leaf on one side."""
        trie = make_trie({b"k": b"v"})
        proof = trie.prove(b"k")
        assert proof.depth == 1
        assert proof.leaf is not None
        assert proof.leaf.prefix == [False]
        assert exists(proof, b"k", trie.root) is Existence.PRESENT

    def test_multi_byte_keys(self):
        entries = {b"\x00\x01": b"a", b"\x00\x02": b"b", b"\xff\x00": b"c"}
        trie = make_trie(entries)
        for key in entries:
            assert exists(trie.prove(key), key, trie.root) is Existence.PRESENT

    def test_without_root_argument(self, trie):
        """Without root_hash the proof's own root is used."""
        assert exists(trie.prove(b"\x10"), b"\x10") is Existence.PRESENT


class TestAbsence:

    def test_absence_via_empty_node(self):
        trie = make_trie({b"\x80": b"a", b"\xc0": b"b"})
        proof = trie.prove(b"\x10")
        assert proof.empty is not None
        result = inspect_path(proof, b"\x10", trie.root)
        assert result.existence is Existence.ABSENT
        assert result.authenticated

    def test_absence_via_differing_leaf(self, trie):
        """0xa0 follows the path to the leaf storing 0x80."""
        proof = trie.prove(b"\xa0")
        assert proof.leaf is not None
        assert proof.leaf.key == b"\x80"
        result = inspect_path(proof, b"\xa0", trie.root)
        assert result.existence is Existence.ABSENT
        assert result.authenticated

    def test_empty_trie(self):
        trie = make_trie({})
        assert exists(trie.prove(b"\x42"), b"\x42", trie.root) is Existence.ABSENT

    def test_proof_for_other_key_does_not_prove_inclusion(self, trie):
        """A valid proof for 0x80 says nothing about 0xc0."""
        result = inspect_path(trie.prove(b"\x80"), b"\xc0", trie.root)
        assert not result.present
        assert not result.authenticated


class TestTamperDetection:

    def test_tampered_leaf_value(self, trie):
        proof = trie.prove(b"\x80")
        tampered = proof.model_copy(
            update={"terminal": proof.leaf.model_copy(update={"value": b"forged"})}
        )
        result = inspect_path(tampered, b"\x80", trie.root)
        assert result.existence is Existence.ABSENT
        assert not result.authenticated

    def test_tampered_leaf_key(self, trie):
        """Swapping the leaf key to the looked-up key breaks the leaf hash."""
        proof = trie.prove(b"\xa0")
        tampered = proof.model_copy(
            update={"terminal": proof.leaf.model_copy(update={"key": b"\xa0"})}
        )
        result = inspect_path(tampered, b"\xa0", trie.root)
        assert not result.present
        assert not result.authenticated

    def test_tampered_nonce(self, trie):
        proof = trie.prove(b"\x10")
        tampered = proof.model_copy(update={"nonce": b"\x00" * 32})
        assert exists(tampered, b"\x10", trie.root) is Existence.ABSENT

    def test_tampered_deep_interior(self, trie):
        """Changing a non-root interior breaks the link to its parent."""
        proof = trie.prove(b"\x80")
        interiors = list(proof.interiors)
        interiors[1] = InteriorNode(left=interiors[1].left, right=_flip(interiors[1].right))
        tampered = proof.model_copy(update={"interiors": interiors})
        result = inspect_path(tampered, b"\x80", trie.root)
        assert result.existence is Existence.ABSENT
        assert not result.authenticated
        assert result.depth == 1

    def test_tampered_root_rejected_against_trusted_root(self, trie):
        proof = trie.prove(b"\x80")
        interiors = list(proof.interiors)
        interiors[0] = InteriorNode(left=_flip(interiors[0].left), right=interiors[0].right)
        tampered = proof.model_copy(update={"interiors": interiors})
        with pytest.raises(RootMismatchException):
            exists(tampered, b"\x80", trie.root)

    def test_empty_node_replaced_by_forged_leaf(self):
        trie = make_trie({b"\x80": b"a", b"\xc0": b"b"})
        proof = trie.prove(b"\x10")
        forged = proof.model_copy(
            update={"terminal": LeafNode(key=b"\x10", value=b"x", prefix=[False])}
        )
        assert exists(forged, b"\x10", trie.root) is Existence.ABSENT

    @pytest.mark.parametrize("index", [0, 1])
    def test_flipped_leaf_prefix_bit(self, trie, index):
        proof = trie.prove(b"\x80")
        prefix = list(proof.leaf.prefix)
        prefix[index] = not prefix[index]
        tampered = proof.model_copy(
            update={"terminal": proof.leaf.model_copy(update={"prefix": prefix})}
        )
        result = inspect_path(tampered, b"\x80", trie.root)
        assert result.existence is Existence.ABSENT
        assert not result.authenticated

    def test_flipped_empty_prefix_bit(self):
        trie = make_trie({b"\x80": b"a", b"\xc0": b"b"})
        proof = trie.prove(b"\x10")
        assert proof.empty.prefix == [False]
        tampered = proof.model_copy(update={"terminal": EmptyNode(prefix=[True])})
        result = inspect_path(tampered, b"\x10", trie.root)
        assert result.existence is Existence.ABSENT
        assert not result.authenticated


class TestMalformed:

    def test_nil_key(self, trie):
        with pytest.raises(InvalidInputException, match="key is nil"):
            exists(trie.prove(b"\x80"), None, trie.root)
        with pytest.raises(InvalidInputException):
            exists(trie.prove(b"\x80"), b"", trie.root)

    def test_no_interior_nodes(self):
        proof = TrieInclusionProof(interiors=[], terminal=EmptyNode(prefix=[]))
        with pytest.raises(MalformedProofException, match="no interior nodes"):
            exists(proof, b"\x01")

    def test_shared_empty_node(self):
        """Every key walking right at the root ends at the same empty node."""
        trie = make_trie({b"\x80": b"a", b"\xc0": b"b"})
        proof = trie.prove(b"\x10")
        assert exists(proof, b"\x20", trie.root) is Existence.ABSENT

    def test_empty_node_prefix_mismatch(self):
        """A hash-consistent empty node whose prefix disagrees with the path."""
        nonce = b"\x01"
        empty = EmptyNode(prefix=[True])
        root = InteriorNode(left=b"\x00" * 32, right=hash_empty(empty, nonce))
        proof = TrieInclusionProof(interiors=[root], terminal=empty, nonce=nonce)
        with pytest.raises(MalformedProofException, match="invalid prefix in empty node"):
            exists(proof, b"\x00")

    def test_leaf_prefix_mismatch(self):
        nonce = b"\x01"
        leaf = LeafNode(key=b"\x00", value=b"v", prefix=[True])
        root = InteriorNode(left=b"\x00" * 32, right=hash_leaf(leaf, nonce))
        proof = TrieInclusionProof(interiors=[root], terminal=leaf, nonce=nonce)
        with pytest.raises(MalformedProofException, match="invalid prefix in leaf node"):
            exists(proof, b"\x00")

    def test_proof_deeper_than_key(self):
        node = InteriorNode(left=b"\x00" * 32, right=b"\x00" * 32)
        proof = TrieInclusionProof(
            interiors=[node] * 9,
            terminal=EmptyNode(prefix=[False] * 9),
        )
        with pytest.raises(MalformedProofException) as exc_info:
            exists(proof, b"\x00")
        assert exc_info.value.details["depth"] == 9

    def test_terminal_kind_discriminator(self):
        """JSON terminals are parsed by their kind tag."""
        proof = TrieInclusionProof.model_validate(
            {
                "interiors": [{"left": "0x" + "00" * 32, "right": "0x" + "11" * 32}],
                "terminal": {"kind": "empty", "prefix": [False]},
                "nonce": "0x00",
            }
        )
        assert proof.empty is not None
        assert proof.leaf is None


class TestFixedKeyLength:
    """key_length stops value bytes from being read as part of the key."""

    @pytest.fixture
    def split_leaf(self):
        """Leaf (0x80, 0x01 'secret') rewritten as (0x8001, 'secret') with the same hash."""
        trie = make_trie({b"\x80": b"\x01secret", b"\xc0": b"b"})
        proof = trie.prove(b"\x80")
        leaf = proof.leaf
        forged = proof.model_copy(
            update={"terminal": LeafNode(key=b"\x80\x01", value=b"secret", prefix=leaf.prefix)}
        )
        assert hash_leaf(forged.leaf, forged.nonce) == hash_leaf(leaf, proof.nonce)
        return trie, forged

    def test_stored_keys_still_present(self, trie):
        for key in (b"\x80", b"\xc0", b"\x10"):
            assert exists(trie.prove(key), key, trie.root, key_length=1) is Existence.PRESENT

    def test_absence_still_authenticated(self, trie):
        result = inspect_path(trie.prove(b"\xa0"), b"\xa0", trie.root, key_length=1)
        assert result.existence is Existence.ABSENT
        assert result.authenticated

    def test_query_of_wrong_length_rejected(self, split_leaf):
        trie, forged = split_leaf
        with pytest.raises(InvalidInputException) as exc_info:
            inspect_path(forged, b"\x80\x01", trie.root, key_length=1)
        assert exc_info.value.details == {"key_length": 2, "expected": 1}

    def test_leaf_of_wrong_length_rejected(self, split_leaf):
        trie, forged = split_leaf
        with pytest.raises(MalformedProofException, match="leaf key has 2 bytes, expected 1"):
            inspect_path(forged, b"\x80", trie.root, key_length=1)

    def test_bound_key_length(self, split_leaf):
        trie, forged = split_leaf
        verifier = TrieVerifier(key_length=1)
        assert verifier.exists(trie.prove(b"\x80"), b"\x80", trie.root) is Existence.PRESENT
        with pytest.raises(MalformedProofException):
            verifier.exists(forged, b"\x80", trie.root)


class TestTrieVerifier:

    def test_bound_hash_factory(self):
        trie = make_trie(hash_factory=hashlib.sha512)
        verifier = TrieVerifier(hash_factory=hashlib.sha512)
        proof = trie.prove(b"\x80")
        assert verifier.root(proof) == trie.root
        assert verifier.exists(proof, b"\x80", trie.root) is Existence.PRESENT
        assert verifier.inspect(proof, b"\x80").authenticated

    def test_wrong_hash_factory_fails(self):
        trie = make_trie(hash_factory=hashlib.sha512)
        proof = trie.prove(b"\x80")
        with pytest.raises(RootMismatchException):
            TrieVerifier().exists(proof, b"\x80", trie.root)
