"""
Proof Container

Bundles a trie inclusion proof, the latest skipblock (whose header holds
the trie root) and the forward links from genesis to that block.

Proof.verify() authenticates the block against a trusted genesis and
binds the trie root; it returns a VerifiedProof, the only object whose
accessors should be trusted. The getters on Proof itself decode the leaf
without verifying anything.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import HashFactory, to_hex
from core.crypto.signatures import SignatureVerifier, verify_collective
from core.proof.state import Instance, StateChangeBody
from core.schemas.encoding import short_hex
from core.schemas.errors import NotFoundException, RootMismatchException
from core.skipchain.chain import verify_chain
from core.skipchain.models import DataHeader, ForwardLink, Roster, SkipBlock, TrustAnchor
from core.trie.hashing import hash_interior
from core.trie.nodes import TrieInclusionProof
from core.trie.verifier import Existence, exists, proof_root


logger = logging.getLogger(__name__)


class Proof(BaseModel):
    """
    Key/value entry (or its absence) in the trie plus the path to a
    genesis-anchored block.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    inclusion_proof: TrieInclusionProof
    latest: SkipBlock
    links: list[ForwardLink] = Field(default_factory=list)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify(
        self,
        genesis_id: bytes,
        genesis_roster: Roster,
        *,
        hash_factory: HashFactory = hashlib.sha256,
        verify_signature: SignatureVerifier = verify_collective,
        key_length: int | None = None,
    ) -> "VerifiedProof":
        """
        Authenticate the latest block and bind the trie root to it.

        ``key_length`` is handed to the returned VerifiedProof for its lookups.

        Raises:
            InvalidInputException: If genesis_id is empty
            ChainBrokenException: If the links do not lead from genesis to latest
            MalformedProofException: If the inclusion proof has no interior nodes
            RootMismatchException: If the header's trie root is not the proof's root
        """
        header = verify_chain(
            genesis_id,
            genesis_roster,
            self.links,
            self.latest,
            hash_factory=hash_factory,
            verify_signature=verify_signature,
        )
        root = proof_root(self.inclusion_proof, hash_factory)
        if header.trie_root != root:
            logger.warning(
                f"Trie root {short_hex(root)} is not the root "
                f"{short_hex(header.trie_root)} stored in block {short_hex(self.latest.hash)}"
            )
            raise RootMismatchException(
                "root of trie is not in skipblock",
                expected=to_hex(header.trie_root),
                actual=to_hex(root),
            )
        logger.info(
            f"Proof verified: block {self.latest.index} descends from {short_hex(genesis_id)} "
            f"via {len(self.links)} links"
        )
        return VerifiedProof(
            proof=self,
            header=header,
            genesis_id=genesis_id,
            hash_factory=hash_factory,
            key_length=key_length,
        )

    def verify_anchor(
        self,
        anchor: TrustAnchor,
        *,
        hash_factory: HashFactory = hashlib.sha256,
        verify_signature: SignatureVerifier = verify_collective,
        key_length: int | None = None,
    ) -> "VerifiedProof":
        return self.verify(
            anchor.genesis_id,
            anchor.roster,
            hash_factory=hash_factory,
            verify_signature=verify_signature,
            key_length=key_length,
        )

    def exists(
        self,
        key: bytes | None,
        *,
        hash_factory: HashFactory = hashlib.sha256,
        key_length: int | None = None,
    ) -> bool:
        """
        Check the trie path for ``key`` against this proof's own root.

        Only meaningful after verify() has bound that root to a block.
        """
        existence = exists(
            self.inclusion_proof, key, hash_factory=hash_factory, key_length=key_length
        )
        return existence is Existence.PRESENT

    def is_contract(
        self,
        expected: str,
        genesis_id: bytes,
        genesis_roster: Roster,
        *,
        hash_factory: HashFactory = hashlib.sha256,
        verify_signature: SignatureVerifier = verify_collective,
    ) -> bool:
        """
        Verify the proof, then check the stored contract type.

        Verification failures propagate; a type mismatch returns False.
        """
        self.verify(
            genesis_id,
            genesis_roster,
            hash_factory=hash_factory,
            verify_signature=verify_signature,
        )
        return self.get_contract_id() == expected

    # ------------------------------------------------------------------
    # Structural accessors (no verification)
    # ------------------------------------------------------------------

    def matches(self) -> bool:
        """True if the proof carries a leaf with a key; no cryptographic check."""
        leaf = self.inclusion_proof.leaf
        return leaf is not None and len(leaf.key) > 0

    def get_root(self, hash_factory: HashFactory = hashlib.sha256) -> bytes | None:
        if not self.inclusion_proof.interiors:
            return None
        return hash_interior(self.inclusion_proof.interiors[0], hash_factory)

    def get_key(self) -> bytes:
        leaf = self.inclusion_proof.leaf
        return leaf.key if leaf is not None else b""

    def get_values(self) -> StateChangeBody:
        """
        Decode the leaf value.

        Raises:
            NotFoundException: If this is a proof of absence
            MalformedProofException: If the value cannot be decoded
        """
        if not self.matches():
            raise NotFoundException("proof does not hold a value")
        return StateChangeBody.from_bytes(self.inclusion_proof.leaf.value)

    def get_value(self) -> bytes:
        return self.get_values().value

    def get_contract_id(self) -> str:
        return self.get_values().contract_id

    def get_darc_id(self) -> bytes:
        return self.get_values().darc_id

    def get_instance(self) -> Instance:
        return Instance.from_body(self.get_key(), self.get_values())


@dataclass(frozen=True)
class VerifiedProof:
    """
    A proof whose block and trie root have been authenticated.

    Obtain one from Proof.verify(); extractors check that the requested
    key is actually included before returning anything.
    """
    proof: Proof
    header: DataHeader
    genesis_id: bytes
    hash_factory: HashFactory = hashlib.sha256
    key_length: int | None = None

    @property
    def trie_root(self) -> bytes:
        return self.header.trie_root

    def existence(self, key: bytes | None) -> Existence:
        return exists(
            self.proof.inclusion_proof,
            key,
            self.header.trie_root,
            hash_factory=self.hash_factory,
            key_length=self.key_length,
        )

    def exists(self, key: bytes | None) -> bool:
        return self.existence(key) is Existence.PRESENT

    def instance(self, key: bytes) -> Instance:
        """
        Raises:
            NotFoundException: If ``key`` is not included in the trie
        """
        if not self.exists(key):
            raise NotFoundException(
                "key is not included in the authenticated state",
                details={"key": to_hex(key)},
            )
        return self.proof.get_instance()

    def value(self, key: bytes) -> bytes:
        return self.instance(key).value

    def contract_id(self, key: bytes) -> str:
        return self.instance(key).contract_id

    def darc_id(self, key: bytes) -> bytes:
        return self.instance(key).darc_id
