"""
Skipchain schemas.

A SkipBlock is identified by a hash of its own content, carries the
DataHeader that commits to the state trie, and names the roster that was
authorized to sign at that block. ForwardLinks are signed statements that
one block is the authorized successor of another; a link may announce a
new roster that signs from the next link on.
"""
from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import HashFactory, digest_parts, hash_canonical
from core.crypto.signatures import CollectiveSignature
from core.schemas.encoding import HexBytes


class ServerIdentity(BaseModel):
    """One validator: its Ed25519 public key plus descriptive metadata."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    public_key: HexBytes = Field(..., description="32-byte Ed25519 public key")
    address: str = Field(default="", description="Network address, informational only")
    description: str = Field(default="")


class Roster(BaseModel):
    """Ordered validator set; order defines collective-signature mask bits."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    servers: list[ServerIdentity] = Field(default_factory=list)

    @classmethod
    def from_public_keys(cls, public_keys: list[bytes]) -> "Roster":
        return cls(servers=[ServerIdentity(public_key=pk) for pk in public_keys])

    @property
    def public_keys(self) -> list[bytes]:
        return [si.public_key for si in self.servers]

    @property
    def size(self) -> int:
        return len(self.servers)

    def roster_id(self, hash_factory: HashFactory = hashlib.sha256) -> bytes:
        """H(pk_0 || pk_1 || ...); keys are fixed-size so this is unambiguous."""
        return digest_parts(*self.public_keys, hash_factory=hash_factory)


class DataHeader(BaseModel):
    """Ledger metadata stored in a block; ``trie_root`` authenticates the state."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    trie_root: HexBytes = Field(..., description="Root hash of the state trie")
    client_transaction_hash: HexBytes = Field(default=b"")
    state_change_hash: HexBytes = Field(default=b"")
    timestamp: int = Field(default=0, description="Block time, nanoseconds since epoch")


class SkipBlock(BaseModel):
    """
    One block of ledger history.

    ``hash`` is the block identifier and must equal compute_hash();
    ``genesis_id`` is empty for the genesis block itself.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0)
    genesis_id: HexBytes = Field(default=b"")
    roster: Roster
    header: DataHeader
    hash: HexBytes = Field(..., description="Content-derived block identifier")

    def content(self) -> dict:
        return {
            "index": self.index,
            "genesis_id": self.genesis_id,
            "roster": self.roster,
            "header": self.header,
        }

    def compute_hash(self, hash_factory: HashFactory = hashlib.sha256) -> bytes:
        return hash_canonical(self.content(), hash_factory)

    def is_intact(self, hash_factory: HashFactory = hashlib.sha256) -> bool:
        return self.hash == self.compute_hash(hash_factory)

    @property
    def is_genesis(self) -> bool:
        return self.index == 0 and not self.genesis_id


class TrustAnchor(BaseModel):
    """Genesis id and roster the caller trusts out-of-band (pinned config)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    genesis_id: HexBytes
    roster: Roster
    name: str = Field(default="")


def link_message(
    from_id: bytes,
    to_id: bytes,
    new_roster: Roster | None = None,
    hash_factory: HashFactory = hashlib.sha256,
) -> bytes:
    """Message a forward link's signature covers: H(from || to [|| roster_id])."""
    parts = [from_id, to_id]
    if new_roster is not None:
        parts.append(new_roster.roster_id(hash_factory))
    return digest_parts(*parts, hash_factory=hash_factory)


class ForwardLink(BaseModel):
    """Signed assertion that ``to`` is the authorized successor of ``from``."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    from_id: HexBytes = Field(..., alias="from")
    to_id: HexBytes = Field(..., alias="to")
    new_roster: Roster | None = Field(
        default=None,
        description="Roster that signs links starting at ``to``",
    )
    signature: CollectiveSignature

    def message(self, hash_factory: HashFactory = hashlib.sha256) -> bytes:
        return link_message(self.from_id, self.to_id, self.new_roster, hash_factory)
