"""
Trie proof node schemas.

An inclusion proof is the list of interior nodes from the root down,
one terminal node (a leaf if some key lives at the end of the path, an
empty node otherwise) and the per-tree nonce mixed into terminal hashes.
The terminal is a tagged union so a proof can never carry both.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from core.schemas.encoding import HexBytes


class InteriorNode(BaseModel):
    """Two child hashes; a set bit selects ``left``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    left: HexBytes = Field(..., description="Hash of the child reached by bit 1")
    right: HexBytes = Field(..., description="Hash of the child reached by bit 0")


class LeafNode(BaseModel):
    """A stored key/value pair at the end of its prefix."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["leaf"] = "leaf"
    key: HexBytes = Field(..., description="Full key stored in this leaf")
    value: HexBytes = Field(default=b"", description="Opaque value bytes")
    prefix: list[bool] = Field(
        default_factory=list,
        description="Bits consumed from the root to reach this leaf",
    )


class EmptyNode(BaseModel):
    """Marks that no key exists below ``prefix``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["empty"] = "empty"
    prefix: list[bool] = Field(
        default_factory=list,
        description="Bits consumed from the root to reach this node",
    )

    @property
    def prefix_length(self) -> int:
        return len(self.prefix)


TerminalNode = Annotated[Union[LeafNode, EmptyNode], Field(discriminator="kind")]


class TrieInclusionProof(BaseModel):
    """
    Path from a trie root to the terminal node for some key.

    ``interiors[0]`` is the root; the terminal sits at depth
    ``len(interiors)``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    interiors: list[InteriorNode] = Field(
        default_factory=list,
        description="Interior nodes, root first, increasing depth",
    )
    terminal: TerminalNode = Field(..., description="Leaf or empty node ending the path")
    nonce: HexBytes = Field(default=b"", description="Per-tree nonce")

    @property
    def depth(self) -> int:
        return len(self.interiors)

    @property
    def leaf(self) -> LeafNode | None:
        return self.terminal if isinstance(self.terminal, LeafNode) else None

    @property
    def empty(self) -> EmptyNode | None:
        return self.terminal if isinstance(self.terminal, EmptyNode) else None
