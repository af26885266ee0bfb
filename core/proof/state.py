"""
Ledger state records stored in trie leaves.

A leaf's value bytes hold a StateChangeBody encoded as canonical JSON.
Instance is the client-facing view of one stored entry: the leaf key is
the instance id.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.schemas.canonical import dumps_canonical_bytes, loads_canonical
from core.schemas.encoding import HexBytes
from core.schemas.errors import CanonicalizationException, MalformedProofException


class StateAction(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    REMOVE = "Remove"


class StateChangeBody(BaseModel):
    """Value payload of a trie leaf."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    state_action: StateAction = Field(default=StateAction.CREATE)
    contract_id: str = Field(..., description="Contract type that owns the instance")
    value: HexBytes = Field(default=b"", description="Contract-defined content")
    version: int = Field(default=0, ge=0)
    darc_id: HexBytes = Field(default=b"", description="Access-control rules for the instance")

    def to_bytes(self) -> bytes:
        return dumps_canonical_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "StateChangeBody":
        """
        Decode leaf value bytes.

        Raises:
            MalformedProofException: If the bytes are not a valid body
        """
        try:
            return cls.model_validate(loads_canonical(data))
        except (CanonicalizationException, PydanticValidationError) as e:
            raise MalformedProofException(
                "leaf value is not a valid state change body",
                details={"error": str(e)},
            ) from e


class Instance(BaseModel):
    """One ledger instance as read from a proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    instance_id: HexBytes
    contract_id: str
    value: HexBytes = b""
    darc_id: HexBytes = b""
    version: int = 0

    @classmethod
    def from_body(cls, instance_id: bytes, body: StateChangeBody) -> "Instance":
        return cls(
            instance_id=instance_id,
            contract_id=body.contract_id,
            value=body.value,
            darc_id=body.darc_id,
            version=body.version,
        )
