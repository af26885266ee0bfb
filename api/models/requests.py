"""
API Request Models

Pydantic models for API request validation.
"""

from pydantic import BaseModel, ConfigDict, Field

from core.proof import Proof
from core.schemas.encoding import HexBytes
from core.skipchain.models import Roster


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    model_config = ConfigDict(extra="forbid")

    proof: Proof = Field(..., description="Proof document as returned by the ledger")
    genesis_id: HexBytes = Field(..., description="Trusted genesis block id (hex)")
    roster: Roster | None = Field(
        default=None,
        description="Genesis roster; defaults to the configured trust anchor",
    )
    key: HexBytes | None = Field(
        default=None,
        description="Key to check for inclusion (hex)",
    )
    include_checks: bool = Field(
        default=True,
        description="Include detailed verification checks in response",
    )
