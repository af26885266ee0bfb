"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "ledgerproof-api"
    version: str = "v1"


class InstanceInfo(BaseModel):
    """Decoded value of a verified key."""

    instance_id: str = Field(..., description="Key of the instance (hex)")
    contract_id: str = Field(..., description="Contract that owns the instance")
    value: str = Field(..., description="Instance value (hex)")
    darc_id: str = Field(default="0x", description="Governing darc (hex)")
    version: int = Field(default=0)


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(..., description="Overall verification status")
    present: bool | None = Field(
        default=None,
        description="Whether the key is included (only when a key was given)",
    )
    latest_index: int = Field(..., description="Index of the latest block in the proof")
    trie_root: str | None = Field(default=None, description="Verified trie root (hex)")
    instance: InstanceInfo | None = Field(
        default=None,
        description="Decoded instance if the key is present and verified",
    )
    checks: list[dict[str, Any]] = Field(default_factory=list)
    error: dict[str, Any] | None = Field(default=None)
    errors: list[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
