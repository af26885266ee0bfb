"""
Schemas & Canonicalization
File: verification.py

Purpose: Standard result format for verification steps.
Used by the check report, batch verification, the CLI and the API to
communicate verification outcomes without raising.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import LedgerProofError


# Severity levels for checks
CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """
    Result of a single verification check.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level failure."""
        return not self.ok and self.severity == "error"

    @property
    def is_warning(self) -> bool:
        """Check if this is a warning."""
        return self.severity == "warn"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def warning(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a warning check result."""
        return cls(
            check_id=check_id,
            ok=True,  # Warnings don't fail the check
            severity="warn",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Complete result of verifying one proof.

    ``present`` is only meaningful when a key was checked: True for an
    authenticated inclusion, False for an authenticated absence, None
    when no key was given or verification stopped early.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="Overall verification success",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results",
    )
    present: bool | None = Field(
        default=None,
        description="Whether the requested key is included in the trie",
    )
    error: LedgerProofError | None = Field(
        default=None,
        description="Error details if verification failed",
    )

    @property
    def has_errors(self) -> bool:
        """Check if any checks failed with error severity."""
        return any(check.is_error for check in self.checks)

    @property
    def has_warnings(self) -> bool:
        """Check if any checks produced warnings."""
        return any(check.is_warning for check in self.checks)

    def get_error_messages(self) -> list[str]:
        """Get all error messages."""
        return [check.message for check in self.checks if check.is_error]

    @classmethod
    def success(
        cls,
        checks: list[CheckResult] | None = None,
        present: bool | None = None,
    ) -> "VerificationResult":
        """Create a successful verification result."""
        return cls(ok=True, checks=checks or [], present=present)

    @classmethod
    def failure(
        cls,
        checks: list[CheckResult],
        error: LedgerProofError | None = None,
    ) -> "VerificationResult":
        """Create a failed verification result."""
        return cls(ok=False, checks=checks, error=error)
