"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for proof verification.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across ledgerproof."""

    # Caller errors
    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Schema & serialization
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Proof verification
    MALFORMED_PROOF = "MALFORMED_PROOF"
    CHAIN_BROKEN = "CHAIN_BROKEN"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Extraction
    NOT_FOUND = "NOT_FOUND"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class LedgerProofError(BaseModel):
    """
    Base error model for structured error reporting.

    Used by check reports, the CLI and the HTTP API to pass errors
    around without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CHAIN_BROKEN],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    @property
    def is_security_failure(self) -> bool:
        """True for failures that mean the server response must not be trusted."""
        return self.code in (
            ErrorCodes.MALFORMED_PROOF,
            ErrorCodes.CHAIN_BROKEN,
            ErrorCodes.ROOT_MISMATCH,
        )

    def to_exception(self) -> "LedgerProofException":
        """Convert this error model to the matching exception type."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return LedgerProofException(
                message=self.message,
                code=self.code,
                details=dict(self.details),
            )
        return exc_type(message=self.message, details=dict(self.details))


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class LedgerProofException(Exception):
    """
    Base exception for all ledgerproof errors.

    Carries structured error information and can be converted
    to/from LedgerProofError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "LEDGERPROOF_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> LedgerProofError:
        """Convert this exception to a LedgerProofError model."""
        return LedgerProofError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputException(LedgerProofException):
    """Raised on caller bugs: missing key, bad arguments."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=details,
        )


class ConfigurationException(LedgerProofException):
    """Raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
        )


class CanonicalizationException(LedgerProofException):
    """Raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class MalformedProofException(LedgerProofException):
    """Raised when proof content is structurally inconsistent."""

    def __init__(
        self,
        message: str,
        depth: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if depth is not None:
            full_details["depth"] = depth
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
        )


class ChainBrokenException(LedgerProofException):
    """Raised when forward-link continuity or a link signature fails."""

    def __init__(
        self,
        message: str,
        link_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if link_index is not None:
            full_details["link_index"] = link_index
        super().__init__(
            message=message,
            code=ErrorCodes.CHAIN_BROKEN,
            details=full_details,
        )


class RootMismatchException(LedgerProofException):
    """Raised when the authenticated trie root differs from the proof's root."""

    def __init__(
        self,
        message: str,
        expected: str | None = None,
        actual: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected is not None:
            full_details["expected"] = expected
        if actual is not None:
            full_details["actual"] = actual
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
        )


class NotFoundException(LedgerProofException):
    """Raised when a value is requested from a proof of absence."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            details=details,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[LedgerProofException]] = {
    ErrorCodes.INVALID_INPUT: InvalidInputException,
    ErrorCodes.CONFIGURATION_ERROR: ConfigurationException,
    ErrorCodes.CANONICALIZATION_ERROR: CanonicalizationException,
    ErrorCodes.MALFORMED_PROOF: MalformedProofException,
    ErrorCodes.CHAIN_BROKEN: ChainBrokenException,
    ErrorCodes.ROOT_MISMATCH: RootMismatchException,
    ErrorCodes.NOT_FOUND: NotFoundException,
}
